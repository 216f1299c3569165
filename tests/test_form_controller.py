"""
Form State Controller tests.
Covers edit-time re-validation, reason exclusivity, prior-IVF visibility
and Canonical Request building.
"""

import pytest

from ivf_estimator.errors import RequestBuildError
from ivf_estimator.form.controller import FormStateController, normalize_reasons, toggled_reasons
from ivf_estimator.models.form import FormField, Reason
from ivf_estimator.models.request import CalculateRequest
from ivf_estimator.validation.fields import AGE_MESSAGE, PRIOR_IVF_MESSAGE, REASONS_MESSAGE, WEIGHT_MESSAGE


def filled_controller(**overrides):
    answers = {
        "eggSource": "own",
        "priorIvfCycles": "no",
        "age": "34",
        "weightLbs": "150",
        "heightFeet": "5",
        "heightInches": "6",
        "priorPregnancies": "0",
        "priorBirths": "0",
        "reasons": ["endometriosis"],
    }
    answers.update(overrides)
    controller = FormStateController()
    for field, value in answers.items():
        controller.set_field(field, value)
    return controller


class TestReasonToggling:
    """Exclusive-terminal tags and the one-directional clearing rule."""

    @pytest.mark.parametrize("current", [
        ["endometriosis"],
        ["tubal_factor", "uterine_factor", "other"],
        ["unexplained"],
        ["unknown"],
    ])
    def test_unknown_replaces_any_selection(self, current):
        controller = FormStateController()
        controller.set_field("reasons", current)
        assert controller.toggle_reason("unknown") == ["unknown"]

    def test_specific_reason_clears_unknown(self):
        controller = FormStateController()
        controller.toggle_reason("unknown")
        assert controller.toggle_reason("endometriosis") == ["endometriosis"]

    def test_specific_reason_clears_unexplained(self):
        assert toggled_reasons(["unexplained"], "tubal_factor") == ["tubal_factor"]

    def test_unexplained_replaces_unknown(self):
        assert toggled_reasons(["unknown"], "unexplained") == ["unexplained"]

    def test_specific_reasons_accumulate_and_toggle_off(self):
        controller = FormStateController()
        controller.toggle_reason(Reason.ENDOMETRIOSIS)
        controller.toggle_reason("tubal_factor")
        assert controller.reasons == ["endometriosis", "tubal_factor"]
        assert controller.toggle_reason("endometriosis") == ["tubal_factor"]

    def test_selecting_exclusive_tag_again_keeps_it(self):
        controller = FormStateController()
        controller.toggle_reason("unknown")
        assert controller.toggle_reason("unknown") == ["unknown"]

    def test_unselecting_last_reason_sets_error(self):
        controller = FormStateController()
        controller.toggle_reason("other")
        assert FormField.REASONS not in controller.errors
        controller.toggle_reason("other")
        assert controller.errors[FormField.REASONS] == REASONS_MESSAGE

    def test_unknown_tag_is_a_programming_error(self):
        with pytest.raises(ValueError):
            FormStateController().toggle_reason("stress")

    def test_normalize_replays_in_order(self):
        assert normalize_reasons(["unknown", "endometriosis"]) == ["endometriosis"]
        assert normalize_reasons(["endometriosis", "unknown"]) == ["unknown"]
        assert normalize_reasons(["other", "other", "tubal_factor"]) == ["other", "tubal_factor"]
        assert normalize_reasons(None) == []


class TestEditing:

    def test_edit_validates_only_that_field(self):
        controller = FormStateController()
        errors = controller.set_field("age", "19")
        assert errors == {FormField.AGE: AGE_MESSAGE}

    def test_fixing_a_field_clears_its_error(self):
        controller = FormStateController()
        controller.set_field("age", "19")
        controller.set_field("age", "20")
        assert controller.errors == {}

    def test_raw_value_is_stored_verbatim(self):
        controller = FormStateController()
        controller.set_field("weightLbs", " 150 ")
        assert controller.draft.weight_lbs == " 150 "

    def test_switching_to_donor_clears_prior_ivf_error(self):
        controller = FormStateController()
        controller.set_field("eggSource", "own")
        assert controller.errors[FormField.PRIOR_IVF_CYCLES] == PRIOR_IVF_MESSAGE
        controller.set_field("eggSource", "donor")
        assert FormField.PRIOR_IVF_CYCLES not in controller.errors
        assert FormField.PRIOR_IVF_CYCLES not in controller.applicable_fields

    def test_prior_ivf_edit_while_hidden_reports_nothing(self):
        controller = FormStateController()
        controller.set_field("eggSource", "donor")
        assert controller.set_field("priorIvfCycles", "bogus") == {}

    def test_unknown_field_raises(self):
        with pytest.raises(ValueError):
            FormStateController().set_field("retrievals", "2")

    def test_oversized_number_is_invalid(self):
        controller = FormStateController()
        assert controller.set_field("weightLbs", 10**400) == {FormField.WEIGHT_LBS: WEIGHT_MESSAGE}
        assert controller.set_field("age", -10**400) == {
            FormField.WEIGHT_LBS: WEIGHT_MESSAGE,
            FormField.AGE: AGE_MESSAGE,
        }

    @pytest.mark.parametrize("raw", [5, 10**400, {"endometriosis": True}])
    def test_reasons_that_are_not_a_list_select_nothing(self, raw):
        controller = FormStateController()
        assert controller.set_field("reasons", raw) == {FormField.REASONS: REASONS_MESSAGE}
        assert controller.reasons == []

    def test_non_string_reason_tag_is_reported(self):
        controller = FormStateController()
        errors = controller.set_field("reasons", ["endometriosis", 7])
        assert errors == {FormField.REASONS: "invalid reason: 7"}

    def test_draft_is_a_copy(self):
        controller = FormStateController()
        draft = controller.draft
        draft.age = "40"
        assert controller.draft.age == ""


class TestSubmissionGate:

    def test_complete_scenario(self):
        controller = filled_controller()
        assert controller.validate_all() == {}
        request = controller.build_request()
        assert isinstance(request, CalculateRequest)
        assert request.age == 34
        assert request.height_ft == 5 and request.height_in == 6
        assert request.height_total_inches == 66
        assert request.prior_ivf_cycles == "no"
        assert request.reasons == ("endometriosis",)

    def test_below_range_age_blocks_submission(self):
        controller = filled_controller(age="19")
        assert controller.validate_all() == {FormField.AGE: AGE_MESSAGE}
        with pytest.raises(RequestBuildError) as excinfo:
            controller.build_request()
        assert FormField.AGE in excinfo.value.errors
        assert isinstance(excinfo.value, RuntimeError)

    def test_donor_with_unset_prior_ivf(self):
        controller = filled_controller(eggSource="donor", priorIvfCycles="")
        assert controller.validate_all() == {}
        request = controller.build_request()
        assert request.egg_source == "donor"
        assert request.prior_ivf_cycles is None
        assert "priorIvfCycles" not in request.to_payload()

    def test_donor_drops_answered_prior_ivf(self):
        request = filled_controller(eggSource="donor", priorIvfCycles="yes").build_request()
        assert request.prior_ivf_cycles is None

    def test_counts_are_coerced(self):
        request = filled_controller(priorPregnancies="2", priorBirths="2 or more").build_request()
        assert request.prior_pregnancies == 2
        assert request.prior_births == 2

    def test_empty_draft_lists_every_visible_field(self):
        errors = FormStateController().validate_all()
        assert FormField.EGG_SOURCE in errors
        assert FormField.PRIOR_IVF_CYCLES not in errors
        assert len(errors) == 8

    def test_validate_all_replaces_error_map(self):
        controller = FormStateController()
        controller.set_field("age", "19")
        controller.set_field("age", "21")
        errors = controller.validate_all()
        assert FormField.AGE not in errors
        assert controller.errors == errors

    def test_payload_uses_calculator_field_names(self):
        payload = filled_controller(weightLbs="150").build_request().to_payload()
        assert payload == {
            "age": 34,
            "weightLbs": 150,
            "heightFt": 5,
            "heightIn": 6,
            "eggSource": "own",
            "priorIvfCycles": "no",
            "priorPregnancies": 0,
            "priorBirths": 0,
            "reasons": ["endometriosis"],
        }
        assert isinstance(payload["weightLbs"], int)

    def test_fractional_weight_is_kept(self):
        payload = filled_controller(weightLbs="150.5").build_request().to_payload()
        assert payload["weightLbs"] == 150.5

    def test_reset_discards_draft(self):
        controller = filled_controller(age="19")
        controller.validate_all()
        controller.reset()
        assert controller.errors == {}
        assert controller.draft.age == ""
        assert controller.reasons == []
