"""
Form State Controller

Owns one respondent's Draft Input and the Error Map derived from it. Every
edit goes through set_field() or toggle_reason(): the value is stored, the
normalization rules run (reason exclusivity, prior-IVF visibility), and only
the fields whose validity could have changed are re-checked.

One controller per session; it is not safe for concurrent mutation.
"""

import logging
from typing import Any, Iterable

from ivf_estimator.errors import RequestBuildError
from ivf_estimator.models.form import (
    DraftInput,
    EggSource,
    FormField,
    PriorIvfCycles,
    Reason,
    is_exclusive,
)
from ivf_estimator.models.request import CalculateRequest
from ivf_estimator.validation.fields import (
    applicable_fields,
    dependent_fields,
    parse_choice,
    parse_count,
    parse_number,
    parse_whole_number,
    validate_field,
    validate_fields,
)

logger = logging.getLogger(__name__)


def toggled_reasons(current: Iterable[str], tag: str) -> list[str]:
    """
    Reason list after the respondent clicks ``tag``.

    An exclusive-terminal tag ("unexplained", "unknown") replaces the whole
    selection. Any other tag toggles its own membership and drops exclusive
    tags already selected. Unselecting a specific reason never brings an
    exclusive one back.
    """
    if is_exclusive(tag):
        return [tag]
    reasons = [r for r in current if not is_exclusive(r)]
    if tag in reasons:
        reasons.remove(tag)
    else:
        reasons.append(tag)
    return reasons


def normalize_reasons(raw: Any) -> list[str]:
    """Replay a submitted reason list through the toggle rules, in order."""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (list, tuple)):
        # a number or an object is not a selection
        return []
    reasons: list[str] = []
    for tag in raw:
        if isinstance(tag, str):
            tag = tag.strip()
        if tag in reasons:
            continue
        reasons = toggled_reasons(reasons, tag)
    return reasons


class FormStateController:
    def __init__(self, draft: DraftInput | None = None):
        self._draft = draft.model_copy(deep=True) if draft is not None else DraftInput()
        self._errors: dict[FormField, str] = {}

    @property
    def draft(self) -> DraftInput:
        return self._draft.model_copy(deep=True)

    @property
    def errors(self) -> dict[FormField, str]:
        return dict(self._errors)

    @property
    def reasons(self) -> list[str]:
        return list(self._draft.reasons)

    @property
    def applicable_fields(self) -> tuple[FormField, ...]:
        return applicable_fields(self._draft.values())

    def set_field(self, field: FormField | str, raw_value: Any) -> dict[FormField, str]:
        """Store a raw value, apply derivation rules, re-check affected fields."""
        field = FormField(field)
        if field is FormField.REASONS:
            raw_value = normalize_reasons(raw_value)
        self._draft.put(field, raw_value)
        logger.debug("Field %s edited", field.value)
        self._revalidate((field, *dependent_fields(field)))
        return self.errors

    def toggle_reason(self, tag: Reason | str) -> list[str]:
        """Click a reason checkbox; returns the resulting selection."""
        tag = Reason(tag).value
        self._draft.reasons = toggled_reasons(self._draft.reasons, tag)
        self._revalidate((FormField.REASONS,))
        return self.reasons

    def validate_all(self) -> dict[FormField, str]:
        """Submission gate: full Error Map over the applicable fields."""
        self._errors = validate_fields(self._draft.values())
        return self.errors

    def build_request(self) -> CalculateRequest:
        """
        Canonical Request for the calculator.

        Raises:
            RequestBuildError: The draft still has field errors. Callers must
                gate on validate_all() first.
        """
        errors = self.validate_all()
        if errors:
            raise RequestBuildError(errors)

        d = self._draft
        egg_source = parse_choice(d.egg_source, EggSource)
        prior_ivf = None
        if egg_source is EggSource.OWN:
            prior_ivf = parse_choice(d.prior_ivf_cycles, PriorIvfCycles).value

        return CalculateRequest(
            age=parse_whole_number(d.age),
            weight_lbs=parse_number(d.weight_lbs),
            height_ft=parse_whole_number(d.height_feet),
            height_in=parse_whole_number(d.height_inches),
            egg_source=egg_source.value,
            prior_ivf_cycles=prior_ivf,
            prior_pregnancies=parse_count(d.prior_pregnancies),
            prior_births=parse_count(d.prior_births),
            reasons=tuple(d.reasons),
        )

    def reset(self) -> None:
        """Discard the draft and its errors (end of session)."""
        self._draft = DraftInput()
        self._errors = {}

    def _revalidate(self, fields: Iterable[FormField]) -> None:
        values = self._draft.values()
        visible = applicable_fields(values)
        for field in fields:
            if field not in visible:
                self._errors.pop(field, None)
                continue
            result = validate_field(field, values[field], values)
            if result.is_valid:
                self._errors.pop(field, None)
            else:
                self._errors[field] = result.reason
