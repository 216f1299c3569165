"""Drives one submission attempt from raw answers to a SubmissionOutcome."""

import logging

from ivf_estimator.errors import CalculatorError
from ivf_estimator.form.controller import FormStateController
from ivf_estimator.models.form import FormField, FormSubmission
from ivf_estimator.models.outcome import SubmissionOutcome
from ivf_estimator.services.calculator_client import CalculatorClient

logger = logging.getLogger(__name__)

# Egg source goes first so prior-IVF visibility is settled before that field is checked.
_APPLY_ORDER = (
    FormField.EGG_SOURCE,
    FormField.PRIOR_IVF_CYCLES,
    FormField.AGE,
    FormField.WEIGHT_LBS,
    FormField.HEIGHT_FEET,
    FormField.HEIGHT_INCHES,
    FormField.PRIOR_PREGNANCIES,
    FormField.PRIOR_BIRTHS,
    FormField.REASONS,
)


def apply_submission(controller: FormStateController, submission: FormSubmission) -> FormStateController:
    """Feed every answered field of a raw body through set_field()."""
    answered = submission.answered()
    for field in _APPLY_ORDER:
        if field in answered:
            controller.set_field(field, answered[field])
    return controller


async def submit_form(controller: FormStateController, client: CalculatorClient) -> SubmissionOutcome:
    errors = controller.validate_all()
    if errors:
        logger.info("Submission blocked on %d field(s): %s", len(errors), ", ".join(f.value for f in errors))
        return SubmissionOutcome.blocked(errors)

    request = controller.build_request()
    try:
        result = await client.submit(request)
    except CalculatorError as exc:
        logger.info("Calculator failure surfaced to respondent")
        return SubmissionOutcome.failed(exc.message)
    finally:
        # The attempt is over either way; nothing is kept.
        controller.reset()

    logger.info("Submission succeeded")
    return SubmissionOutcome.success(result)
