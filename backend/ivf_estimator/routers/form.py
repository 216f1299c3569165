from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ivf_estimator.form.controller import FormStateController
from ivf_estimator.models.form import (
    COUNT_LABELS,
    EGG_SOURCE_LABELS,
    NUMERIC_BOUNDS,
    PRIOR_IVF_LABELS,
    REASON_RULES,
    FormField,
    FormSubmission,
)
from ivf_estimator.services.submission import apply_submission
from ivf_estimator.validation.fields import validate_field

router = APIRouter()


class FieldCheck(BaseModel):
    value: Any = None
    siblings: dict[str, Any] | None = None


@router.get("/options")
async def form_options():
    """Answer choices and bounds the frontend renders the form from."""
    return {
        "reasons": [
            {"value": reason.value, "label": rule.label, "exclusive": rule.exclusive}
            for reason, rule in REASON_RULES.items()
        ],
        "eggSource": [{"value": k.value, "label": v} for k, v in EGG_SOURCE_LABELS.items()],
        "priorIvfCycles": [{"value": k.value, "label": v} for k, v in PRIOR_IVF_LABELS.items()],
        "counts": [{"value": k, "label": v} for k, v in COUNT_LABELS.items()],
        "bounds": {field.value: {"min": low, "max": high} for field, (low, high) in NUMERIC_BOUNDS.items()},
    }


@router.post("/validate")
async def validate_form(submission: FormSubmission):
    """Full Error Map for a draft, without contacting the calculator."""
    controller = apply_submission(FormStateController(), submission)
    errors = controller.validate_all()
    return {"errors": {field.value: message for field, message in errors.items()}}


@router.post("/validate/{field}")
async def validate_single_field(field: str, check: FieldCheck):
    """Check one field as the respondent types."""
    try:
        form_field = FormField(field)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown field: {field}")
    # Without siblings the field is checked alone. A sibling map, even an
    # empty one, applies visibility: prior IVF is skipped unless eggSource is "own".
    result = validate_field(form_field, check.value, check.siblings)
    return {"field": form_field.value, "valid": result.is_valid, "reason": result.reason}
