from typing import Literal

from pydantic import BaseModel

from ivf_estimator.models.request import CalculateResponse


class SubmissionOutcome(BaseModel):
    """The single value that crosses from the form engine back to the UI."""

    status: Literal["success", "blocked", "failed"]
    result: CalculateResponse | None = None
    errors: dict[str, str] | None = None  # field identifier -> violation message
    message: str | None = None

    @classmethod
    def success(cls, result: CalculateResponse) -> "SubmissionOutcome":
        return cls(status="success", result=result)

    @classmethod
    def blocked(cls, errors: dict) -> "SubmissionOutcome":
        return cls(
            status="blocked",
            errors={getattr(field, "value", field): message for field, message in errors.items()},
        )

    @classmethod
    def failed(cls, message: str) -> "SubmissionOutcome":
        return cls(status="failed", message=message)

    @property
    def ok(self) -> bool:
        return self.status == "success"
