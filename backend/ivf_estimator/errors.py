"""Exception types shared by the form engine and the calculator client."""

from ivf_estimator.models.form import FormField


class EstimatorError(Exception):
    """Base class for errors raised by the estimator service."""


class RequestBuildError(EstimatorError, RuntimeError):
    """build_request() was called while the draft still has field errors.

    This is a caller bug, not something to show the respondent: the
    submission flow always runs validate_all() first.
    """

    def __init__(self, errors: dict[FormField, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(getattr(f, "value", str(f)) for f in self.errors))
        super().__init__(f"Cannot build a request while fields are invalid: {fields}")


class CalculatorError(EstimatorError):
    """The external calculator failed or answered with a non-success status."""

    def __init__(self, message: str = "Request failed", status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
