"""
Calculator Client

Async HTTP client for the external IVF success calculator. The calculator
owns the statistical model; this side only posts a Canonical Request and
turns the answer into either a CalculateResponse or a CalculatorError whose
message can be shown to the respondent as-is.
"""

import json
import logging

import httpx
from pydantic import ValidationError

from ivf_estimator import config
from ivf_estimator.errors import CalculatorError
from ivf_estimator.models.request import CalculateRequest, CalculateResponse

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/api/calculate"
GENERIC_FAILURE = "Request failed"


def failure_message(body: object) -> str:
    """
    User-facing message for a non-success calculator answer.

    The calculator reports binding problems under "details" and validation
    problems under "errors"; either is surfaced verbatim as JSON. Anything
    else collapses to the generic message.
    """
    if isinstance(body, dict):
        for key in ("details", "errors"):
            if body.get(key):
                return json.dumps(body[key])
    return GENERIC_FAILURE


class CalculatorClient:
    def __init__(
        self,
        base_url: str = config.CALCULATOR_API_BASE,
        timeout: float = config.CALCULATOR_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "CalculatorClient":
        return cls(base_url=config.CALCULATOR_API_BASE, timeout=config.CALCULATOR_TIMEOUT_SECONDS)

    async def submit(self, request: CalculateRequest) -> CalculateResponse:
        """Post one request; no retries."""
        url = f"{self.base_url}{CALCULATE_PATH}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=request.to_payload())
        except httpx.HTTPError as exc:
            logger.warning("Calculator unreachable at %s: %s", url, exc)
            raise CalculatorError(GENERIC_FAILURE) from exc

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = failure_message(body)
            logger.warning("Calculator returned %s: %s", response.status_code, message)
            raise CalculatorError(message, status_code=response.status_code)

        try:
            return CalculateResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Calculator returned an unreadable body: %s", exc)
            raise CalculatorError(GENERIC_FAILURE, status_code=response.status_code) from exc
