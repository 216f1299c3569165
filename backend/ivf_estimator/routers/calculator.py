from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ivf_estimator.form.controller import FormStateController
from ivf_estimator.models.form import FormSubmission
from ivf_estimator.services.calculator_client import CalculatorClient
from ivf_estimator.services.submission import apply_submission, submit_form

router = APIRouter()


def get_calculator_client() -> CalculatorClient:
    return CalculatorClient.from_settings()


@router.post("/calculate")
async def calculate(
    submission: FormSubmission,
    client: CalculatorClient = Depends(get_calculator_client),
):
    """Validate the respondent's answers and ask the calculator for their chance of live birth."""
    controller = apply_submission(FormStateController(), submission)
    outcome = await submit_form(controller, client)

    if outcome.status == "blocked":
        return JSONResponse(status_code=422, content={"errors": outcome.errors})
    if outcome.status == "failed":
        return JSONResponse(status_code=502, content={"error": outcome.message})
    return outcome.result.model_dump(by_alias=True)
