from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class CalculateRequest(BaseModel):
    """Canonical, fully validated payload sent to the calculator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age: int
    weight_lbs: float = Field(alias="weightLbs")
    height_ft: int = Field(alias="heightFt")
    height_in: int = Field(alias="heightIn")
    egg_source: Literal["own", "donor"] = Field(alias="eggSource")
    prior_ivf_cycles: Literal["yes", "no"] | None = Field(default=None, alias="priorIvfCycles")  # own eggs only
    prior_pregnancies: int = Field(alias="priorPregnancies", ge=0, le=2)
    prior_births: int = Field(alias="priorBirths", ge=0, le=2)
    reasons: tuple[str, ...]

    @property
    def height_total_inches(self) -> int:
        return self.height_ft * 12 + self.height_in

    @field_serializer("weight_lbs")
    def _serialize_weight(self, value: float) -> int | float:
        # The calculator binds weight as an integer; only send decimals when entered.
        return int(value) if float(value).is_integer() else value

    def to_payload(self) -> dict:
        """JSON body for POST /api/calculate."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        payload["reasons"] = list(self.reasons)
        return payload


class CalculateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cumulative_chance_percent: float = Field(alias="cumulativeChancePercent", ge=0, le=100)
    notes: list[str] = Field(default_factory=list)
