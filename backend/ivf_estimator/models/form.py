"""
Form vocabulary for the IVF success estimator.

Field identifiers, the enumerated answer sets, the reason rule table and
the mutable Draft Input a respondent edits field by field.
"""

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class FormField(str, Enum):
    """Field identifiers, spelled the way the frontend sends them."""

    AGE = "age"
    WEIGHT_LBS = "weightLbs"
    HEIGHT_FEET = "heightFeet"
    HEIGHT_INCHES = "heightInches"
    EGG_SOURCE = "eggSource"
    PRIOR_IVF_CYCLES = "priorIvfCycles"
    PRIOR_PREGNANCIES = "priorPregnancies"
    PRIOR_BIRTHS = "priorBirths"
    REASONS = "reasons"


class EggSource(str, Enum):
    OWN = "own"
    DONOR = "donor"


class PriorIvfCycles(str, Enum):
    YES = "yes"
    NO = "no"


class Reason(str, Enum):
    MALE_FACTOR_INFERTILITY = "male_factor_infertility"
    ENDOMETRIOSIS = "endometriosis"
    TUBAL_FACTOR = "tubal_factor"
    OVULATORY_DISORDER = "ovulatory_disorder"
    DIMINISHED_OVARIAN_RESERVE = "diminished_ovarian_reserve"
    UTERINE_FACTOR = "uterine_factor"
    OTHER = "other"
    UNEXPLAINED = "unexplained"
    UNKNOWN = "unknown"


class ReasonRule(NamedTuple):
    label: str
    exclusive: bool  # exclusive-terminal: selecting it clears every other tag


# Order here is the order the form lists the checkboxes in.
REASON_RULES: dict[Reason, ReasonRule] = {
    Reason.MALE_FACTOR_INFERTILITY:    ReasonRule("Male factor infertility", False),
    Reason.ENDOMETRIOSIS:              ReasonRule("Endometriosis", False),
    Reason.TUBAL_FACTOR:               ReasonRule("Tubal factor", False),
    Reason.OVULATORY_DISORDER:         ReasonRule("Ovulatory disorder (including PCOS)", False),
    Reason.DIMINISHED_OVARIAN_RESERVE: ReasonRule("Diminished ovarian reserve", False),
    Reason.UTERINE_FACTOR:             ReasonRule("Uterine factor", False),
    Reason.OTHER:                      ReasonRule("Other reason", False),
    Reason.UNEXPLAINED:                ReasonRule("Unexplained (Idiopathic) infertility", True),
    Reason.UNKNOWN:                    ReasonRule("I don't know/no reason", True),
}

EGG_SOURCE_LABELS: dict[EggSource, str] = {
    EggSource.OWN: "My own eggs",
    EggSource.DONOR: "Donor eggs",
}

PRIOR_IVF_LABELS: dict[PriorIvfCycles, str] = {
    PriorIvfCycles.YES: "Yes",
    PriorIvfCycles.NO: "No",
}

# Prior pregnancy / birth counts. 2 stands for "2 or more".
COUNT_LABELS: dict[int, str] = {
    0: "None",
    1: "1",
    2: "2 or more",
}

# Inclusive numeric bounds actually enforced by the validator.
NUMERIC_BOUNDS: dict[FormField, tuple[int, int]] = {
    FormField.AGE: (20, 50),
    FormField.WEIGHT_LBS: (80, 300),
    FormField.HEIGHT_FEET: (4, 6),
    FormField.HEIGHT_INCHES: (0, 11),
}


def is_exclusive(tag: str) -> bool:
    """True for "unexplained"/"unknown"; False for specific or unrecognised tags."""
    try:
        return REASON_RULES[Reason(tag)].exclusive
    except (ValueError, TypeError):
        return False


class DraftInput(BaseModel):
    """
    The in-progress, partially valid answers of one respondent.

    Scalars keep the raw value exactly as entered (text from the form,
    occasionally a JSON number). An empty string means "not answered yet".
    """

    model_config = ConfigDict(populate_by_name=True)

    age: Any = ""
    weight_lbs: Any = Field(default="", alias="weightLbs")
    height_feet: Any = Field(default="", alias="heightFeet")
    height_inches: Any = Field(default="", alias="heightInches")
    egg_source: Any = Field(default="", alias="eggSource")
    prior_ivf_cycles: Any = Field(default="", alias="priorIvfCycles")
    prior_pregnancies: Any = Field(default="", alias="priorPregnancies")
    prior_births: Any = Field(default="", alias="priorBirths")
    reasons: list[str] = Field(default_factory=list)

    def get(self, field: FormField) -> Any:
        return getattr(self, _ATTRIBUTES[field])

    def put(self, field: FormField, value: Any) -> None:
        setattr(self, _ATTRIBUTES[field], value)

    def values(self) -> dict[FormField, Any]:
        """Snapshot keyed by field identifier, as the validator consumes it."""
        return {field: self.get(field) for field in FormField}


_ATTRIBUTES: dict[FormField, str] = {
    FormField.AGE: "age",
    FormField.WEIGHT_LBS: "weight_lbs",
    FormField.HEIGHT_FEET: "height_feet",
    FormField.HEIGHT_INCHES: "height_inches",
    FormField.EGG_SOURCE: "egg_source",
    FormField.PRIOR_IVF_CYCLES: "prior_ivf_cycles",
    FormField.PRIOR_PREGNANCIES: "prior_pregnancies",
    FormField.PRIOR_BIRTHS: "prior_births",
    FormField.REASONS: "reasons",
}


class FormSubmission(BaseModel):
    """
    Raw request body for the form endpoints.

    Every answer is optional and may be any JSON value. Mistyped answers
    must reach the Form State Controller, which reports them in the Error
    Map, so nothing is narrowed here.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    age: Any = None
    weight_lbs: Any = Field(default=None, alias="weightLbs")
    height_feet: Any = Field(default=None, alias="heightFeet")
    height_inches: Any = Field(default=None, alias="heightInches")
    egg_source: Any = Field(default=None, alias="eggSource")
    prior_ivf_cycles: Any = Field(default=None, alias="priorIvfCycles")
    prior_pregnancies: Any = Field(default=None, alias="priorPregnancies")
    prior_births: Any = Field(default=None, alias="priorBirths")
    reasons: Any = None

    def answered(self) -> dict[FormField, Any]:
        """Fields that were present in the body, keyed by identifier."""
        provided = self.model_dump(exclude_none=True)
        return {field: provided[attr] for field, attr in _ATTRIBUTES.items() if attr in provided}
