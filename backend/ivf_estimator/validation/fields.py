"""
Field Validator

Pure per-field checks for the estimator form. Given a field identifier and
a raw value (plus sibling values where a rule depends on them) each check
returns VALID or an invalid result carrying the message shown under the
field. Nothing here reads or writes error state.

The height messages quote 4-7 feet and 0-12 inches while the enforced
bounds are 4-6 and 0-11. The text is kept as the product team wrote it;
the bounds are what the calculator accepts.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ivf_estimator.models.form import (
    NUMERIC_BOUNDS,
    EggSource,
    FormField,
    PriorIvfCycles,
    Reason,
)

AGE_MESSAGE = "Age must be between 20 and 50"
WEIGHT_MESSAGE = "Weight must be between 80 and 300 lbs"
HEIGHT_FEET_MESSAGE = "Height feet must be between 4 and 7 feet"
HEIGHT_INCHES_MESSAGE = "Height inches must be between 0 and 12 inches"
EGG_SOURCE_MESSAGE = 'Please select "My own eggs" or "Donor eggs"'
PRIOR_IVF_MESSAGE = 'Please select "Yes" or "No"'
PRIOR_PREGNANCIES_MESSAGE = "Prior pregnancies must be 2+, 1, or None"
PRIOR_BIRTHS_MESSAGE = "Prior births must be 2+, 1, or None"
REASONS_MESSAGE = "Please select at least one reason"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None


VALID = ValidationResult()


def invalid(reason: str) -> ValidationResult:
    return ValidationResult(reason=reason)


# ── Parsers (shared with request building) ──

def parse_number(value: Any) -> float | None:
    """Finite number from text or a JSON number; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_whole_number(value: Any) -> int | None:
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


_COUNT_ALIASES = {
    "0": 0,
    "none": 0,
    "1": 1,
    "2": 2,
    "2+": 2,
    "2 or more": 2,
}


def parse_count(value: Any) -> int | None:
    """Prior pregnancy/birth answer -> 0, 1 or 2 (where 2 means "2 or more")."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 2 else None
    if isinstance(value, str):
        return _COUNT_ALIASES.get(value.strip().lower())
    return None


def parse_choice(value: Any, choices: type) -> Any:
    """Enum member matching a raw selection, or None when unset/unknown."""
    if not isinstance(value, str):
        return None
    try:
        return choices(value.strip().lower())
    except ValueError:
        return None


# ── Rules ──

Rule = Callable[[Any, Mapping[Any, Any] | None], str | None]


def _range_rule(field: FormField, message: str, *, whole: bool) -> Rule:
    low, high = NUMERIC_BOUNDS[field]

    def rule(value: Any, siblings: Mapping[Any, Any] | None) -> str | None:
        number = parse_whole_number(value) if whole else parse_number(value)
        if number is None or not (low <= number <= high):
            return message
        return None

    return rule


def _choice_rule(choices: type, message: str) -> Rule:
    def rule(value: Any, siblings: Mapping[Any, Any] | None) -> str | None:
        return message if parse_choice(value, choices) is None else None

    return rule


def _count_rule(message: str) -> Rule:
    def rule(value: Any, siblings: Mapping[Any, Any] | None) -> str | None:
        return message if parse_count(value) is None else None

    return rule


def _prior_ivf_rule(value: Any, siblings: Mapping[Any, Any] | None) -> str | None:
    # Only asked of respondents using their own eggs.
    if siblings is not None and not _uses_own_eggs(siblings):
        return None
    return PRIOR_IVF_MESSAGE if parse_choice(value, PriorIvfCycles) is None else None


def _reasons_rule(value: Any, siblings: Mapping[Any, Any] | None) -> str | None:
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)) or not value:
        return REASONS_MESSAGE
    for tag in value:
        try:
            Reason(tag)
        except (ValueError, TypeError):
            return f"invalid reason: {tag}"
    return None


_RULES: dict[FormField, Rule] = {
    FormField.AGE: _range_rule(FormField.AGE, AGE_MESSAGE, whole=True),
    FormField.WEIGHT_LBS: _range_rule(FormField.WEIGHT_LBS, WEIGHT_MESSAGE, whole=False),
    FormField.HEIGHT_FEET: _range_rule(FormField.HEIGHT_FEET, HEIGHT_FEET_MESSAGE, whole=True),
    FormField.HEIGHT_INCHES: _range_rule(FormField.HEIGHT_INCHES, HEIGHT_INCHES_MESSAGE, whole=True),
    FormField.EGG_SOURCE: _choice_rule(EggSource, EGG_SOURCE_MESSAGE),
    FormField.PRIOR_IVF_CYCLES: _prior_ivf_rule,
    FormField.PRIOR_PREGNANCIES: _count_rule(PRIOR_PREGNANCIES_MESSAGE),
    FormField.PRIOR_BIRTHS: _count_rule(PRIOR_BIRTHS_MESSAGE),
    FormField.REASONS: _reasons_rule,
}

# field -> fields whose applicability or validity depends on its value
_DEPENDENTS: dict[FormField, tuple[FormField, ...]] = {
    FormField.EGG_SOURCE: (FormField.PRIOR_IVF_CYCLES,),
}


_FIELD_NAMES = {field.value: field for field in FormField}


def _keyed(values: Mapping[Any, Any]) -> dict[FormField, Any]:
    """Re-key a mapping by FormField; accepts wire names, ignores unknown keys."""
    keyed = {}
    for key, value in values.items():
        field = key if isinstance(key, FormField) else _FIELD_NAMES.get(key)
        if field is not None:
            keyed[field] = value
    return keyed


def _uses_own_eggs(values: Mapping[Any, Any]) -> bool:
    return parse_choice(_keyed(values).get(FormField.EGG_SOURCE), EggSource) is EggSource.OWN


def validate_field(
    field: FormField | str,
    value: Any,
    siblings: Mapping[Any, Any] | None = None,
) -> ValidationResult:
    """
    Check one field's raw value.

    Args:
        field: Field identifier (FormField or its wire name)
        value: Raw value as entered
        siblings: Other field values, keyed by identifier. Only consulted by
            rules with cross-field dependencies (prior IVF cycles).

    Returns:
        VALID, or an invalid result with the user-facing reason

    Raises:
        ValueError: Unknown field identifier
    """
    message = _RULES[FormField(field)](value, siblings)
    return VALID if message is None else invalid(message)


def applicable_fields(values: Mapping[Any, Any]) -> tuple[FormField, ...]:
    """Fields that are visible, and therefore validated, for these answers."""
    own_eggs = _uses_own_eggs(values)
    return tuple(
        field for field in FormField
        if field is not FormField.PRIOR_IVF_CYCLES or own_eggs
    )


def dependent_fields(field: FormField | str) -> tuple[FormField, ...]:
    return _DEPENDENTS.get(FormField(field), ())


def validate_fields(values: Mapping[Any, Any]) -> dict[FormField, str]:
    """Exhaustive pass over the applicable fields; returns the Error Map."""
    values = _keyed(values)
    errors: dict[FormField, str] = {}
    for field in applicable_fields(values):
        result = validate_field(field, values.get(field), values)
        if not result.is_valid:
            errors[field] = result.reason
    return errors
