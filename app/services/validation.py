import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Tuple

NUMERIC_PATTERN = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


def is_non_empty_text(value: Any) -> bool:
    """True for a string with at least one non-blank character."""
    return isinstance(value, str) and value.strip() != ""


def is_optional_text(value: Any) -> bool:
    return value is None or isinstance(value, str)


def is_numeric(value: Any) -> bool:
    """Accept ints, finite floats and decimals, and numeric strings; reject booleans and text."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, str):
        return bool(NUMERIC_PATTERN.match(value.strip()))
    return False


@dataclass(frozen=True)
class FieldRule:
    field: str
    check: Callable[[Any], bool]
    message: str
    optional: bool = False


@dataclass(frozen=True)
class RuleSet:
    name: str
    rules: Tuple[FieldRule, ...]


CREATE_RULES = RuleSet(
    name="create",
    rules=(
        FieldRule("name", is_non_empty_text, "Name is required"),
        FieldRule("price", is_numeric, "Price must be numeric"),
        FieldRule("description", is_optional_text, "Description must be text", optional=True),
    ),
)

UPDATE_RULES = RuleSet(
    name="update",
    rules=(
        FieldRule("name", is_non_empty_text, "Name must not be empty", optional=True),
        FieldRule("price", is_numeric, "Price must be numeric", optional=True),
        FieldRule("description", is_optional_text, "Description must be text", optional=True),
    ),
)


class FieldValidator:
    """Runs a rule set over submitted fields."""

    @staticmethod
    def validate(fields: Mapping[str, Any], rule_set: RuleSet) -> List[FieldError]:
        """Return the failures in rule order; an empty list means the input is valid."""
        errors = []
        for rule in rule_set.rules:
            if rule.optional and rule.field not in fields:
                continue
            if not rule.check(fields.get(rule.field)):
                errors.append(FieldError(rule.field, rule.message))
        return errors
