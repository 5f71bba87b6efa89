"""Wire-level types shared by the validator and the error normalizer."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Section(StrEnum):
    """Request section a field rule applies to."""

    QUERY = "query"
    BODY = "body"
    PARAMS = "params"


class RuleViolation(StrEnum):
    """Name of the constraint a value failed."""

    REQUIRED = "required"
    TYPE = "type"
    PATTERN = "pattern"
    ALLOWED_VALUES = "allowedValues"
    LENGTH = "length"
    RANGE = "range"


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """A single field that failed validation."""

    field: str
    rule: RuleViolation
    message: str
    section: Section | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "section": str(self.section) if self.section else None,
            "rule": str(self.rule),
            "message": self.message,
        }
