"""
Field rules and the engine that evaluates them.

A field rule describes one input field: its kind and the constraints that
make sense for that kind. Rules are a tagged union on ``type``. A string rule
may carry a ``pattern``, a number rule may not, and supplying a constraint
that does not belong to the kind fails when the rule is built, not when a
request arrives.

Rules are declared with the same literal shape routes use::

    {"type": "string", "pattern": UUID_PATTERN}
    {"type": "number", "min": 1, "max": 100, "optional": True}

``evaluate`` checks one value against one rule and returns an ``Evaluation``
holding either the typed value or a single ``ValidationFailure``. It never
raises.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from math import isfinite
from re import Pattern
from re import compile as re_compile
from typing import Annotated, Any, ClassVar, Literal, Self, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from blogcms.schemas.validation import RuleViolation, ValidationFailure

_INTEGER = re_compile(r"[+-]?\d+")

Violation: TypeAlias = tuple[RuleViolation, str] | None


class SchemaConfigurationError(ValueError):
    """Raised when a rule, schema or policy declaration is invalid."""


class _Absent:
    """Marker for a field that is not present in the input."""

    _instance: ClassVar["_Absent | None"] = None

    def __new__(cls) -> Self:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def _check_order(lower: float | None, upper: float | None, names: tuple[str, str]) -> None:
    if lower is not None and upper is not None and lower > upper:
        mssg = f"{names[0]} ({lower}) must not be greater than {names[1]} ({upper})"
        raise ValueError(mssg)


def _length_violation(
    field: str,
    size: int,
    min_length: int | None,
    max_length: int | None,
    unit: str,
) -> Violation:
    if min_length is not None and size < min_length:
        return RuleViolation.LENGTH, f"{field} must be at least {min_length} {unit}"
    if max_length is not None and size > max_length:
        return RuleViolation.LENGTH, f"{field} must be at most {max_length} {unit}"
    return None


class BaseFieldRule(BaseModel):
    """Constraints shared by every kind of field."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    kind_label: ClassVar[str] = "a value"

    field: str = Field(min_length=1)
    required: bool = True

    @model_validator(mode="before")
    @classmethod
    def _resolve_optional(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or "optional" not in data:
            return data
        data = dict(data)
        optional = bool(data.pop("optional"))
        if optional and data.get("required") is True:
            mssg = "a field cannot be both required and optional"
            raise ValueError(mssg)
        data.setdefault("required", not optional)
        return data

    def matches_type(self, value: Any) -> bool:
        """Return True when ``value`` has this rule's JSON type. Subclasses must override."""
        raise NotImplementedError

    def violation(self, value: Any) -> Violation:
        """Return the first constraint ``value`` breaks, if any."""
        return None


class StringRule(BaseFieldRule):
    kind_label: ClassVar[str] = "a string"

    type: Literal["string"] = "string"
    pattern: Pattern[str] | None = None
    allowed_values: tuple[str, ...] | None = Field(default=None, alias="allowedValues")
    min_length: int | None = Field(default=None, ge=0, alias="minLength")
    max_length: int | None = Field(default=None, ge=0, alias="maxLength")

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        _check_order(self.min_length, self.max_length, ("minLength", "maxLength"))
        return self

    def matches_type(self, value: Any) -> bool:
        return isinstance(value, str)

    def violation(self, value: str) -> Violation:
        if self.pattern is not None and self.pattern.fullmatch(value) is None:
            return RuleViolation.PATTERN, f"{self.field} has an invalid format"
        if self.allowed_values is not None and value not in self.allowed_values:
            allowed = ", ".join(self.allowed_values)
            return RuleViolation.ALLOWED_VALUES, f"{self.field} must be one of: {allowed}"
        return _length_violation(
            self.field, len(value), self.min_length, self.max_length, "characters",
        )


class NumberRule(BaseFieldRule):
    kind_label: ClassVar[str] = "a number"

    type: Literal["number"] = "number"
    allowed_values: tuple[int | float, ...] | None = Field(default=None, alias="allowedValues")
    min: int | float | None = None
    max: int | float | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        _check_order(self.min, self.max, ("min", "max"))
        return self

    def matches_type(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, float) and isfinite(value)

    def violation(self, value: float) -> Violation:
        if self.allowed_values is not None and value not in self.allowed_values:
            allowed = ", ".join(str(v) for v in self.allowed_values)
            return RuleViolation.ALLOWED_VALUES, f"{self.field} must be one of: {allowed}"
        if self.min is not None and value < self.min:
            return RuleViolation.RANGE, f"{self.field} must be at least {self.min}"
        if self.max is not None and value > self.max:
            return RuleViolation.RANGE, f"{self.field} must be at most {self.max}"
        return None


class BooleanRule(BaseFieldRule):
    kind_label: ClassVar[str] = "a boolean"

    type: Literal["boolean"] = "boolean"

    def matches_type(self, value: Any) -> bool:
        return isinstance(value, bool)


class ArrayRule(BaseFieldRule):
    kind_label: ClassVar[str] = "an array"

    type: Literal["array"] = "array"
    min_length: int | None = Field(default=None, ge=0, alias="minLength")
    max_length: int | None = Field(default=None, ge=0, alias="maxLength")

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        _check_order(self.min_length, self.max_length, ("minLength", "maxLength"))
        return self

    def matches_type(self, value: Any) -> bool:
        return isinstance(value, list | tuple)

    def violation(self, value: list[Any]) -> Violation:
        return _length_violation(
            self.field, len(value), self.min_length, self.max_length, "items",
        )


class ObjectRule(BaseFieldRule):
    kind_label: ClassVar[str] = "an object"

    type: Literal["object"] = "object"

    def matches_type(self, value: Any) -> bool:
        return isinstance(value, Mapping)


FieldRule = Annotated[
    StringRule | NumberRule | BooleanRule | ArrayRule | ObjectRule,
    Field(discriminator="type"),
]

_RULE_ADAPTER: TypeAdapter[FieldRule] = TypeAdapter(FieldRule)


def build_rule(definition: Mapping[str, Any] | BaseFieldRule, field: str | None = None) -> FieldRule:
    """
    Build a field rule from its declaration literal.

    Args:
        definition: Rule literal such as ``{"type": "string", "maxLength": 100}``,
            or an already built rule.
        field: Name the rule is declared under. Fills ``field`` when the
            literal omits it and must agree with it otherwise.

    Returns:
        The immutable rule.

    Raises:
        SchemaConfigurationError: If the declaration is invalid.
    """
    if isinstance(definition, BaseFieldRule):
        if field is not None and definition.field != field:
            mssg = f"Rule for '{definition.field}' declared under '{field}'"
            raise SchemaConfigurationError(mssg)
        return definition

    if not isinstance(definition, Mapping):
        mssg = f"Rule for '{field}' must be a mapping, got {type(definition).__name__}"
        raise SchemaConfigurationError(mssg)

    data = dict(definition)
    if field is not None and data.setdefault("field", field) != field:
        mssg = f"Rule for '{data['field']}' declared under '{field}'"
        raise SchemaConfigurationError(mssg)

    try:
        return _RULE_ADAPTER.validate_python(data)
    except PydanticValidationError as e:
        mssg = f"Invalid rule for field '{data.get('field')}': {e}"
        raise SchemaConfigurationError(mssg) from e


def parse_number(text: str) -> int | float | str:
    """
    Parse a URL-supplied numeric string.

    Returns an ``int`` for integer literals, a finite ``float`` for other
    numeric literals, and the original text when it is not a number
    (including integer literals too long for ``int`` to convert).

    Examples:
    --------
    >>> parse_number("20")
    20
    >>> parse_number("2.5")
    2.5
    >>> parse_number("ten")
    'ten'
    """
    stripped = text.strip()
    if _INTEGER.fullmatch(stripped):
        try:
            return int(stripped)
        except ValueError:
            return text
    try:
        number = float(stripped)
    except ValueError:
        return text
    return number if isfinite(number) else text


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Outcome of evaluating one rule: a typed value or one failure."""

    value: Any = ABSENT
    failure: ValidationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _fail(rule: BaseFieldRule, violation: RuleViolation, message: str) -> Evaluation:
    return Evaluation(failure=ValidationFailure(field=rule.field, rule=violation, message=message))


def evaluate(rule: FieldRule, raw_value: Any = ABSENT, *, parse_numbers: bool = False) -> Evaluation:
    """
    Evaluate a single value against a single rule.

    Checks run in order: required, type, then the kind's own constraints
    (pattern, allowed values, length, range). Only the first failure is
    reported. A missing optional field succeeds with ``ABSENT``.

    Args:
        rule: The rule to apply.
        raw_value: The input value, ``ABSENT`` when the field was not sent.
            JSON ``null`` counts as missing.
        parse_numbers: Parse numeric strings for ``number`` rules before the
            type check. Used for query string and path values.

    Returns:
        The evaluation result.
    """
    if raw_value is ABSENT or raw_value is None:
        if rule.required:
            return _fail(rule, RuleViolation.REQUIRED, f"{rule.field} is required")
        return Evaluation()

    value = raw_value
    if parse_numbers and isinstance(rule, NumberRule) and isinstance(value, str):
        value = parse_number(value)

    if not rule.matches_type(value):
        return _fail(rule, RuleViolation.TYPE, f"{rule.field} must be {rule.kind_label}")

    if found := rule.violation(value):
        return _fail(rule, *found)

    return Evaluation(value=value)
