"""
Request schemas and the validator that applies them.

A ``Schema`` groups field rules by request section. ``validate`` runs every
rule of every section and collects all failures before reporting, so a
client learns about every bad field from a single response. Fields a schema
does not declare are passed through to the handler untouched.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from blogcms.schemas.validation import Section, ValidationFailure
from blogcms.security.rules import ABSENT, FieldRule, SchemaConfigurationError, build_rule, evaluate

SectionDefinition: TypeAlias = Mapping[str, Mapping[str, Any] | FieldRule] | Sequence[FieldRule]

_URL_SECTIONS = frozenset({Section.QUERY, Section.PARAMS})


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


def _build_section(definition: Any) -> tuple[FieldRule, ...]:
    if definition is None:
        return ()
    if isinstance(definition, Mapping):
        rules = tuple(build_rule(rule, field=name) for name, rule in definition.items())
    elif isinstance(definition, Sequence) and not isinstance(definition, str):
        rules = tuple(build_rule(rule) for rule in definition)
    else:
        mssg = f"Schema section must be a mapping of field rules, got {type(definition).__name__}"
        raise SchemaConfigurationError(mssg)

    names = [rule.field for rule in rules]
    if duplicates := sorted({name for name in names if names.count(name) > 1}):
        mssg = f"Duplicate field rules: {', '.join(duplicates)}"
        raise SchemaConfigurationError(mssg)
    return rules


class Schema(BaseModel):
    """Field rules for one route, grouped by request section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    query: tuple[FieldRule, ...] = ()
    body: tuple[FieldRule, ...] = ()
    params: tuple[FieldRule, ...] = ()

    @field_validator("query", "body", "params", mode="before")
    @classmethod
    def _coerce_section(cls, value: Any) -> tuple[FieldRule, ...]:
        return _build_section(value)

    @classmethod
    def build(cls, definition: "Schema | Mapping[str, SectionDefinition] | None" = None) -> "Schema":
        """
        Build a schema from a declaration literal.

        Args:
            definition: Mapping with optional ``query``, ``body`` and ``params``
                keys, each a mapping of field name to rule literal.

        Returns:
            The immutable schema.

        Raises:
            SchemaConfigurationError: If a section or rule is invalid.
        """
        if definition is None:
            return cls()
        if isinstance(definition, Schema):
            return definition
        if not isinstance(definition, Mapping):
            mssg = f"Schema must be a mapping, got {type(definition).__name__}"
            raise SchemaConfigurationError(mssg)
        if unknown := set(definition) - {s.value for s in Section}:
            mssg = f"Unknown schema sections: {', '.join(sorted(unknown))}"
            raise SchemaConfigurationError(mssg)
        try:
            return cls(**{key: value for key, value in definition.items() if value is not None})
        except PydanticValidationError as e:
            mssg = f"Invalid schema: {e}"
            raise SchemaConfigurationError(mssg) from e

    def rules(self, section: Section) -> tuple[FieldRule, ...]:
        return getattr(self, section.value)

    def field_names(self, section: Section) -> tuple[str, ...]:
        return tuple(rule.field for rule in self.rules(section))

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.body or self.params)


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Validated sections, or every failure found."""

    query: Mapping[str, Any] = field(default_factory=_empty)
    body: Mapping[str, Any] = field(default_factory=_empty)
    params: Mapping[str, Any] = field(default_factory=_empty)
    failures: tuple[ValidationFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def _validate_section(
    rules: tuple[FieldRule, ...],
    raw: Any,
    section: Section,
) -> tuple[dict[str, Any], list[ValidationFailure]]:
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    validated: dict[str, Any] = {}
    failures: list[ValidationFailure] = []
    parse_numbers = section in _URL_SECTIONS

    for rule in rules:
        result = evaluate(rule, source.get(rule.field, ABSENT), parse_numbers=parse_numbers)
        if result.failure is not None:
            failures.append(replace(result.failure, section=section))
        elif result.value is not ABSENT:
            validated[rule.field] = result.value

    declared = {rule.field for rule in rules}
    validated.update({key: value for key, value in source.items() if key not in declared})
    return validated, failures


def validate(
    schema: Schema,
    *,
    query: Any = None,
    body: Any = None,
    params: Any = None,
) -> ValidationOutcome:
    """
    Validate a request's raw sections against a schema.

    Every rule in every section is evaluated, in declaration order, and all
    failures are returned together (query first, then body, then params).
    Query and path values arrive as strings, so ``number`` rules in those
    sections parse numeric strings before checking.

    Args:
        schema: The route's schema.
        query: Raw query mapping.
        body: Decoded JSON body. Non-mappings are validated as empty.
        params: Raw path parameters.

    Returns:
        The outcome. On success each section holds the typed, declared
        fields plus any undeclared fields passed through.
    """
    raw = {Section.QUERY: query, Section.BODY: body, Section.PARAMS: params}
    sections: dict[Section, Mapping[str, Any]] = {}
    failures: list[ValidationFailure] = []

    for section in Section:
        validated, found = _validate_section(schema.rules(section), raw[section], section)
        sections[section] = MappingProxyType(validated)
        failures.extend(found)

    if failures:
        return ValidationOutcome(failures=tuple(failures))

    return ValidationOutcome(
        query=sections[Section.QUERY],
        body=sections[Section.BODY],
        params=sections[Section.PARAMS],
    )
