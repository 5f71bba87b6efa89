# tests/security/test_rules.py
"""Tests for blogcms/security/rules.py module."""

import pytest

from blogcms.configs import SLUG_PATTERN, UUID_PATTERN
from blogcms.schemas.validation import RuleViolation
from blogcms.security.rules import (
    ABSENT,
    ArrayRule,
    BooleanRule,
    NumberRule,
    ObjectRule,
    SchemaConfigurationError,
    StringRule,
    build_rule,
    evaluate,
    parse_number,
)

VALID_UUID = "3f2b8c1e-9d4a-4c7b-8e2f-1a6d5c9b0e47"


class TestBuildRule:
    """Tests for building rules from declaration literals."""

    @pytest.mark.parametrize(
        ("definition", "rule_type"),
        [
            ({"type": "string"}, StringRule),
            ({"type": "number", "min": 0}, NumberRule),
            ({"type": "boolean"}, BooleanRule),
            ({"type": "array", "maxLength": 3}, ArrayRule),
            ({"type": "object"}, ObjectRule),
        ],
    )
    def test_dispatches_on_type(self, definition: dict, rule_type: type) -> None:
        """Test each type tag builds its own rule kind."""
        rule = build_rule(definition, field="value")
        assert isinstance(rule, rule_type)
        assert rule.field == "value"

    def test_required_by_default(self) -> None:
        assert build_rule({"type": "string"}, field="title").required is True

    def test_optional_makes_field_not_required(self) -> None:
        assert build_rule({"type": "string", "optional": True}, field="title").required is False

    def test_required_and_optional_conflict(self) -> None:
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "string", "required": True, "optional": True}, field="title")

    @pytest.mark.parametrize(
        "definition",
        [
            {"type": "number", "pattern": "^\\d+$"},
            {"type": "boolean", "minLength": 1},
            {"type": "object", "allowedValues": ["a"]},
            {"type": "array", "min": 1},
            {"type": "string", "colour": "blue"},
        ],
    )
    def test_irrelevant_or_unknown_constraint_fails_at_build(self, definition: dict) -> None:
        """Test a constraint that does not belong to the kind is rejected up front."""
        with pytest.raises(SchemaConfigurationError):
            build_rule(definition, field="value")

    def test_unknown_type_fails(self) -> None:
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "date"}, field="value")

    def test_invalid_regex_fails(self) -> None:
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "string", "pattern": "(unclosed"}, field="value")

    def test_inverted_bounds_fail(self) -> None:
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "number", "min": 10, "max": 1}, field="value")
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "string", "minLength": 5, "maxLength": 2}, field="value")

    def test_field_must_agree_with_declared_name(self) -> None:
        with pytest.raises(SchemaConfigurationError):
            build_rule({"type": "string", "field": "slug"}, field="title")

    def test_rules_are_frozen(self) -> None:
        rule = build_rule({"type": "string"}, field="title")
        with pytest.raises(ValueError, match="frozen"):
            rule.required = False  # type: ignore[misc]


class TestEvaluate:
    """Tests for evaluating one value against one rule."""

    def test_missing_required_field(self) -> None:
        result = evaluate(build_rule({"type": "string"}, field="slug"))
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.REQUIRED
        assert result.failure.field == "slug"

    def test_null_counts_as_missing(self) -> None:
        result = evaluate(build_rule({"type": "string"}, field="slug"), None)
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.REQUIRED

    def test_missing_optional_field_succeeds_without_value(self) -> None:
        result = evaluate(build_rule({"type": "string", "optional": True}, field="excerpt"))
        assert result.ok
        assert result.value is ABSENT

    def test_type_mismatch(self) -> None:
        result = evaluate(build_rule({"type": "string"}, field="title"), 42)
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.TYPE

    def test_boolean_is_not_a_number(self) -> None:
        result = evaluate(build_rule({"type": "number"}, field="position"), True)
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.TYPE

    def test_uuid_pattern_accepts_valid_value(self) -> None:
        rule = build_rule({"type": "string", "pattern": UUID_PATTERN}, field="id")
        result = evaluate(rule, VALID_UUID)
        assert result.ok
        assert result.value == VALID_UUID

    @pytest.mark.parametrize("index", [0, 8, 14, 20, 35])
    def test_one_character_off_fails_pattern(self, index: int) -> None:
        """Test that changing a single character of a valid uuid fails the pattern."""
        rule = build_rule({"type": "string", "pattern": UUID_PATTERN}, field="id")
        broken = VALID_UUID[:index] + "z" + VALID_UUID[index + 1 :]

        result = evaluate(rule, broken)
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.PATTERN

    def test_pattern_must_match_whole_value(self) -> None:
        rule = build_rule({"type": "string", "pattern": "[a-z]+"}, field="slug")
        assert evaluate(rule, "abc").ok
        assert not evaluate(rule, "abc-123").ok

    def test_slug_pattern(self) -> None:
        rule = build_rule({"type": "string", "pattern": SLUG_PATTERN}, field="slug")
        assert evaluate(rule, "best-beaches-in-bali").ok
        assert not evaluate(rule, "Best Beaches").ok

    def test_allowed_values(self) -> None:
        rule = build_rule(
            {"type": "string", "allowedValues": ["draft", "published", "archived"]},
            field="status",
        )
        assert evaluate(rule, "published").ok
        result = evaluate(rule, "deleted")
        assert result.failure is not None
        assert result.failure.rule is RuleViolation.ALLOWED_VALUES

    def test_string_length(self) -> None:
        rule = build_rule({"type": "string", "minLength": 1, "maxLength": 5}, field="title")
        assert evaluate(rule, "").failure.rule is RuleViolation.LENGTH
        assert evaluate(rule, "abcdef").failure.rule is RuleViolation.LENGTH
        assert evaluate(rule, "abc").ok

    def test_number_range(self) -> None:
        rule = build_rule({"type": "number", "min": 1, "max": 100}, field="limit")
        assert evaluate(rule, 0).failure.rule is RuleViolation.RANGE
        assert evaluate(rule, 101).failure.rule is RuleViolation.RANGE
        assert evaluate(rule, 50).value == 50

    def test_array_length(self) -> None:
        rule = build_rule({"type": "array", "maxLength": 2}, field="tags")
        assert evaluate(rule, ["a", "b"]).ok
        assert evaluate(rule, ["a", "b", "c"]).failure.rule is RuleViolation.LENGTH
        assert evaluate(rule, "a,b").failure.rule is RuleViolation.TYPE

    def test_object_rule(self) -> None:
        rule = build_rule({"type": "object"}, field="data")
        assert evaluate(rule, {"heading": "Hi"}).ok
        assert evaluate(rule, ["heading"]).failure.rule is RuleViolation.TYPE

    def test_numeric_strings_parse_only_when_enabled(self) -> None:
        rule = build_rule({"type": "number", "min": 1}, field="page")
        assert evaluate(rule, "2", parse_numbers=True).value == 2
        assert evaluate(rule, "2").failure.rule is RuleViolation.TYPE

    def test_unparseable_numeric_string_is_a_type_failure(self) -> None:
        rule = build_rule({"type": "number"}, field="page")
        assert evaluate(rule, "two", parse_numbers=True).failure.rule is RuleViolation.TYPE

    def test_evaluation_is_idempotent(self) -> None:
        """Test re-evaluating a validated value yields the same value."""
        rule = build_rule({"type": "number", "min": 1}, field="page")
        first = evaluate(rule, "3", parse_numbers=True)
        second = evaluate(rule, first.value, parse_numbers=True)
        assert first.value == second.value == 3


class TestParseNumber:
    """Tests for parse_number function."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("20", 20), ("-3", -3), ("2.5", 2.5), ("1e3", 1000.0), ("ten", "ten"), ("nan", "nan")],
    )
    def test_parse(self, text: str, expected: object) -> None:
        assert parse_number(text) == expected

    def test_integers_stay_integers(self) -> None:
        assert isinstance(parse_number("7"), int)

    def test_oversized_integer_literal_is_returned_as_text(self) -> None:
        text = "1" * 5000
        assert parse_number(text) == text

    def test_oversized_integer_literal_fails_type(self) -> None:
        rule = build_rule({"type": "number", "min": 1}, field="recent")
        evaluation = evaluate(rule, "9" * 5000, parse_numbers=True)
        assert evaluation.failure.rule is RuleViolation.TYPE
