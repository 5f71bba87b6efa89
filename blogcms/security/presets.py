"""
Route policy presets.

A preset is a named, immutable ``RoutePolicy``: who may call a route, which
rate-limit class it consumes, and the fields every route using it validates.
Routes start from a preset and extend its schema with ``merge``; they can
never change the preset's access requirement or rate-limit class.

Presets and reusable schema fragments live in a ``PolicyRegistry`` built
once at startup and handed to route registration.
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from blogcms.configs.settings import (
    MAX_EXCERPT_LENGTH,
    MAX_SEARCH_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TITLE_LENGTH,
    POST_STATUSES,
    SLUG_PATTERN,
    UUID_PATTERN,
)
from blogcms.schemas.validation import Section
from blogcms.security.rules import FieldRule, SchemaConfigurationError
from blogcms.security.schema import Schema


class AuthRequirement(StrEnum):
    """Access requirement of a route."""

    NONE = "none"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class RoutePolicy(BaseModel):
    """Access requirement, rate-limit class and schema of a route."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    auth: AuthRequirement
    rate_limit_class: str = Field(min_length=1)
    validation: Schema = Schema()


def _merge_rules(
    base: tuple[FieldRule, ...],
    extra: tuple[FieldRule, ...],
) -> tuple[FieldRule, ...]:
    overrides = {rule.field: rule for rule in extra}
    merged = [overrides.pop(rule.field, rule) for rule in base]
    merged.extend(rule for rule in extra if rule.field in overrides)
    return tuple(merged)


def merge(
    policy: RoutePolicy,
    extension: Schema | Mapping[str, Any] | None = None,
) -> RoutePolicy:
    """
    Extend a policy's schema with route-specific fields.

    Each section is the union of the policy's fields and the extension's.
    A field declared in both keeps its position from the policy but takes
    the extension's rule; new fields are appended in declaration order.
    ``auth`` and ``rate_limit_class`` always come from ``policy``.

    Args:
        policy: The preset (or already extended policy).
        extension: Schema or schema literal to add.

    Returns:
        A new policy; ``policy`` is left unchanged.
    """
    extra = Schema.build(extension)
    if extra.is_empty:
        return policy

    schema = Schema(
        **{
            section.value: _merge_rules(policy.validation.rules(section), extra.rules(section))
            for section in Section
        },
    )
    return policy.model_copy(update={"validation": schema})


class PolicyRegistry:
    """
    Named presets and reusable schema fragments.

    Example:
        >>> registry = default_registry()
        >>> policy = registry.extend("admin", {"body": registry.fragment("section")})
    """

    def __init__(
        self,
        presets: Iterable[RoutePolicy],
        fragments: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._presets: Mapping[str, RoutePolicy] = MappingProxyType(
            {preset.name: preset for preset in presets},
        )
        self._fragments: Mapping[str, Mapping[str, Any]] = MappingProxyType(
            {name: MappingProxyType(dict(fragment)) for name, fragment in (fragments or {}).items()},
        )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._presets)

    def get(self, name: str) -> RoutePolicy:
        try:
            return self._presets[name]
        except KeyError:
            mssg = f"Unknown route policy preset: '{name}'"
            raise SchemaConfigurationError(mssg) from None

    def extend(
        self,
        name: str,
        extension: Schema | Mapping[str, Any] | None = None,
    ) -> RoutePolicy:
        """Return preset ``name`` merged with ``extension``."""
        return merge(self.get(name), extension)

    def fragment(self, name: str) -> dict[str, Any]:
        """Return a copy of a named field-rule fragment, ready to spread."""
        try:
            return {field: dict(rule) for field, rule in self._fragments[name].items()}
        except KeyError:
            mssg = f"Unknown schema fragment: '{name}'"
            raise SchemaConfigurationError(mssg) from None


def _optional(rule: dict[str, Any]) -> dict[str, Any]:
    return {**rule, "optional": True}


BLOG_POST_FRAGMENT: dict[str, dict[str, Any]] = {
    "title": {"type": "string", "minLength": 1, "maxLength": MAX_TITLE_LENGTH},
    "slug": {"type": "string", "pattern": SLUG_PATTERN, "maxLength": MAX_SLUG_LENGTH},
    "excerpt": _optional({"type": "string", "maxLength": MAX_EXCERPT_LENGTH}),
    "content": _optional({"type": "string"}),
    "status": _optional({"type": "string", "allowedValues": list(POST_STATUSES)}),
    "author_id": _optional({"type": "string", "pattern": UUID_PATTERN}),
    "featured_image_url": _optional({"type": "string", "maxLength": 2048}),
    "seo_title": _optional({"type": "string", "maxLength": MAX_TITLE_LENGTH}),
    "seo_description": _optional({"type": "string", "maxLength": MAX_EXCERPT_LENGTH}),
    "template_enabled": _optional({"type": "boolean"}),
    "template_type": _optional({"type": "string", "maxLength": 100}),
}

PAGINATION_FRAGMENT: dict[str, dict[str, Any]] = {
    "page": _optional({"type": "number", "min": 1, "max": 1000}),
    "limit": _optional({"type": "number", "min": 1, "max": 100}),
}

SEARCH_FRAGMENT: dict[str, dict[str, Any]] = {
    "search": _optional({"type": "string", "maxLength": MAX_SEARCH_LENGTH}),
}

SECTION_FRAGMENT: dict[str, dict[str, Any]] = {
    "data": _optional({"type": "object"}),
    "position": _optional({"type": "number"}),
    "is_active": _optional({"type": "boolean"}),
}


def default_registry() -> PolicyRegistry:
    """Build the registry the application runs with."""
    return PolicyRegistry(
        presets=[
            RoutePolicy(name="admin", auth=AuthRequirement.ADMIN, rate_limit_class="admin"),
            RoutePolicy(
                name="authenticated",
                auth=AuthRequirement.AUTHENTICATED,
                rate_limit_class="authenticated",
            ),
            RoutePolicy(name="public", auth=AuthRequirement.NONE, rate_limit_class="public"),
        ],
        fragments={
            "blog_post": BLOG_POST_FRAGMENT,
            "pagination": PAGINATION_FRAGMENT,
            "search": SEARCH_FRAGMENT,
            "section": SECTION_FRAGMENT,
        },
    )
