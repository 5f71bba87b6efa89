from blogcms.security.pipeline import (
    RequestContext,
    RouteMeta,
    SecureRoutePipeline,
    SecureRouter,
    read_json_body,
)
from blogcms.security.presets import (
    AuthRequirement,
    PolicyRegistry,
    RoutePolicy,
    default_registry,
    merge,
)
from blogcms.security.rules import SchemaConfigurationError, build_rule, evaluate
from blogcms.security.schema import Schema, ValidationOutcome, validate

__all__ = [
    "AuthRequirement",
    "PolicyRegistry",
    "RequestContext",
    "RouteMeta",
    "RoutePolicy",
    "Schema",
    "SchemaConfigurationError",
    "SecureRoutePipeline",
    "SecureRouter",
    "ValidationOutcome",
    "build_rule",
    "default_registry",
    "evaluate",
    "merge",
    "read_json_body",
    "validate",
]
