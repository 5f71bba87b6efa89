from blogcms.schemas.auth import Principal, TokenData
from blogcms.schemas.health import HealthCheckResponse
from blogcms.schemas.validation import RuleViolation, Section, ValidationFailure

__all__ = [
    "HealthCheckResponse",
    "Principal",
    "RuleViolation",
    "Section",
    "TokenData",
    "ValidationFailure",
]
