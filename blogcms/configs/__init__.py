from blogcms.configs.settings import (
    DEFAULT_PAGE_SIZE,
    MAX_EXCERPT_LENGTH,
    MAX_SEARCH_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TITLE_LENGTH,
    POST_STATUSES,
    SLUG_PATTERN,
    UUID_PATTERN,
    LimiterConfig,
    Settings,
    file_logger,
    settings,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_EXCERPT_LENGTH",
    "MAX_SEARCH_LENGTH",
    "MAX_SLUG_LENGTH",
    "MAX_TITLE_LENGTH",
    "POST_STATUSES",
    "SLUG_PATTERN",
    "UUID_PATTERN",
    "LimiterConfig",
    "Settings",
    "file_logger",
    "settings",
]
