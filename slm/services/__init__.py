"""Service layer: settings persistence, remote freshness and infrastructure."""

from .catalog import CatalogService
from .errors import (
    AppError,
    ConfigCorruptError,
    ConfigIOError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    NetworkError,
    PlatformError,
    UserFriendlyError,
    get_error_service,
    handle_error,
)
from .freshness import (
    SLM_VERSION_URL,
    FreshnessChecker,
    compare_versions,
    conditional_headers,
    parse_version,
    record_etag,
)
from .http_client import HttpClientService
from .logging import LOG_FILENAME, LoggingService, setup_logging
from .settings import (
    DEFAULT_TITLES_JSON_URL,
    DEFAULT_VERSIONS_JSON_URL,
    SETTINGS_FILENAME,
    TITLES_ETAG_SENTINEL,
    VERSIONS_ETAG_SENTINEL,
    SettingsStore,
    default_settings,
    serialize_settings,
    settings_from_dict,
    settings_to_dict,
)

__all__ = [
    "AppError",
    "CatalogService",
    "ConfigCorruptError",
    "ConfigIOError",
    "DEFAULT_TITLES_JSON_URL",
    "DEFAULT_VERSIONS_JSON_URL",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FreshnessChecker",
    "HttpClientService",
    "LOG_FILENAME",
    "LoggingService",
    "NetworkError",
    "PlatformError",
    "SETTINGS_FILENAME",
    "SLM_VERSION_URL",
    "SettingsStore",
    "TITLES_ETAG_SENTINEL",
    "UserFriendlyError",
    "VERSIONS_ETAG_SENTINEL",
    "compare_versions",
    "conditional_headers",
    "default_settings",
    "get_error_service",
    "handle_error",
    "parse_version",
    "record_etag",
    "serialize_settings",
    "settings_from_dict",
    "settings_to_dict",
    "setup_logging",
]
