"""
Core modules for Lingxi2API.

This package contains the core infrastructure components including
configuration, exceptions, logging, and security utilities.
"""

from __future__ import annotations

from .config import (
    DEFAULT_REFRESH_URL,
    FIXED_LINGXI_BASE_URL,
    LingxiConfig,
    LoggingConfig,
    ServerConfig,
    Settings,
    get_settings,
    reload_settings,
)
from .exceptions import (
    Lingxi2APIError,
    ValidationError,
    ConfigurationError,
    APIError,
    UpstreamHTTPError,
    TransportError,
    RefreshError,
    FrameDecodeError,
)
from .logging import (
    get_logger,
    setup_logging,
    log_request_start,
    log_request_end,
    log_auth_event,
    log_api_call,
    log_error,
    RequestLoggingContext,
)
from .security import (
    generate_request_id,
    generate_completion_id,
    mask_cookie,
    truncate_text,
)

__all__ = [
    # Configuration
    "DEFAULT_REFRESH_URL",
    "FIXED_LINGXI_BASE_URL",
    "LingxiConfig",
    "LoggingConfig",
    "ServerConfig",
    "Settings",
    "get_settings",
    "reload_settings",
    # Exceptions
    "Lingxi2APIError",
    "ValidationError",
    "ConfigurationError",
    "APIError",
    "UpstreamHTTPError",
    "TransportError",
    "RefreshError",
    "FrameDecodeError",
    # Logging
    "get_logger",
    "setup_logging",
    "log_request_start",
    "log_request_end",
    "log_auth_event",
    "log_api_call",
    "log_error",
    "RequestLoggingContext",
    # Security
    "generate_request_id",
    "generate_completion_id",
    "mask_cookie",
    "truncate_text",
]
