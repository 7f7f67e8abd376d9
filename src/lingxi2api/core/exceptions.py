"""
Custom exceptions for Lingxi2API.

This module defines all custom exceptions used throughout the application,
following OpenAI API error format for consistency.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class Lingxi2APIError(Exception):
    """Base exception for all Lingxi2API errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "lingxi2api_error",
        error_code: Optional[str] = None,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        error_dict = {
            "message": self.message,
            "type": self.error_type,
        }

        if self.error_code:
            error_dict["code"] = self.error_code

        if self.details:
            error_dict.update(self.details)

        return {"error": error_dict}


class ValidationError(Lingxi2APIError):
    """Request validation errors."""

    def __init__(
        self,
        message: str = "Invalid request data",
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_type="invalid_request_error",
            error_code=error_code,
            status_code=400,
            details=details
        )


class ConfigurationError(Lingxi2APIError):
    """Missing or unusable connection configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_type="configuration_error",
            error_code=error_code,
            status_code=500,
            details=details
        )


class APIError(Lingxi2APIError):
    """Upstream (Lingxi) API errors."""

    def __init__(
        self,
        message: str = "Upstream API error",
        error_code: Optional[str] = None,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_type="upstream_error",
            error_code=error_code,
            status_code=status_code,
            details=details
        )


class UpstreamHTTPError(APIError):
    """Lingxi answered with a non-2xx status."""

    def __init__(self, upstream_status: int, body: str = "") -> None:
        super().__init__(
            message=f"Lingxi HTTP {upstream_status}: {body}",
            error_code="upstream_http_error",
            details={"upstream_status": upstream_status}
        )
        self.upstream_status = upstream_status
        self.body = body


class TransportError(APIError):
    """The connection to Lingxi failed or broke."""

    def __init__(
        self,
        message: str = "Lingxi request failed",
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code="transport_error",
            details=details
        )


class RefreshError(Lingxi2APIError):
    """Session cookie refresh failed."""

    def __init__(
        self,
        message: str = "Failed to refresh session cookie",
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_type="refresh_error",
            error_code="refresh_failed",
            status_code=500,
            details=details
        )


class FrameDecodeError(Lingxi2APIError):
    """
    A single SSE frame carried no decodable JSON object.

    Returned as a value by the frame parser rather than raised; the consumer
    decides whether to skip the frame.
    """

    def __init__(self, message: str, frame: str = "") -> None:
        super().__init__(
            message=message,
            error_type="frame_decode_error",
            status_code=500
        )
        self.frame = frame
