"""
Security utilities for Lingxi2API.

This module provides identifier generation and the masking helpers used
when session cookies or prompts are written to diagnostic logs.
"""

from __future__ import annotations

import secrets
import uuid


COOKIE_VISIBLE_CHARS = 4
REDACTION_MARKER = "***"
MAX_LOGGED_TEXT = 200


def generate_request_id() -> str:
    """
    Generate a unique request ID for tracing.

    Returns:
        Random request ID string
    """
    return secrets.token_urlsafe(16)


def generate_completion_id() -> str:
    """Generate an OpenAI style completion id."""
    return f"chatcmpl-{uuid.uuid4().hex[:29]}"


def mask_cookie(cookie: str, visible_chars: int = COOKIE_VISIBLE_CHARS) -> str:
    """
    Mask a cookie header value for logging.

    Every ``name=value`` pair keeps its name and the first few characters of
    its value, the rest is replaced with a redaction marker.

    Args:
        cookie: Raw cookie string ("a=1; b=2")
        visible_chars: Number of value characters left visible

    Returns:
        Masked cookie string
    """
    if not cookie:
        return ""

    masked = []
    for pair in cookie.split(";"):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, value = pair.partition("=")
        if not sep:
            masked.append(f"{name[:visible_chars]}{REDACTION_MARKER}")
            continue
        masked.append(f"{name}={value[:visible_chars]}{REDACTION_MARKER}")
    return "; ".join(masked)


def truncate_text(text: str, max_length: int = MAX_LOGGED_TEXT) -> str:
    """
    Truncate long text for logging, noting how much was cut.

    Args:
        text: Text to shorten
        max_length: Characters kept before the ellipsis

    Returns:
        The text itself, or its prefix followed by "...(+N chars)"
    """
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}...(+{len(text) - max_length} chars)"
