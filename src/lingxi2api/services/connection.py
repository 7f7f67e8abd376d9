"""
Per-request connection resolution for Lingxi2API.

Every upstream parameter can be supplied through an ``x-lingxi-*`` request
header; anything missing falls back to the environment (``LINGXI_*``) or,
for the cookie, to the shared cookie store.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..core import FIXED_LINGXI_BASE_URL, ConfigurationError, LingxiConfig
from ..models import ConnectionConfig


SSE_PATH_TEMPLATE = "/api/aigc/v3/assistant/sessions/{session_id}/completions"
REFERER_TEMPLATE = "{base_url}/chat/{session_id}"

LOGGING_HEADERS = ("x-log", "x-logging")
TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in TRUTHY_VALUES


def resolve_connection_config(
    headers: Mapping[str, str],
    lingxi: LingxiConfig,
    shared_cookie: Optional[str] = None,
) -> ConnectionConfig:
    """
    Build the connection configuration for one request.

    Args:
        headers: Incoming request headers (any case)
        lingxi: Environment defaults
        shared_cookie: Current value of the process-wide cookie store

    Returns:
        Resolved configuration. Missing session id or cookie are left empty
        and reported by ``ensure_connection_config``.
    """
    normalized = {key.lower(): value for key, value in headers.items()}

    def header(name: str) -> Optional[str]:
        value = normalized.get(name)
        return value if value else None

    base_url = header("x-lingxi-base-url") or FIXED_LINGXI_BASE_URL
    session_id = header("x-lingxi-session-id") or lingxi.session_id or ""

    header_cookie = header("x-lingxi-cookie")
    cookie = header_cookie or shared_cookie or ""

    sse_path = header("x-lingxi-sse-path") or (
        SSE_PATH_TEMPLATE.format(session_id=session_id) if session_id else ""
    )
    referer = header("x-lingxi-referer") or (
        REFERER_TEMPLATE.format(base_url=base_url, session_id=session_id) if session_id else ""
    )

    logging_enabled = lingxi.logging
    for name in LOGGING_HEADERS:
        flag = header(name)
        if flag is not None:
            logging_enabled = _is_truthy(flag)
            break

    return ConnectionConfig(
        base_url=base_url,
        session_id=session_id,
        cookie=cookie,
        user_agent=header("x-lingxi-user-agent") or lingxi.user_agent,
        client_type=header("x-lingxi-client-type") or lingxi.client_type,
        sse_path=sse_path,
        referer=referer,
        refresh_url=header("x-lingxi-refresh-url") or lingxi.refresh_url or "",
        logging_enabled=logging_enabled,
        shared_cookie=header_cookie is None,
    )


def ensure_connection_config(config: ConnectionConfig) -> ConnectionConfig:
    """
    Fail fast when the session id or cookie could not be resolved.

    Raises:
        ConfigurationError: Naming the missing field
    """
    if not config.session_id:
        raise ConfigurationError(
            "Missing LINGXI_SESSION_ID (or x-lingxi-session-id)",
            error_code="missing_session_id",
        )
    if not config.cookie:
        raise ConfigurationError(
            "Missing LINGXI_COOKIE (or x-lingxi-cookie)",
            error_code="missing_cookie",
        )
    return config
