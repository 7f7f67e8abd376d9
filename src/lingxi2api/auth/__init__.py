"""
Authentication modules for Lingxi2API.

This package contains the session cookie store, Set-Cookie merging, the
refresh lifecycle and the retry-after-refresh policy.
"""

from __future__ import annotations

from .cookies import merge_cookies, parse_cookie_header, parse_set_cookie, serialize_cookies
from .retry import RefreshRetryPolicy
from .session import CookieStore, SessionManager

__all__ = [
    # Cookies
    "merge_cookies",
    "parse_cookie_header",
    "parse_set_cookie",
    "serialize_cookies",
    # Retry
    "RefreshRetryPolicy",
    # Session management
    "CookieStore",
    "SessionManager",
]
