"""
Utility modules for Lingxi2API.

This package contains the shared HTTP client.
"""

from __future__ import annotations

from .http_client import HTTPClient

__all__ = [
    "HTTPClient",
]
