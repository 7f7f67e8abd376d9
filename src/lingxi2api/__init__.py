"""
Lingxi2API - OpenAI compatible chat completions powered by Lingxi.

This package exposes the WPS Lingxi assistant through an OpenAI-compatible
``/v1/chat/completions`` endpoint, in both aggregated and streaming form,
while keeping the Lingxi session cookie fresh.
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Lingxi2API Contributors"
__license__ = "MIT"
__description__ = "OpenAI compatible chat completions powered by Lingxi"

# Core exports
from .core import get_settings, get_logger
from .main import create_app

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "get_settings",
    "get_logger",
    "create_app",
]
