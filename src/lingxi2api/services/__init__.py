"""
Service modules for Lingxi2API.

This package contains the business logic: connection resolution, request
translation, event stream parsing, the Lingxi client and the OpenAI proxy.
"""

from __future__ import annotations

from .connection import ensure_connection_config, resolve_connection_config
from .lingxi_client import LingxiClient
from .openai_proxy import DONE_FRAME, SSE_HEADERS, OpenAIProxyService, format_sse
from .sse_parser import SSEFrameParser, classify_event, decode_frame, parse_frame
from .translator import (
    DEFAULT_MODEL,
    build_completion_response,
    build_question,
    build_stream_chunk,
    resolve_model,
    to_lingxi_payload,
)

__all__ = [
    # Connection
    "ensure_connection_config",
    "resolve_connection_config",
    # Lingxi client
    "LingxiClient",
    # OpenAI proxy
    "DONE_FRAME",
    "SSE_HEADERS",
    "OpenAIProxyService",
    "format_sse",
    # Stream parsing
    "SSEFrameParser",
    "classify_event",
    "decode_frame",
    "parse_frame",
    # Translation
    "DEFAULT_MODEL",
    "build_completion_response",
    "build_question",
    "build_stream_chunk",
    "resolve_model",
    "to_lingxi_payload",
]
