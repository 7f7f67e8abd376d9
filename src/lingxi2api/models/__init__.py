"""
Lingxi2API data models.

This module provides the Pydantic models for OpenAI compatible responses
and the Lingxi upstream request/stream types.
"""

from __future__ import annotations

# Lingxi models
from .lingxi import (
    ConnectionConfig,
    LingxiPayload,
    PartKind,
    SemanticPart,
    OTHER_PART,
    REASONING_END_PART,
)

# Response models
from .responses import (
    Usage,
    ChatCompletionMessage,
    ChatCompletionChoice,
    ChatCompletionResponse,
    ChoiceDelta,
    ChatCompletionChunkChoice,
    ChatCompletionChunk,
    ErrorResponse,
)

__all__ = [
    # Lingxi models
    "ConnectionConfig",
    "LingxiPayload",
    "PartKind",
    "SemanticPart",
    "OTHER_PART",
    "REASONING_END_PART",
    # Response models
    "Usage",
    "ChatCompletionMessage",
    "ChatCompletionChoice",
    "ChatCompletionResponse",
    "ChoiceDelta",
    "ChatCompletionChunkChoice",
    "ChatCompletionChunk",
    "ErrorResponse",
]
