"""
Translation between OpenAI and Lingxi shapes.

``to_lingxi_payload`` turns an OpenAI request body into the Lingxi request
payload; the ``build_*`` helpers wrap Lingxi output into OpenAI responses.
"""

from __future__ import annotations

import time
from typing import Any, List, Mapping, Optional

from ..core import generate_completion_id
from ..models import (
    ChatCompletionChoice,
    ChatCompletionChunk,
    ChatCompletionChunkChoice,
    ChatCompletionMessage,
    ChatCompletionResponse,
    ChoiceDelta,
    LingxiPayload,
    Usage,
)


DEFAULT_MODEL = "lingxi"


def _content_text(content: Any) -> str:
    """Flatten a message content value into plain text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, str):
                texts.append(part)
            elif isinstance(part, dict):
                text = part.get("text") or part.get("content")
                if isinstance(text, str) and text:
                    texts.append(text)
        return "".join(texts)
    return ""


def _prompt_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(p for p in value if isinstance(p, str))
    return ""


def build_question(body: Any) -> str:
    """
    Collapse an OpenAI request body into a single question string.

    Message roles are ignored; every non-empty content is joined with a
    newline in order. Without ``messages`` the ``prompt`` and then ``input``
    fields are used.
    """
    if not isinstance(body, Mapping):
        return ""

    messages = body.get("messages")
    if isinstance(messages, list):
        contents: List[str] = []
        for message in messages:
            if not isinstance(message, Mapping):
                continue
            text = _content_text(message.get("content"))
            if text:
                contents.append(text)
        return "\n".join(contents)

    return _prompt_text(body.get("prompt")) or _prompt_text(body.get("input")) or ""


def to_lingxi_payload(body: Any) -> LingxiPayload:
    """Convert an OpenAI chat completion body to the Lingxi payload."""
    return LingxiPayload(question=build_question(body))


def resolve_model(body: Any) -> str:
    if isinstance(body, Mapping):
        model = body.get("model")
        if isinstance(model, str) and model.strip():
            return model
    return DEFAULT_MODEL


def build_completion_response(
    text: str,
    reasoning_text: Optional[str],
    model: str = DEFAULT_MODEL,
    completion_id: Optional[str] = None,
    created: Optional[int] = None,
) -> ChatCompletionResponse:
    """Wrap aggregated Lingxi output into a chat.completion object."""
    return ChatCompletionResponse(
        id=completion_id or generate_completion_id(),
        created=created or int(time.time()),
        model=model,
        choices=[
            ChatCompletionChoice(
                index=0,
                message=ChatCompletionMessage(
                    role="assistant",
                    content=text or "",
                    reasoning_content=reasoning_text or None,
                ),
                finish_reason="stop",
            )
        ],
        usage=Usage(),
    )


def build_stream_chunk(
    completion_id: str,
    created: int,
    model: str,
    content: Optional[str] = None,
    reasoning_content: Optional[str] = None,
) -> ChatCompletionChunk:
    """Build one chat.completion.chunk carrying a single delta."""
    return ChatCompletionChunk(
        id=completion_id,
        created=created,
        model=model,
        choices=[
            ChatCompletionChunkChoice(
                index=0,
                delta=ChoiceDelta(content=content, reasoning_content=reasoning_content),
                finish_reason=None,
            )
        ],
    )
