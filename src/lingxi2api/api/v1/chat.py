"""
Chat completions API endpoints for Lingxi2API.

This module implements the OpenAI-compatible chat completions endpoint
with support for both streaming and non-streaming responses.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from ...core import (
    get_logger,
    Lingxi2APIError,
    ValidationError,
)
from ...models import ChatCompletionResponse, ErrorResponse
from ...services import SSE_HEADERS, OpenAIProxyService, resolve_model

# Create router
router = APIRouter(prefix="/chat", tags=["chat"])
logger = get_logger(__name__)


def get_openai_proxy(request: Request) -> OpenAIProxyService:
    """Dependency returning the proxy service built by the app lifespan."""
    proxy = getattr(request.app.state, "proxy", None)
    if proxy is None:
        raise Lingxi2APIError("Proxy service not initialized", error_type="internal_error")
    return proxy


async def _read_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body is not valid JSON", error_code="invalid_json")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", error_code="invalid_body")
    return body


@router.post(
    "/completions",
    response_model=ChatCompletionResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
        500: {"model": ErrorResponse, "description": "Configuration or upstream error"},
    },
    summary="Create chat completion",
    description="Forwards the conversation to Lingxi and returns an OpenAI chat completion.",
)
async def create_chat_completion(
    http_request: Request,
    proxy: OpenAIProxyService = Depends(get_openai_proxy),
):
    """
    Create a chat completion.

    Connection parameters come from ``x-lingxi-*`` headers with environment
    fallback. With ``"stream": true`` the answer is relayed as Server-Sent
    Events terminated by ``data: [DONE]``.
    """
    config = proxy.resolve_config(http_request.headers)
    body = await _read_body(http_request)
    stream = bool(body.get("stream"))

    logger.info(
        "Chat completion request",
        model=resolve_model(body),
        stream=stream,
        session_id=config.session_id,
        shared_cookie=config.shared_cookie,
    )

    if stream:
        return StreamingResponse(
            proxy.stream_chat_completion(config, body),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    result = await proxy.create_chat_completion(config, body)
    return JSONResponse(content=result.model_dump(mode="json"))
