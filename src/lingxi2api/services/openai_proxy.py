"""
OpenAI API proxy service for Lingxi2API.

This module translates OpenAI chat completion requests into Lingxi calls and
Lingxi event streams back into OpenAI responses, either aggregated into one
``chat.completion`` object or relayed chunk by chunk as Server-Sent Events.
"""

from __future__ import annotations

import json
import time
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Tuple

import httpx

from ..auth import SessionManager
from ..core import (
    get_logger,
    generate_completion_id,
    LingxiConfig,
    Lingxi2APIError,
    TransportError,
    log_error,
)
from ..models import (
    ChatCompletionResponse,
    ConnectionConfig,
    LingxiPayload,
    PartKind,
)
from .connection import ensure_connection_config, resolve_connection_config
from .lingxi_client import LingxiClient
from .translator import (
    build_completion_response,
    build_stream_chunk,
    resolve_model,
    to_lingxi_payload,
)


DONE_FRAME = "data: [DONE]\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def format_sse(data: Dict[str, Any]) -> str:
    """Format one JSON object as a Server-Sent Event."""
    return f"data: {json.dumps(data, ensure_ascii=False)}\n\n"


class OpenAIProxyService:
    """Service for proxying OpenAI chat completions to Lingxi."""

    def __init__(
        self,
        client: LingxiClient,
        session_manager: SessionManager,
        lingxi: LingxiConfig,
    ):
        self.logger = get_logger(__name__)
        self.client = client
        self.session_manager = session_manager
        self.lingxi = lingxi

    def resolve_config(self, headers: Mapping[str, str]) -> ConnectionConfig:
        """
        Resolve and validate the connection for one request.

        Raises:
            ConfigurationError: If the session id or cookie is missing
        """
        config = resolve_connection_config(headers, self.lingxi, self.session_manager.cookie)
        return ensure_connection_config(config)

    async def aggregate(
        self, config: ConnectionConfig, payload: LingxiPayload
    ) -> Tuple[str, Optional[str]]:
        """
        Drain a Lingxi answer.

        Returns:
            The answer text and the reasoning text (None when there was none)

        Raises:
            UpstreamHTTPError: If Lingxi answers with a non-2xx status
            TransportError: If the connection fails or breaks mid-stream
        """
        response = await self.client.open_stream(config, payload)
        text = ""
        reasoning = ""
        try:
            async for part in self.client.iter_parts(response, config.logging_enabled):
                if part.kind is PartKind.REASONING:
                    reasoning += part.text
                elif part.kind is PartKind.TEXT:
                    text += part.text
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise TransportError(
                f"Lingxi stream interrupted: {str(e) or type(e).__name__}",
                details={"url": config.url},
            ) from e
        finally:
            await response.aclose()

        return text, reasoning or None

    async def create_chat_completion(
        self, config: ConnectionConfig, body: Any
    ) -> ChatCompletionResponse:
        """Create a non-streaming chat completion."""
        text, reasoning = await self.aggregate(config, to_lingxi_payload(body))
        return build_completion_response(text, reasoning, model=resolve_model(body))

    async def stream_chat_completion(
        self, config: ConnectionConfig, body: Any
    ) -> AsyncIterator[str]:
        """
        Relay a Lingxi answer as chat.completion.chunk events.

        Reasoning parts become ``reasoning_content`` deltas and text parts
        ``content`` deltas, in the order Lingxi sends them. The stream always
        ends with ``data: [DONE]``, also after a failed upstream call (which
        is reported as one error event first) or a broken connection.
        """
        model = resolve_model(body)
        payload = to_lingxi_payload(body)
        completion_id = generate_completion_id()
        created = int(time.time())

        try:
            response = await self.client.open_stream(config, payload)
        except Lingxi2APIError as e:
            log_error(self.logger, e, context={"stage": "stream_open", "url": config.url})
            yield format_sse(e.to_dict())
            yield DONE_FRAME
            return
        except Exception as e:
            log_error(self.logger, e, context={"stage": "stream_open", "url": config.url})
            yield format_sse({"error": {"message": str(e) or "Internal error", "type": "internal_error"}})
            yield DONE_FRAME
            return

        try:
            async for part in self.client.iter_parts(response, config.logging_enabled):
                if not part.text:
                    continue
                if part.kind is PartKind.REASONING:
                    chunk = build_stream_chunk(
                        completion_id, created, model, reasoning_content=part.text
                    )
                elif part.kind is PartKind.TEXT:
                    chunk = build_stream_chunk(completion_id, created, model, content=part.text)
                else:
                    continue
                yield format_sse(chunk.model_dump(mode="json"))
        except Exception as e:
            log_error(self.logger, e, context={"stage": "stream_relay", "url": config.url})
        finally:
            await response.aclose()

        yield DONE_FRAME
