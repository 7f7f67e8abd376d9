"""
Lingxi client for Lingxi2API.

This module posts questions to the Lingxi assistant completions endpoint,
handles cookie rotation and the refresh-and-retry on rejected sessions, and
turns the raw event stream into semantic parts.
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, Optional

import httpx

from ..auth import RefreshRetryPolicy, SessionManager
from ..core import (
    get_logger,
    FrameDecodeError,
    UpstreamHTTPError,
    mask_cookie,
    truncate_text,
)
from ..models import ConnectionConfig, LingxiPayload, SemanticPart
from ..utils.http_client import HTTPClient
from .sse_parser import SSEFrameParser


class LingxiClient:
    """Client for the Lingxi assistant SSE API."""

    def __init__(
        self,
        http_client: HTTPClient,
        session_manager: SessionManager,
        retry_policy: Optional[RefreshRetryPolicy] = None,
    ):
        self.logger = get_logger(__name__)
        self.http_client = http_client
        self.session_manager = session_manager
        self.retry_policy = retry_policy or RefreshRetryPolicy()

    @staticmethod
    def build_headers(config: ConnectionConfig, cookie: str) -> Dict[str, str]:
        return {
            "accept": "text/event-stream",
            "content-type": "application/json",
            "cookie": cookie,
            "user-agent": config.user_agent,
            "referer": config.referer,
            "x-client-type": config.client_type,
        }

    async def open_stream(
        self, config: ConnectionConfig, payload: LingxiPayload
    ) -> httpx.Response:
        """
        Start a completion and return the unread event stream.

        A 401/403 answer triggers one cookie refresh and one retry when a
        refresh URL is configured. The caller owns the returned response and
        must ``aclose()`` it.

        Raises:
            UpstreamHTTPError: If Lingxi answers with a non-2xx status
            TransportError: If Lingxi cannot be reached
        """
        body = payload.model_dump()

        if config.logging_enabled:
            self.logger.info(
                "Forwarding question to Lingxi",
                url=config.url,
                session_id=config.session_id,
                cookie_masked=mask_cookie(config.cookie),
                shared_cookie=config.shared_cookie,
                question=truncate_text(payload.question),
            )

        async def send(cookie: str) -> httpx.Response:
            return await self.http_client.open_stream(
                "POST", config.url, headers=self.build_headers(config, cookie), json=body
            )

        async def refresh(cookie: str) -> Optional[str]:
            if not config.refresh_url:
                return None
            self.logger.info("Lingxi rejected the session cookie, refreshing")
            return await self.session_manager.refresh(
                cookie,
                refresh_url=config.refresh_url,
                user_agent=config.user_agent,
                shared=config.shared_cookie,
            )

        response, cookie = await self.retry_policy.execute(send, refresh, config.cookie)

        if not response.is_success:
            raise UpstreamHTTPError(response.status_code, await self._read_error_body(response))

        await self.session_manager.absorb_set_cookies(
            response.headers.get_list("set-cookie"), cookie, shared=config.shared_cookie
        )
        return response

    async def _read_error_body(self, response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        except (httpx.HTTPError, httpx.StreamError) as e:
            self.logger.debug("Could not read Lingxi error body", error=str(e))
            return ""
        finally:
            await response.aclose()

    async def iter_parts(
        self, response: httpx.Response, logging_enabled: bool = False
    ) -> AsyncIterator[SemanticPart]:
        """
        Yield semantic parts as soon as their frames are complete.

        Undecodable frames are skipped.
        """
        parser = SSEFrameParser()
        async for chunk in response.aiter_bytes():
            for outcome in parser.feed(chunk):
                if isinstance(outcome, FrameDecodeError):
                    if logging_enabled:
                        self.logger.debug(
                            "Skipping Lingxi frame",
                            reason=outcome.message,
                            frame=truncate_text(outcome.frame),
                        )
                    continue
                yield outcome
