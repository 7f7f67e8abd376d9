'''
Unit tests for the OpenAI proxy service.
'''

from __future__ import annotations

import json
from typing import AsyncIterator, List

import httpx
import pytest

from lingxi2api.auth import SessionManager
from lingxi2api.core import LingxiConfig
from lingxi2api.services import DONE_FRAME, LingxiClient, OpenAIProxyService
from lingxi2api.utils import HTTPClient


STREAM_BODY = {'messages': [{'role': 'user', 'content': 'Hello'}], 'stream': True}


class TrackingStream(httpx.AsyncByteStream):
    '''
    Upstream body that yields one chunk per pull and records when it is released.
    '''

    def __init__(self, chunks: List[bytes]) -> None:
        self.chunks = chunks
        self.pulled = 0
        self.closed: List[bool] = []

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            self.pulled += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed.append(True)


class TestStreamChatCompletion:
    '''
    Test the chunk relay against its upstream response.
    '''

    @pytest.mark.asyncio
    async def test_disconnect_releases_upstream(
        self, fake_lingxi, events, lingxi_config: LingxiConfig
    ) -> None:
        stream = TrackingStream([
            events({'type': 'reasoning', 'data': 'A'}),
            events({'type': 'reasoning_end'}),
            events({'type': 'text', 'data': 'B'}),
            events({'type': 'end'}),
        ])
        fake_lingxi.completion = lambda request: httpx.Response(200, stream=stream)

        async with HTTPClient(transport=fake_lingxi.transport) as http_client:
            manager = SessionManager(http_client, lingxi_config)
            service = OpenAIProxyService(LingxiClient(http_client, manager), manager, lingxi_config)
            relay = service.stream_chat_completion(service.resolve_config({}), STREAM_BODY)

            first = await relay.__anext__()
            await relay.aclose()

        chunk = json.loads(first[len('data: '):])
        assert chunk['choices'][0]['delta']['reasoning_content'] == 'A'
        assert stream.closed == [True]
        assert stream.pulled == 1
        assert len(fake_lingxi.completion_calls) == 1

    @pytest.mark.asyncio
    async def test_complete_relay_releases_upstream(
        self, fake_lingxi, events, lingxi_config: LingxiConfig
    ) -> None:
        stream = TrackingStream([
            events({'type': 'text', 'data': 'B'}),
            events({'type': 'end'}),
        ])
        fake_lingxi.completion = lambda request: httpx.Response(200, stream=stream)

        async with HTTPClient(transport=fake_lingxi.transport) as http_client:
            manager = SessionManager(http_client, lingxi_config)
            service = OpenAIProxyService(LingxiClient(http_client, manager), manager, lingxi_config)
            frames = [
                frame
                async for frame in service.stream_chat_completion(
                    service.resolve_config({}), STREAM_BODY
                )
            ]

        assert frames[-1] == DONE_FRAME
        assert len(frames) == 2
        assert stream.closed
