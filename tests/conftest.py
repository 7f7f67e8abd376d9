'''
Shared fixtures for Lingxi2API tests.

Upstream traffic never leaves the process: every test talks to a
``FakeLingxi`` through ``httpx.MockTransport``, which records each request
and answers it per host.
'''

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from lingxi2api.core import LingxiConfig, Settings
from lingxi2api.main import create_app


SESSION_ID = 'sess-123'
COOKIE = 'wps_sid=abcdef123456; csrf=token42'
LINGXI_HOST = 'lingxi.wps.cn'
REFRESH_HOST = 'account.wps.cn'

REFERENCE_EVENTS = [
    {'type': 'reasoning', 'data': 'A'},
    {'type': 'reasoning_end'},
    {'type': 'text', 'data': 'B'},
    {'type': 'end'},
]

Handler = Callable[[httpx.Request], httpx.Response]


def encode_events(*events: Dict[str, Any]) -> bytes:
    '''
    Encode events the way Lingxi frames them: an event line, then the data line.
    '''
    return ''.join(
        f'event: message\ndata: {json.dumps(event, ensure_ascii=False)}\n\n'
        for event in events
    ).encode('utf-8')


def respond_in_order(*responses: httpx.Response) -> Handler:
    '''
    Build a handler answering successive requests with the given responses.
    '''
    pending = iter(responses)
    return lambda request: next(pending)


class FakeLingxi:
    '''
    Records upstream requests and answers them per host.
    '''

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.completion: Handler = lambda request: httpx.Response(
            200, content=encode_events(*REFERENCE_EVENTS)
        )
        self.refresh: Handler = lambda request: httpx.Response(200)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == REFRESH_HOST:
            return self.refresh(request)
        return self.completion(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, host: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    @property
    def completion_calls(self) -> List[httpx.Request]:
        return self.calls(LINGXI_HOST)

    @property
    def refresh_calls(self) -> List[httpx.Request]:
        return self.calls(REFRESH_HOST)


@pytest.fixture
def fake_lingxi() -> FakeLingxi:
    '''
    Fake upstream answering the reference reasoning/text stream.
    '''
    return FakeLingxi()


@pytest.fixture
def events() -> Callable[..., bytes]:
    return encode_events


@pytest.fixture
def in_order() -> Callable[..., Handler]:
    return respond_in_order


@pytest.fixture
def lingxi_config() -> LingxiConfig:
    '''
    Lingxi settings with a session and cookie, background refresh off.
    '''
    return LingxiConfig(session_id=SESSION_ID, cookie=COOKIE, auto_refresh=False)


def _client(lingxi: LingxiConfig, fake: FakeLingxi) -> Iterator[TestClient]:
    app = create_app(Settings(lingxi=lingxi), transport=fake.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(lingxi_config: LingxiConfig, fake_lingxi: FakeLingxi) -> Iterator[TestClient]:
    '''
    Test client for an app wired to the fake upstream.
    '''
    yield from _client(lingxi_config, fake_lingxi)


@pytest.fixture
def unconfigured_client(fake_lingxi: FakeLingxi) -> Iterator[TestClient]:
    '''
    Test client for an app without LINGXI_SESSION_ID.
    '''
    lingxi = LingxiConfig(session_id=None, cookie=COOKIE, auto_refresh=False)
    yield from _client(lingxi, fake_lingxi)


def parse_sse(body: str) -> List[Optional[Dict[str, Any]]]:
    '''
    Split an SSE body into decoded data payloads; ``[DONE]`` becomes None.
    '''
    payloads: List[Optional[Dict[str, Any]]] = []
    for frame in body.split('\n\n'):
        if not frame.strip():
            continue
        assert frame.startswith('data: ')
        data = frame[len('data: '):]
        payloads.append(None if data == '[DONE]' else json.loads(data))
    return payloads


@pytest.fixture
def sse_payloads() -> Callable[[str], List[Optional[Dict[str, Any]]]]:
    return parse_sse
