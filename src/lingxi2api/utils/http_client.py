"""
HTTP client utilities for Lingxi2API.

This module provides the shared asynchronous HTTP client used for Lingxi
completions and session refresh calls, with timeout handling, error
translation and request logging.
"""

from __future__ import annotations

import json as jsonlib
from typing import Any, Dict, Optional, Union

import httpx
from httpx import Response

from ..core import (
    get_logger,
    get_settings,
    TransportError,
    RequestLoggingContext,
)


class HTTPClient:
    """Thin wrapper over httpx.AsyncClient with logging and error mapping."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        service: str = "lingxi",
    ):
        self.settings = get_settings()
        self.logger = get_logger(__name__)
        self.service = service
        self.timeout = timeout or self.settings.lingxi.timeout

        default_headers = {
            "User-Agent": f"{self.settings.app_name}/{self.settings.app_version}",
        }
        if headers:
            default_headers.update(headers)

        client_kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(self.timeout),
            "headers": default_headers,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport

        self.client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        content: Optional[Union[str, bytes]] = None,
        stream: bool = False,
    ) -> Response:
        """
        Send one HTTP request.

        Args:
            method: HTTP method
            url: Absolute request URL
            headers: Request headers
            json: JSON body
            content: Raw body
            stream: Leave the body unread; the caller must ``aclose()`` it

        Returns:
            HTTP response (any status)

        Raises:
            TransportError: If the URL is unusable, the connection fails or
                it times out
        """
        try:
            request = self.client.build_request(
                method, url, headers=headers, json=json, content=content
            )
        except httpx.InvalidURL as e:
            raise TransportError(
                f"Invalid {self.service} URL: {str(e) or type(e).__name__}",
                details={"url": url},
            ) from e

        with RequestLoggingContext(
            self.logger,
            service=self.service,
            endpoint=url,
            method=method,
            request_size=self._get_request_size(json, content),
        ) as call:
            try:
                response = await self.client.send(request, stream=stream)
            except httpx.TimeoutException as e:
                raise TransportError(
                    f"Request to {self.service} timed out",
                    details={"url": url, "timeout": self.timeout},
                ) from e
            except httpx.RequestError as e:
                raise TransportError(
                    f"Request to {self.service} failed: {str(e) or type(e).__name__}",
                    details={"url": url},
                ) from e
            call.status_code = response.status_code
        return response

    async def post(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        content: Optional[Union[str, bytes]] = None,
    ) -> Response:
        """Make POST request and read the whole body."""
        return await self.request("POST", url, headers=headers, json=json, content=content)

    async def open_stream(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """
        Make a streaming HTTP request.

        The returned response has not been read yet; iterate it with
        ``aiter_bytes()`` and release it with ``aclose()``.
        """
        return await self.request(method, url, headers=headers, json=json, stream=True)

    def _get_request_size(
        self, json_data: Optional[Dict[str, Any]], raw_data: Optional[Union[str, bytes]]
    ) -> Optional[int]:
        """Calculate request size in bytes."""
        if json_data:
            return len(jsonlib.dumps(json_data).encode("utf-8"))
        elif raw_data:
            if isinstance(raw_data, str):
                return len(raw_data.encode("utf-8"))
            return len(raw_data)
        return None

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
