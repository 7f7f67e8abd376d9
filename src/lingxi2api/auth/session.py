"""
Session cookie management for Lingxi2API.

Lingxi sessions are authenticated by a cookie. This module owns the
process-wide cookie, folds rotated ``Set-Cookie`` values back into it,
refreshes it against the account check endpoint on demand, and keeps it
warm with a periodic background refresh.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional, Sequence

import httpx

from ..core import (
    get_logger,
    LingxiConfig,
    Lingxi2APIError,
    RefreshError,
    log_auth_event,
    log_error,
    mask_cookie,
)
from ..utils.http_client import HTTPClient
from .cookies import merge_cookies


class CookieStore:
    """
    Shared cookie value.

    Reads are lock-free; every update is a read-modify-write under a lock
    so concurrent merges are applied to the latest value.
    """

    def __init__(self, initial: str = ""):
        self._value = initial or ""
        self._lock = asyncio.Lock()

    def get(self) -> str:
        return self._value

    async def set(self, value: str) -> None:
        async with self._lock:
            self._value = value

    async def merge(self, set_cookie_headers: Sequence[str]) -> str:
        async with self._lock:
            self._value = merge_cookies(self._value, set_cookie_headers)
            return self._value


class SessionManager:
    """Owns the shared Lingxi cookie and its refresh lifecycle."""

    def __init__(
        self,
        http_client: HTTPClient,
        lingxi: LingxiConfig,
        store: Optional[CookieStore] = None,
    ):
        self.logger = get_logger(__name__)
        self.http_client = http_client
        self.lingxi = lingxi
        self.store = store if store is not None else CookieStore(lingxi.cookie or "")
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def cookie(self) -> str:
        """Current shared cookie."""
        return self.store.get()

    async def absorb_set_cookies(
        self,
        set_cookie_headers: Sequence[str],
        cookie: str,
        shared: bool = True,
    ) -> str:
        """
        Fold Set-Cookie headers into a cookie.

        Args:
            set_cookie_headers: Raw Set-Cookie values from a response
            cookie: Cookie the request was sent with
            shared: Write the result to the shared store. Cookies supplied
                per request (x-lingxi-cookie) are never written back.

        Returns:
            The cookie to use from now on
        """
        if not shared:
            return merge_cookies(cookie, set_cookie_headers) if set_cookie_headers else cookie

        if not set_cookie_headers:
            return self.store.get() or cookie

        merged = await self.store.merge(set_cookie_headers)
        log_auth_event(
            self.logger,
            "cookie_merged",
            details={"cookies": len(set_cookie_headers), "cookie_masked": mask_cookie(merged)},
        )
        return merged

    async def refresh(
        self,
        cookie: Optional[str] = None,
        refresh_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        shared: bool = True,
    ) -> Optional[str]:
        """
        Refresh a session cookie against the account check endpoint.

        Any 2xx answer counts as success, with or without Set-Cookie: Lingxi
        may just extend the session server-side.

        Args:
            cookie: Cookie to refresh (defaults to the shared cookie)
            refresh_url: Endpoint to call (defaults to LINGXI_REFRESH_URL)
            user_agent: User-Agent for the call
            shared: Whether the cookie belongs to the shared store

        Returns:
            The refreshed cookie, or None when refreshing was impossible or
            failed. Failures are logged, never raised.
        """
        url = refresh_url if refresh_url is not None else self.lingxi.refresh_url
        current = cookie if cookie is not None else self.store.get()

        if not url or not current:
            self.logger.debug(
                "Skipping cookie refresh",
                has_refresh_url=bool(url),
                has_cookie=bool(current),
            )
            return None

        try:
            refreshed = await self._request_refresh(
                url, current, user_agent or self.lingxi.user_agent, shared
            )
        except RefreshError as e:
            log_auth_event(
                self.logger,
                "cookie_refresh_failed",
                success=False,
                details={"error": e.message, **e.details},
            )
            return None

        log_auth_event(
            self.logger,
            "cookie_refreshed",
            details={"refresh_url": url, "cookie_masked": mask_cookie(refreshed)},
        )
        return refreshed

    async def _request_refresh(
        self, url: str, cookie: str, user_agent: str, shared: bool
    ) -> str:
        try:
            response = await self.http_client.post(
                url,
                headers={"cookie": cookie, "user-agent": user_agent},
                content=b"",
            )
        except Lingxi2APIError as e:
            raise RefreshError(
                f"Refresh request failed: {e.message}", details={"refresh_url": url}
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RefreshError(
                f"Refresh request failed: {str(e) or type(e).__name__}",
                details={"refresh_url": url},
            ) from e

        if not response.is_success:
            raise RefreshError(
                f"Refresh endpoint returned HTTP {response.status_code}",
                details={"refresh_url": url, "status_code": response.status_code},
            )

        return await self.absorb_set_cookies(
            response.headers.get_list("set-cookie"), cookie, shared=shared
        )

    def start_auto_refresh(self) -> None:
        """Schedule the periodic background refresh."""
        if not self.lingxi.auto_refresh:
            self.logger.info("Background cookie refresh disabled")
            return
        if self._refresh_task is not None and not self._refresh_task.done():
            return

        self._refresh_task = asyncio.create_task(
            self._auto_refresh_loop(), name="lingxi-cookie-refresh"
        )
        self.logger.info(
            "Background cookie refresh scheduled",
            initial_delay_ms=self.lingxi.refresh_initial_delay_ms,
            interval_ms=self.lingxi.refresh_interval_ms,
        )

    async def stop_auto_refresh(self) -> None:
        """Cancel the background refresh and wait for it to finish."""
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _auto_refresh_loop(self) -> None:
        await asyncio.sleep(self.lingxi.refresh_initial_delay_ms / 1000)
        while True:
            try:
                await self.refresh()
            except Exception as e:
                log_error(self.logger, e, context={"task": "background_cookie_refresh"})
            await asyncio.sleep(self.lingxi.refresh_interval_ms / 1000)
