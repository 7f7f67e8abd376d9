"""
Retry-after-refresh policy for upstream calls.

The policy knows nothing about HTTP clients: it is driven by a ``send``
callback that performs the call with a given cookie and a ``refresh``
callback that returns a refreshed cookie (or None when refreshing failed).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, FrozenSet, Optional, Protocol, Tuple, TypeVar


class ClosableResponse(Protocol):
    status_code: int

    async def aclose(self) -> None:
        ...


R = TypeVar("R", bound=ClosableResponse)


@dataclass(frozen=True)
class RefreshRetryPolicy:
    """Refresh the session and retry once when Lingxi rejects the cookie."""

    max_attempts: int = 2
    trigger_statuses: FrozenSet[int] = field(default_factory=lambda: frozenset({401, 403}))

    def should_refresh(self, status_code: int, attempt: int) -> bool:
        return status_code in self.trigger_statuses and attempt < self.max_attempts

    async def execute(
        self,
        send: Callable[[str], Awaitable[R]],
        refresh: Callable[[str], Awaitable[Optional[str]]],
        cookie: str,
    ) -> Tuple[R, str]:
        """
        Run ``send`` and, on a trigger status, refresh and send again.

        A rejected response is closed only once a refreshed cookie is
        available; otherwise it is returned as-is so the caller can surface
        the original status. If ``refresh`` raises, the rejected response is
        closed before the error propagates.

        Returns:
            The last response and the cookie it was sent with
        """
        attempt = 1
        response = await send(cookie)
        while self.should_refresh(response.status_code, attempt):
            try:
                refreshed = await refresh(cookie)
            except BaseException:
                await response.aclose()
                raise
            if not refreshed:
                break
            await response.aclose()
            cookie = refreshed
            attempt += 1
            response = await send(cookie)
        return response, cookie
