# rag_navigator/crawler/fetcher.py
"""
Fetcher module: GET requests with the crawler's User-Agent, timeout and
optional retry/backoff. Every failure surfaces as :class:`FetchError`.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from rag_navigator.config import NavigatorConfig
from rag_navigator.logger import get_logger
from rag_navigator.utils import polite_delay

log = get_logger("fetcher")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
MAX_BACKOFF = 60

T = TypeVar("T")


class FetchError(Exception):
    """A request that did not produce a 2xx body.

    ``status`` is None for transport-level failures (DNS, connection, timeout).
    """

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


def open_session(config: NavigatorConfig) -> ClientSession:
    """ClientSession with the crawler's identity and per-request timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Sequential HTTP fetching of text and raw documents."""

    def __init__(self, session: ClientSession, config: NavigatorConfig) -> None:
        self.session = session
        self.config = config

    async def get_text(self, url: str) -> str:
        """
        Return the body of *url* decoded with the response charset.

        Raises FetchError on a non-2xx status or a transport failure, after
        ``config.retry_times`` extra attempts for retryable outcomes.
        """
        return await self._with_retries(url, _read_text)

    async def get_bytes(self, url: str) -> bytes:
        """Return the undecoded body of *url*; XML parsers honour its own encoding declaration."""
        return await self._with_retries(url, _read_bytes)

    async def _with_retries(self, url: str, read: Callable[[ClientResponse], Awaitable[T]]) -> T:
        attempts = 0
        while True:
            try:
                return await self._get_once(url, read)
            except FetchError as exc:
                retryable = exc.status is None or exc.status in RETRY_STATUS
                attempts += 1
                if not retryable or attempts > self.config.retry_times:
                    raise
                backoff = min(2**attempts, MAX_BACKOFF)
                log.debug("Retry %d/%d for %s after %d s: %s", attempts, self.config.retry_times, url, backoff, exc)
                await polite_delay(backoff)

    async def _get_once(self, url: str, read: Callable[[ClientResponse], Awaitable[T]]) -> T:
        try:
            async with self.session.get(url, headers={"User-Agent": self.config.user_agent}) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"{resp.status} {resp.reason or ''}".strip(), status=resp.status)
                return await read(resp)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.config.timeout} s") from exc
        except (ClientError, ValueError) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc


async def _read_text(resp: ClientResponse) -> str:
    return await resp.text(errors="replace")


async def _read_bytes(resp: ClientResponse) -> bytes:
    return await resp.read()
