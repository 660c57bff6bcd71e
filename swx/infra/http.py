"""
http.py – Async feed fetcher built on *aiohttp* with per-request timeouts,
          per-instance default headers and a single shared session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Mapping, Optional

import aiohttp

from ..errors import FetchError
from ..interfaces import FeedFetcher

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "swx-snapshots/0.3 (+space weather dashboard updater)"


class HttpClient(FeedFetcher):
    """
    Thin wrapper over *aiohttp.ClientSession* adding:

    * global & per-request headers (keeps user-agent in one place)
    * a hard per-request timeout; no retries, callers decide on fallbacks
    * every failure mode surfaced as ``FetchError``
    * async context-manager support
    """

    def __init__(
        self,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 10.0,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._external_session = session
        self._timeout = timeout
        self._own_session: Optional[aiohttp.ClientSession] = None
        self._default_headers: Dict[str, str] = {"User-Agent": DEFAULT_USER_AGENT}
        self._default_headers.update(default_headers or {})

    # ---------------------------------------------- #
    # Async context-manager
    async def __aenter__(self) -> "HttpClient":  # noqa: D401
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        await self.close()

    # ---------------------------------------------- #
    # Session management
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._external_session:
            return self._external_session
        if self._own_session is None or self._own_session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._own_session = aiohttp.ClientSession(timeout=timeout, headers=self._default_headers)
        return self._own_session

    async def close(self) -> None:
        if self._own_session and not self._own_session.closed:
            await self._own_session.close()
            self._own_session = None

    # ---------------------------------------------- #
    # Public helpers
    async def fetch(self, url: str, timeout: Optional[float] = None) -> bytes:
        """GET *url* and return the body; raise ``FetchError`` on any failure."""
        session = await self._ensure_session()
        client_timeout = aiohttp.ClientTimeout(total=timeout or self._timeout)
        try:
            async with session.get(url, timeout=client_timeout) as resp:
                resp.raise_for_status()
                body = await resp.read()
        except asyncio.CancelledError:  # pragma: no cover
            raise
        except asyncio.TimeoutError as e:
            raise FetchError(url, e) from e
        except aiohttp.ClientError as e:
            raise FetchError(url, e) from e

        logger.debug("GET %s -> %d bytes", url, len(body))
        return body

