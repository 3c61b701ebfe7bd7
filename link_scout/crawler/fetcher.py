# link_scout/crawler/fetcher.py
"""
Fetcher module: the page-snapshot provider.

One :class:`SnapshotProvider` is constructed by the caller, opened once, passed
to every component of a discovery run and closed by the caller. It holds the
only :class:`aiohttp.ClientSession` of the run.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from link_scout.crawler.models import PageSnapshot
from link_scout.errors import FetchError, FetchErrorKind
from link_scout.logger import get_logger
from link_scout.parser.html_parser import parse_html

_HTML_TYPES = ("text/html", "application/xhtml+xml")
_NOT_FOUND_STATUS = (404, 410)

log = get_logger("fetcher")


class SnapshotProvider:
    """Fetch URLs over HTTP and turn HTML responses into :class:`PageSnapshot`."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "LinkScoutBot/1.0",
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config) -> SnapshotProvider:
        return cls(timeout=config.timeout, user_agent=config.user_agent)

    async def open(self) -> SnapshotProvider:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.5",
                },
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def close(self) -> None:
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self) -> SnapshotProvider:
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> PageSnapshot:
        """
        Fetch *url* and parse it.

        Raises :class:`FetchError` on timeout, network failure, 404/410,
        any other non-2xx status and non-HTML content.
        """
        text, final_url = await self._get(url, html_only=True)
        return parse_html(url, text, base_url=final_url)

    async def fetch_text(self, url: str) -> str:
        """Fetch *url* as text regardless of content type (sitemaps)."""
        text, _ = await self._get(url, html_only=False)
        return text

    async def _get(self, url: str, *, html_only: bool) -> tuple[str, str]:
        if self.session is None:
            raise RuntimeError("SnapshotProvider is not open")
        try:
            async with self.session.get(url) as resp:
                if resp.status in _NOT_FOUND_STATUS:
                    raise FetchError(url, FetchErrorKind.NOT_FOUND, f"HTTP {resp.status}")
                if not 200 <= resp.status < 300:
                    raise FetchError(url, FetchErrorKind.NETWORK_ERROR, f"HTTP {resp.status}")
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if html_only and mime not in _HTML_TYPES:
                    raise FetchError(url, FetchErrorKind.NON_HTML, mime or "no content type")
                text = await resp.text(errors="replace")
                log.debug("Fetched %s (%d bytes)", url, len(text))
                return text, str(resp.url)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, FetchErrorKind.TIMEOUT, f"after {self.timeout}s") from exc
        except ClientError as exc:
            raise FetchError(url, FetchErrorKind.NETWORK_ERROR, str(exc) or type(exc).__name__) from exc
