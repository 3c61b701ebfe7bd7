# File: tests/conftest.py
import asyncio
from collections.abc import AsyncIterator
from typing import Dict, Iterable, Optional, Union

import pytest
from aiohttp import web

from link_scout.config import CrawlerConfig
from link_scout.crawler.models import DiscoveredPage, DiscoverySource, PageSnapshot
from link_scout.errors import FetchError, FetchErrorKind
from link_scout.parser.html_parser import parse_html

SITE = "https://acme.test"

PageValue = Union[str, PageSnapshot, FetchErrorKind]


def page_html(title: str = "", links: Iterable[str] = (), body: str = "", headings: Iterable[str] = ()) -> str:
    """Minimal HTML document with a title, headings, a paragraph and <a> links."""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    heads = "".join(f"<h2>{text}</h2>" for text in headings)
    return (
        f"<html><head><title>{title}</title></head>"
        f"<body>{heads}<p>{body or title or 'Some page content'}</p>{anchors}</body></html>"
    )


class FakeProvider:
    """
    In-memory page-snapshot provider.

    *pages*: url -> HTML string, ready PageSnapshot or FetchErrorKind to raise.
    *texts*: url -> raw text for fetch_text (sitemaps).
    Unknown URLs raise FetchError(NOT_FOUND). *delays* holds per-URL sleeps.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, PageValue]] = None,
        texts: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.pages = dict(pages or {})
        self.texts = dict(texts or {})
        self.delays = dict(delays or {})
        self.requested: list[str] = []

    async def _lookup(self, url: str, table: dict):
        self.requested.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        value = table.get(url)
        if value is None:
            raise FetchError(url, FetchErrorKind.NOT_FOUND, "HTTP 404")
        if isinstance(value, FetchErrorKind):
            raise FetchError(url, value)
        return value

    async def fetch(self, url: str) -> PageSnapshot:
        value = await self._lookup(url, self.pages)
        if isinstance(value, str):
            return parse_html(url, value)
        return value

    async def fetch_text(self, url: str) -> str:
        return await self._lookup(url, self.texts)


def snapshot(path: str, title: str = "", headings=(), paragraphs=("Some page content",)) -> PageSnapshot:
    return PageSnapshot(url=f"{SITE}{path}", title=title, headings=tuple(headings), paragraphs=tuple(paragraphs))


def discovered(path: str, title: str = "", headings=()) -> DiscoveredPage:
    return DiscoveredPage(
        url=f"{SITE}{path}",
        sources=[DiscoverySource.CRAWL],
        snapshot=snapshot(path, title, headings),
    )


def sitemap_xml(*urls: str) -> str:
    entries = "".join(f"<url><loc>{url}</loc></url>" for url in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset>{entries}</urlset>'


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    """
    Return a basic valid CrawlerConfig for pipeline tests.
    """
    return CrawlerConfig(
        base_url=SITE,
        max_pages=50,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        probe_paths=["/about", "/careers"],
    )
