# File: tests/test_sitemap.py
import asyncio

import pytest

from conftest import SITE, FakeProvider, sitemap_xml
from link_scout.parser.sitemap_parser import parse_sitemap, read_sitemap
from link_scout.utils import Origin

ORIGIN = Origin.from_url(SITE)


def test_parse_sitemap_tolerates_broken_xml():
    xml = "<urlset><url><loc>https://s.test/a</loc></url><url><loc>https://s.test/b"
    assert parse_sitemap(xml) == ["https://s.test/a"]


def test_parse_sitemap_cdata_entities_and_case():
    xml = (
        "<urlset>"
        "<url><LOC> https://s.test/c </LOC></url>"
        "<url><loc><![CDATA[https://s.test/d]]></loc></url>"
        "<url><loc>https://s.test/q?a=1&amp;b=2</loc></url>"
        "<url><loc></loc></url>"
        "</urlset>"
    )
    assert parse_sitemap(xml) == ["https://s.test/c", "https://s.test/d", "https://s.test/q?a=1&b=2"]


@pytest.mark.asyncio()
async def test_read_sitemap_canonical_and_deduplicated():
    texts = {f"{SITE}/sitemap.xml": sitemap_xml(f"{SITE}/a/", f"{SITE}/b", f"{SITE}/a", "mailto:x@acme.test")}
    urls = await read_sitemap(FakeProvider(texts=texts), ORIGIN)
    assert urls == [f"{SITE}/a", f"{SITE}/b"]


@pytest.mark.asyncio()
async def test_index_fallback_and_nested_sitemaps():
    texts = {
        f"{SITE}/sitemap.xml": "<html><body>Not found</body></html>",
        f"{SITE}/sitemap_index.xml": sitemap_xml(f"{SITE}/post-sitemap.xml", f"{SITE}/page-sitemap.xml"),
        f"{SITE}/post-sitemap.xml": sitemap_xml(f"{SITE}/blog/one", f"{SITE}/blog/two"),
        f"{SITE}/page-sitemap.xml": sitemap_xml(f"{SITE}/about", f"{SITE}/deeper.xml"),
    }
    provider = FakeProvider(texts=texts)
    urls = await read_sitemap(provider, ORIGIN)
    assert urls == [f"{SITE}/blog/one", f"{SITE}/blog/two", f"{SITE}/about"]
    assert f"{SITE}/deeper.xml" not in provider.requested


@pytest.mark.asyncio()
async def test_nested_sitemaps_not_followed_when_disabled():
    texts = {f"{SITE}/sitemap.xml": sitemap_xml(f"{SITE}/post-sitemap.xml", f"{SITE}/about")}
    urls = await read_sitemap(FakeProvider(texts=texts), ORIGIN, follow_index=False)
    assert urls == [f"{SITE}/post-sitemap.xml", f"{SITE}/about"]


@pytest.mark.asyncio()
async def test_missing_sitemap_is_empty():
    assert await read_sitemap(FakeProvider(), ORIGIN) == []


@pytest.mark.asyncio()
async def test_stop_returns_empty():
    stop = asyncio.Event()
    stop.set()
    texts = {f"{SITE}/sitemap.xml": sitemap_xml(f"{SITE}/a")}
    assert await read_sitemap(FakeProvider(texts=texts), ORIGIN, stop=stop) == []
