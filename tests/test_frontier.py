# File: tests/test_frontier.py
import asyncio

import pytest

from conftest import SITE, FakeProvider, page_html
from link_scout.crawler.frontier import Frontier
from link_scout.crawler.models import CrawlStatus
from link_scout.errors import FetchErrorKind
from link_scout.tasks import FailureCounter

SEED = f"{SITE}/"


@pytest.mark.asyncio()
async def test_page_cap_stops_crawl():
    cap = 10
    links = [f"/p{i}" for i in range(cap + 50)]
    pages = {SEED: page_html("Home", links)}
    pages.update({f"{SITE}{link}": page_html(link) for link in links})
    provider = FakeProvider(pages)

    result = await Frontier(provider, SITE, max_pages=cap).crawl()

    assert result.status is CrawlStatus.CAPPED_OUT
    assert len(result.pages) == cap
    assert len(result.visited) == cap
    assert len(provider.requested) == cap


@pytest.mark.asyncio()
async def test_bfs_completes_and_stays_on_origin():
    provider = FakeProvider(
        {
            SEED: page_html("Home", ["/a", "/b", "#top"]),
            f"{SITE}/a": page_html("A", ["/", "/b/", "/a#section"]),
            f"{SITE}/b": page_html("B", ["https://other.test/x", "https://blog.acme.test/"]),
        }
    )
    frontier = Frontier(provider, SITE)
    result = await frontier.crawl()

    assert result.status is CrawlStatus.COMPLETED
    assert result.visited == [SEED, f"{SITE}/a", f"{SITE}/b"]
    assert [page.url for page in result.pages] == result.visited
    assert provider.requested == result.visited
    assert result.seed_reached
    assert frontier.discovered == 3


@pytest.mark.asyncio()
async def test_failed_pages_are_skipped():
    failures = FailureCounter()
    provider = FakeProvider(
        {
            SEED: page_html("Home", ["/broken", "/file", "/ok"]),
            f"{SITE}/broken": FetchErrorKind.TIMEOUT,
            f"{SITE}/file": FetchErrorKind.NON_HTML,
            f"{SITE}/ok": page_html("OK"),
        }
    )
    result = await Frontier(provider, SITE, failures=failures).crawl()

    assert result.status is CrawlStatus.COMPLETED
    assert [page.url for page in result.pages] == [SEED, f"{SITE}/ok"]
    assert result.failures == {f"{SITE}/broken": "timeout", f"{SITE}/file": "non_html"}
    assert failures.by_kind == {"timeout": 1, "non_html": 1}


@pytest.mark.asyncio()
async def test_pagination_budget():
    listing_links = [f"/blog?page={n}" for n in range(2, 7)] + ["/blog/first-post"]
    pages = {
        SEED: page_html("Home", ["/blog", "/blog?page=9"]),
        f"{SITE}/blog": page_html("Blog", listing_links),
        f"{SITE}/blog/first-post": page_html("First post"),
    }
    pages.update({f"{SITE}/blog?page={n}": page_html("Blog", listing_links) for n in range(2, 10)})
    provider = FakeProvider(pages)

    result = await Frontier(provider, SITE, max_pagination_pages=2).crawl()

    assert result.status is CrawlStatus.COMPLETED
    assert result.visited == [
        SEED,
        f"{SITE}/blog",
        f"{SITE}/blog/first-post",
        f"{SITE}/blog?page=2",
        f"{SITE}/blog?page=3",
    ]


@pytest.mark.asyncio()
async def test_listing_follows_fragment_post_links():
    pages = {
        SEED: page_html("Home", ["/blog", "/about#team"]),
        f"{SITE}/blog": page_html("Blog", ["/blog/deep-dive-post#intro"]),
        f"{SITE}/blog/deep-dive-post": page_html("Deep dive"),
        f"{SITE}/about": page_html("About"),
    }
    result = await Frontier(FakeProvider(pages), SITE).crawl()

    # /about#team sits on a plain page, so only the listing's post anchor is followed
    assert result.visited == [SEED, f"{SITE}/blog", f"{SITE}/blog/deep-dive-post"]


@pytest.mark.asyncio()
async def test_unreachable_seed():
    result = await Frontier(FakeProvider(), SITE).crawl()
    assert result.status is CrawlStatus.COMPLETED
    assert result.pages == []
    assert not result.seed_reached
    assert result.failures == {SEED: "not_found"}


@pytest.mark.asyncio()
async def test_stop_before_start_cancels():
    stop = asyncio.Event()
    stop.set()
    result = await Frontier(FakeProvider({SEED: page_html("Home")}), SITE, stop=stop).crawl()
    assert result.status is CrawlStatus.CANCELLED
    assert result.pages == []


@pytest.mark.asyncio()
async def test_stop_mid_crawl_keeps_partial_result():
    stop = asyncio.Event()

    class StoppingProvider(FakeProvider):
        async def fetch(self, url):
            if url == f"{SITE}/slow":
                stop.set()
                await asyncio.sleep(5)
            return await super().fetch(url)

    provider = StoppingProvider({SEED: page_html("Home", ["/slow", "/later"]), f"{SITE}/later": page_html("L")})
    result = await Frontier(provider, SITE, stop=stop).crawl()

    assert result.status is CrawlStatus.CANCELLED
    assert [page.url for page in result.pages] == [SEED]
    assert f"{SITE}/later" not in result.visited


@pytest.mark.asyncio()
async def test_crawl_runs_once():
    frontier = Frontier(FakeProvider({SEED: page_html("Home")}), SITE)
    await frontier.crawl()
    with pytest.raises(RuntimeError):
        await frontier.crawl()


def test_invalid_page_cap():
    with pytest.raises(ValueError):
        Frontier(FakeProvider(), SITE, max_pages=0)
