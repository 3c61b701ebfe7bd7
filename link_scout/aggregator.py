# File: link_scout/aggregator.py
"""link_scout.aggregator: Объединение результатов обхода, проб и sitemap в один набор страниц."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Optional, Sequence

from link_scout.crawler.models import CrawlResult, DiscoveredPage, DiscoverySource, PageSnapshot
from link_scout.errors import CrawlCancelled
from link_scout.logger import get_logger
from link_scout.tasks import FailureCounter, attempt
from link_scout.utils import Origin, is_same_origin, is_skipped_url

log = get_logger("aggregator")

__all__ = ["Aggregator", "aggregate"]


class Aggregator:
    """Единственный владелец итогового набора DiscoveredPage (ключ: канонический URL).

    Порядок вставки стабилен: сначала обход, затем пробы, затем sitemap.
    """

    def __init__(
        self,
        origin: Origin,
        provider=None,
        *,
        concurrency: int = 5,
        stop: Optional[asyncio.Event] = None,
        failures: Optional[FailureCounter] = None,
        budget: Optional[int] = None,
    ) -> None:
        self.origin = origin
        self.provider = provider
        self.stop = stop
        self.failures = failures
        self._semaphore = asyncio.Semaphore(concurrency)
        self._pages: Dict[str, DiscoveredPage] = {}
        self._dead: set[str] = set()
        self.budget = budget
        self.rejected = 0
        self.skipped = 0

    def __len__(self) -> int:
        return len(self._pages)

    def mark_dead(self, urls: Iterable[str]) -> None:
        """URLs already known to be unreachable are never re-fetched."""
        self._dead.update(urls)

    def add(self, url: str, source: DiscoverySource, snapshot: Optional[PageSnapshot] = None) -> None:
        if not is_same_origin(url, self.origin) or is_skipped_url(url):
            log.debug("Filtered out (%s): %s", source.value, url)
            self.rejected += 1
            return
        if url in self._dead and snapshot is None:
            return
        page = self._pages.get(url)
        if page is None:
            self._pages[url] = DiscoveredPage(url=url, sources=[source], snapshot=snapshot)
            return
        page.add_source(source)
        if page.snapshot is None and snapshot is not None:
            page.snapshot = snapshot

    def add_crawl(self, crawl: CrawlResult) -> None:
        self.mark_dead(crawl.failures)
        for snapshot in crawl.pages:
            self.add(snapshot.url, DiscoverySource.CRAWL, snapshot)

    def add_probed(self, snapshots: Iterable[PageSnapshot]) -> None:
        for snapshot in snapshots:
            self.add(snapshot.url, DiscoverySource.PATTERN, snapshot)

    def add_sitemap(self, urls: Iterable[str]) -> None:
        for url in urls:
            self.add(url, DiscoverySource.SITEMAP)

    async def _validate(self, page: DiscoveredPage) -> None:
        async with self._semaphore:
            page.snapshot = await attempt(
                self.provider.fetch, page.url, log=log, stop=self.stop, failures=self.failures
            )

    def _apply_budget(self) -> None:
        # Only pages found outside the crawl spend the budget, oldest first.
        extras = [url for url, page in self._pages.items() if DiscoverySource.CRAWL not in page.sources]
        if self.budget is None or len(extras) <= self.budget:
            return
        overflow = extras[max(self.budget, 0):]
        for url in overflow:
            del self._pages[url]
        self.skipped = len(overflow)
        log.warning("Page budget reached: %d discovered pages skipped", self.skipped)

    async def finalize(self) -> List[DiscoveredPage]:
        """Validation fetch for pages without a snapshot; pages that fail are dropped.

        With a *budget*, pattern and sitemap pages beyond it are discarded
        before any fetch.
        """
        self._apply_budget()
        pending = [page for page in self._pages.values() if page.snapshot is None]
        if pending and self.provider is not None:
            results = await asyncio.gather(
                *(self._validate(page) for page in pending), return_exceptions=True
            )
            for result in results:
                if isinstance(result, BaseException) and not isinstance(
                    result, (CrawlCancelled, asyncio.CancelledError)
                ):
                    raise result
        pages = [page for page in self._pages.values() if page.snapshot is not None]
        log.info(
            "Aggregated %d pages (%d validated, %d dropped, %d filtered)",
            len(pages),
            len(pending),
            len(self._pages) - len(pages),
            self.rejected,
        )
        return pages


async def aggregate(
    crawl: CrawlResult,
    probed: Sequence[PageSnapshot],
    sitemap_urls: Sequence[str],
    provider=None,
    **kwargs,
) -> List[DiscoveredPage]:
    """Объединяет три источника и возвращает дедуплицированный список страниц."""
    aggregator = Aggregator(Origin.from_url(crawl.seed), provider, **kwargs)
    aggregator.add_crawl(crawl)
    aggregator.add_probed(probed)
    aggregator.add_sitemap(sitemap_urls)
    return await aggregator.finalize()
