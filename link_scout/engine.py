# File: link_scout/engine.py
"""link_scout.engine: Orchestration layer: discovery, classification, linking and ranking."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from link_scout.aggregator import Aggregator
from link_scout.classifier import PageType, classify
from link_scout.config import CrawlerConfig, load_config
from link_scout.crawler.fetcher import SnapshotProvider
from link_scout.crawler.frontier import Frontier
from link_scout.crawler.models import CrawlStatus, DiscoveredPage, PageSnapshot
from link_scout.errors import AggregationError
from link_scout.insights import ContentAnalysis
from link_scout.linking import LinkOpportunity, generate
from link_scout.logger import logger
from link_scout.parser.sitemap_parser import read_sitemap
from link_scout.prober.pattern_prober import probe
from link_scout.ranker import rank
from link_scout.tasks import FailureCounter
from link_scout.utils import Origin

__all__ = ["DiscoveryReport", "Engine", "run_discovery", "start_scan"]


@dataclass(slots=True)
class DiscoveryReport:
    """Результат одного запуска: ранжированные ссылки и диагностика."""

    seed: str
    crawl_status: CrawlStatus
    pages: List[DiscoveredPage] = field(default_factory=list)
    opportunities: List[LinkOpportunity] = field(default_factory=list)
    content: ContentAnalysis = field(default_factory=ContentAnalysis)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def warnings(self) -> int:
        return len(self.failures)

    @property
    def sitemap(self) -> List[str]:
        """Canonical URLs in ranked order."""
        return [opp.url for opp in self.opportunities]

    def count_by_type(self) -> Dict[str, int]:
        counts = {page_type.value: 0 for page_type in PageType}
        for opp in self.opportunities:
            counts[opp.page_type.value] += 1
        return counts


async def _probe(config: CrawlerConfig, provider, origin: Origin, stop: asyncio.Event) -> List[PageSnapshot]:
    if not config.enable_probe:
        return []
    return await probe(provider, origin, paths=config.probe_paths, concurrency=config.concurrency, stop=stop)


async def _sitemap(config: CrawlerConfig, provider, origin: Origin, stop: asyncio.Event) -> List[str]:
    if not config.enable_sitemap:
        return []
    return await read_sitemap(provider, origin, follow_index=config.follow_sitemap_index, stop=stop)


async def run_discovery(
    config: CrawlerConfig,
    provider,
    stop: Optional[asyncio.Event] = None,
) -> DiscoveryReport:
    """Run the whole pipeline with a caller-owned, already open *provider*.

    Crawl, pattern probe and sitemap reading run concurrently; the aggregator
    merges them, then pages are classified, turned into link opportunities
    and ranked. Setting *stop* (or reaching ``config.deadline``) aborts
    in-flight fetches and returns what was found so far.

    Raises :class:`AggregationError` when the seed URL itself is unreachable.
    """
    stop = stop if stop is not None else asyncio.Event()
    deadline = None
    if config.deadline:
        deadline = asyncio.get_running_loop().call_later(config.deadline, stop.set)

    started = time.monotonic()
    failures = FailureCounter()
    origin = Origin.from_url(str(config.base_url))
    try:
        frontier = Frontier.from_config(config, provider, stop=stop, failures=failures)
        crawl, probed, sitemap_urls = await asyncio.gather(
            frontier.crawl(),
            _probe(config, provider, origin, stop),
            _sitemap(config, provider, origin, stop),
        )
        if not crawl.seed_reached and crawl.status is not CrawlStatus.CANCELLED:
            raise AggregationError(crawl.seed, crawl.failures.get(crawl.seed, ""))

        aggregator = Aggregator(
            origin,
            provider,
            concurrency=config.concurrency,
            stop=stop,
            failures=failures,
            budget=max(config.max_pages - len(crawl.visited), 0),
        )
        aggregator.add_crawl(crawl)
        aggregator.add_probed(probed)
        aggregator.add_sitemap(sitemap_urls)
        pages = await aggregator.finalize()
    finally:
        if deadline is not None:
            deadline.cancel()

    status = CrawlStatus.CANCELLED if stop.is_set() else crawl.status
    report = DiscoveryReport(seed=crawl.seed, crawl_status=status, pages=pages, failures=dict(failures.by_url))
    opportunities: List[LinkOpportunity] = []
    for page in pages:
        page_type = classify(page)
        opportunities.append(generate(page, page_type))
        report.content.add(page, page_type)
    report.opportunities = rank(opportunities)

    logger.info(
        "Discovery finished (%s): %d pages, %d warnings in %.2f s",
        status.value,
        len(pages),
        report.warnings,
        time.monotonic() - started,
    )
    return report


async def start_scan(
    config: CrawlerConfig,
    provider: Optional[SnapshotProvider] = None,
    stop: Optional[asyncio.Event] = None,
) -> DiscoveryReport:
    """
    Runs discovery; opens and closes its own provider when none is given.
    """
    if provider is not None:
        return await run_discovery(config, provider, stop)
    async with SnapshotProvider.from_config(config) as owned:
        return await run_discovery(config, owned, stop)


class Engine:
    """Фасад для CLI и тестов: загрузка конфига и синхронный запуск."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        return load_config(path)

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config

    def start_scan(self) -> DiscoveryReport:
        logger.info("Starting discovery for %s", self.config.base_url)
        try:
            return asyncio.run(start_scan(self.config))
        except AggregationError as exc:
            logger.error("Discovery failed: %s", exc)
            raise
