"""Модуль для проверки типовых путей бизнес-сайта."""

import asyncio
from typing import List, Optional, Sequence

from link_scout.crawler.models import PageSnapshot
from link_scout.errors import CrawlCancelled, FetchErrorKind
from link_scout.logger import get_logger
from link_scout.tasks import FailureCounter, attempt
from link_scout.utils import Origin, remove_duplicates

log = get_logger("prober")

COMMON_PATHS: Sequence[str] = (
    "/about",
    "/about-us",
    "/company",
    "/who-we-are",
    "/our-story",
    "/mission",
    "/team",
    "/our-team",
    "/leadership",
    "/careers",
    "/jobs",
    "/services",
    "/our-services",
    "/solutions",
    "/products",
    "/what-we-do",
    "/expertise",
    "/industries",
    "/portfolio",
    "/case-studies",
    "/clients",
    "/testimonials",
    "/partners",
    "/pricing",
    "/contact",
    "/contact-us",
    "/get-in-touch",
    "/locations",
    "/blog",
    "/news",
    "/articles",
    "/insights",
    "/resources",
    "/press",
    "/events",
    "/webinars",
    "/guides",
    "/faq",
    "/faqs",
    "/support",
    "/help",
    "/privacy",
    "/privacy-policy",
    "/terms",
    "/legal",
)


class PatternProber:
    """Проверяет каталог путей относительно origin с ограниченной конкуренцией."""

    def __init__(
        self,
        provider,
        origin: Origin,
        paths: Optional[Sequence[str]] = None,
        concurrency: int = 5,
        stop: Optional[asyncio.Event] = None,
        failures: Optional[FailureCounter] = None,
    ) -> None:
        self.provider = provider
        self.origin = origin
        self.paths: List[str] = list(paths if paths is not None else COMMON_PATHS)
        self.semaphore = asyncio.Semaphore(concurrency)
        self.stop = stop
        self.failures = failures

    async def fetch(self, url: str) -> Optional[PageSnapshot]:
        """Загружает один путь; возвращает snapshot, только если в нём есть содержимое."""
        async with self.semaphore:
            snapshot = await attempt(
                self.provider.fetch,
                url,
                log=log,
                stop=self.stop,
                failures=self.failures,
                quiet_kinds=(FetchErrorKind.NOT_FOUND, FetchErrorKind.NON_HTML),
            )
        if snapshot is None:
            return None
        if not snapshot.has_content():
            log.debug("Empty page skipped: %s", url)
            return None
        return snapshot

    async def run(self) -> List[PageSnapshot]:
        """Запускает проверку всех путей; порядок результата совпадает с каталогом."""
        urls = remove_duplicates([self.origin.url_for(path) for path in self.paths])
        tasks = [asyncio.create_task(self.fetch(url)) for url in urls]
        # CrawlCancelled from one task is collected, not raised: finished probes survive.
        results = await asyncio.gather(*tasks, return_exceptions=True)
        found: List[PageSnapshot] = []
        for result in results:
            if isinstance(result, PageSnapshot):
                found.append(result)
            elif isinstance(result, BaseException) and not _is_cancellation(result):
                raise result
        log.info("Pattern probe: %d of %d paths alive", len(found), len(urls))
        return found


def _is_cancellation(exc: BaseException) -> bool:
    return isinstance(exc, (CrawlCancelled, asyncio.CancelledError))


async def probe(provider, origin: Origin, **kwargs) -> List[PageSnapshot]:
    """Проверяет типовые пути и возвращает найденные страницы."""
    return await PatternProber(provider, origin, **kwargs).run()
