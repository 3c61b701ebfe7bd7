# === FILE: link_scout/crawler/frontier.py ===
"""Bounded breadth-first crawl of one origin.

The :class:`Frontier` exclusively owns the crawl state (visited set and FIFO
queue). Traversal is single-task and cooperative: one URL is fetched at a
time, so check-and-mark on the visited set needs no locking. Newly found
links are appended in discovery order; ordering by importance happens later
in the ranker.
"""
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from link_scout.crawler.link_extractor import (
    extract_links,
    find_pagination_links,
    find_post_links,
    is_listing_page,
)
from link_scout.crawler.models import CrawlResult, CrawlStatus, PageSnapshot
from link_scout.errors import CrawlCancelled, FetchErrorKind
from link_scout.logger import get_logger
from link_scout.tasks import FailureCounter, attempt
from link_scout.utils import Origin, normalize_url

__all__ = ("Frontier",)

log = get_logger("frontier")

# (url, reached through the pagination extension)
_Entry = Tuple[str, bool]


class Frontier:
    """BFS queue + visited set with a hard page cap.

    State machine: ``idle -> running -> completed | capped_out | cancelled``.
    All three end states hand back a valid :class:`CrawlResult`.
    """

    def __init__(
        self,
        provider,
        seed: str,
        *,
        max_pages: int = 200,
        max_pagination_pages: int = 10,
        stop: Optional[asyncio.Event] = None,
        failures: Optional[FailureCounter] = None,
    ) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        self.provider = provider
        self.origin = Origin.from_url(seed)
        self.seed = normalize_url(seed, origin=self.origin)
        self.max_pages = max_pages
        self.max_pagination_pages = max_pagination_pages
        self.stop = stop
        self.failures = failures if failures is not None else FailureCounter()
        self.status = CrawlStatus.IDLE
        self._visited: Set[str] = set()
        self._queue: Deque[_Entry] = deque()
        self._queued: Set[str] = set()
        self._pagination_taken = 0

    @classmethod
    def from_config(cls, config, provider, **kwargs) -> Frontier:
        return cls(
            provider,
            str(config.base_url),
            max_pages=config.max_pages,
            max_pagination_pages=config.max_pagination_pages,
            **kwargs,
        )

    @property
    def discovered(self) -> int:
        return len(self._visited) + len(self._queue)

    async def crawl(self) -> CrawlResult:
        if self.status is not CrawlStatus.IDLE:
            raise RuntimeError(f"Frontier already {self.status.value}")
        self.status = CrawlStatus.RUNNING
        log.info("Старт обхода: %s (max_pages=%d)", self.seed, self.max_pages)
        start = time.monotonic()
        result = CrawlResult(seed=self.seed, status=self.status)
        self._enqueue((self.seed, False))

        try:
            while self._queue and len(self._visited) < self.max_pages:
                url, via_pagination = self._queue.popleft()
                self._queued.discard(url)
                if url in self._visited:
                    continue
                self._visited.add(url)
                result.visited.append(url)

                snapshot = await attempt(
                    self.provider.fetch,
                    url,
                    log=log,
                    stop=self.stop,
                    failures=self.failures,
                    quiet_kinds=(FetchErrorKind.NON_HTML,),
                )
                if snapshot is None:
                    continue
                result.pages.append(snapshot)
                for entry in self._discover(snapshot, via_pagination):
                    self._enqueue(entry)
        except CrawlCancelled:
            self.status = CrawlStatus.CANCELLED
        else:
            self.status = CrawlStatus.CAPPED_OUT if self._queue else CrawlStatus.COMPLETED

        result.status = self.status
        result.failures = {url: kind for url, kind in self.failures.by_url.items() if url in self._visited}
        duration = time.monotonic() - start
        log.info(
            "Обход завершён (%s): %d страниц, %d посещено за %.2f с",
            self.status.value,
            len(result.pages),
            len(result.visited),
            duration,
        )
        return result

    def _enqueue(self, entry: _Entry) -> None:
        url = entry[0]
        if url in self._visited or url in self._queued:
            return
        self._queued.add(url)
        self._queue.append(entry)

    def _discover(self, snapshot: PageSnapshot, via_pagination: bool) -> List[_Entry]:
        links = extract_links(snapshot, self.origin)
        entries: List[_Entry] = [(link, False) for link in links]
        # Pagination targets are not re-tested as listings, so listings cannot chain.
        if via_pagination or not is_listing_page(snapshot):
            return entries

        known = set(links)
        for link in find_post_links(snapshot, self.origin):
            if link not in known:
                known.add(link)
                entries.append((link, False))

        for link in find_pagination_links(snapshot, self.origin):
            if link in known or link in self._visited or link in self._queued:
                continue
            if self._pagination_taken >= self.max_pagination_pages:
                log.debug("Pagination budget exhausted, skipping %s", link)
                break
            self._pagination_taken += 1
            known.add(link)
            entries.append((link, True))
        return entries
