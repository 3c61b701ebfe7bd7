# link_scout/crawler/models.py
"""
Data models for the LinkScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class PageSnapshot:
    """Immutable result of fetching one URL."""

    url: str
    title: str = ""
    meta_description: str = ""
    headings: Tuple[str, ...] = ()
    h1_headings: Tuple[str, ...] = ()
    paragraphs: Tuple[str, ...] = ()
    list_items: Tuple[str, ...] = ()
    raw_text: str = ""
    outbound_links: Tuple[str, ...] = ()
    # Targets of <a rel="next|prev"> and <link rel="next|prev">.
    pagination_hints: Tuple[str, ...] = ()

    def has_content(self) -> bool:
        """True when at least one content block is non-empty."""
        blocks = (*self.headings, *self.paragraphs, *self.list_items, self.raw_text)
        return any(block.strip() for block in blocks)

    @property
    def content_blocks(self) -> List[str]:
        return [*self.headings, *self.paragraphs, *self.list_items]


class DiscoverySource(str, Enum):
    CRAWL = "crawl"
    PATTERN = "pattern"
    SITEMAP = "sitemap"


@dataclass(slots=True)
class DiscoveredPage:
    """One record per canonical URL, whatever number of sources found it."""

    url: str
    sources: List[DiscoverySource] = field(default_factory=list)
    snapshot: Optional[PageSnapshot] = None

    @property
    def source_origin(self) -> DiscoverySource:
        """The first source that found the page."""
        return self.sources[0]

    def add_source(self, source: DiscoverySource) -> None:
        if source not in self.sources:
            self.sources.append(source)


class CrawlStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CAPPED_OUT = "capped_out"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class CrawlResult:
    """What the frontier hands back: always valid, possibly partial."""

    seed: str
    status: CrawlStatus
    pages: List[PageSnapshot] = field(default_factory=list)
    visited: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def seed_reached(self) -> bool:
        return any(page.url == self.seed for page in self.pages)
