# File: link_scout/classifier.py
"""link_scout.classifier: Page role classification.

One ordered rule table, evaluated top to bottom, first match wins. URL shape
is checked before content; headings are only consulted by the service rule.
The cascade always ends in ``other``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, Tuple

from link_scout.crawler.models import DiscoveredPage
from link_scout.utils import url_path

__all__ = ["PageType", "PageSignals", "RULES", "classify"]


class PageType(str, Enum):
    HOMEPAGE = "homepage"
    ABOUT = "about"
    SERVICE = "service"
    PRODUCT = "product"
    BLOG = "blog"
    CONTACT = "contact"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class PageSignals:
    """Lowercased inputs of the rule cascade."""

    path: str
    title: str
    headings: Tuple[str, ...]

    @classmethod
    def of(cls, page: DiscoveredPage) -> PageSignals:
        snapshot = page.snapshot
        return cls(
            path=url_path(page.url).lower(),
            title=(snapshot.title if snapshot else "").lower(),
            headings=tuple(h.lower() for h in snapshot.headings) if snapshot else (),
        )


HOMEPAGE_PATHS = ("/", "/index", "/home")
ABOUT_PATHS = ("/about", "/team")
CONTACT_PATHS = ("/contact",)
BLOG_PATHS = ("/blog", "/article", "/news", "/post", "/insights", "/commentary")
BLOG_TITLE_WORDS = ("blog", "article", "commentary")
PRODUCT_PATHS = ("/product/", "/solution/")
SERVICE_KEYWORDS = ("service", "portfolio", "strategy", "management", "solution", "offering")


def _contains(text: str, needles: Sequence[str]) -> bool:
    return any(needle in text for needle in needles)


def _is_homepage(s: PageSignals) -> bool:
    return s.path in HOMEPAGE_PATHS


def _is_about(s: PageSignals) -> bool:
    return _contains(s.path, ABOUT_PATHS) or "about" in s.title


def _is_contact(s: PageSignals) -> bool:
    return _contains(s.path, CONTACT_PATHS) or "contact" in s.title


def _is_blog(s: PageSignals) -> bool:
    return _contains(s.path, BLOG_PATHS) or _contains(s.title, BLOG_TITLE_WORDS)


def _is_product(s: PageSignals) -> bool:
    return _contains(s.path, PRODUCT_PATHS)


def _is_service(s: PageSignals) -> bool:
    return (
        _contains(s.title, SERVICE_KEYWORDS)
        or _contains(s.path, SERVICE_KEYWORDS)
        or any(_contains(heading, SERVICE_KEYWORDS) for heading in s.headings)
    )


RULES: Sequence[Tuple[Callable[[PageSignals], bool], PageType]] = (
    (_is_homepage, PageType.HOMEPAGE),
    (_is_about, PageType.ABOUT),
    (_is_contact, PageType.CONTACT),
    (_is_blog, PageType.BLOG),
    (_is_product, PageType.PRODUCT),
    (_is_service, PageType.SERVICE),
)


def classify(page: DiscoveredPage) -> PageType:
    """Deterministic, side-effect free page role."""
    signals = PageSignals.of(page)
    for predicate, page_type in RULES:
        if predicate(signals):
            return page_type
    return PageType.OTHER
