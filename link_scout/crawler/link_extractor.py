# link_scout/crawler/link_extractor.py
"""
Link extraction for the frontier: same-origin links, content-listing pages,
individual post links and pagination links.
"""
from __future__ import annotations

import re
from typing import Iterable, List
from urllib.parse import urlsplit

from link_scout.crawler.models import PageSnapshot
from link_scout.utils import Origin, is_same_origin, is_skipped_url, try_normalize, url_path

LISTING_PATH_MARKERS = ("/blog", "/article", "/news", "/commentary", "/insights", "/posts")
LISTING_TITLE_MARKERS = ("blog",)
POST_PATH_MARKERS = ("/blog/", "/article/", "/post/", "/news/", "/commentary/", "/insight/")

_YEAR_SEGMENT_RE = re.compile(r"/\d{4}(?:/|$)")
_PAGE_PATH_RE = re.compile(r"/page/\d+(?:/|$)", re.IGNORECASE)
_MIN_SLUG_LENGTH = 10


def _canonical(links: Iterable[str], origin: Origin, *, fragments: bool = True) -> List[str]:
    seen: dict[str, None] = {}
    for raw in links:
        if not fragments and "#" in raw:
            continue
        url = try_normalize(raw, origin=origin)
        if url is None or not is_same_origin(url, origin) or is_skipped_url(url):
            continue
        seen.setdefault(url, None)
    return list(seen)


def is_pagination_url(url: str) -> bool:
    """``?page=N`` style queries and ``/page/N`` paths."""
    parts = urlsplit(url)
    return "page=" in parts.query.lower() or bool(_PAGE_PATH_RE.search(parts.path))


def is_post_url(url: str) -> bool:
    """URL shape of an individual article: post path marker, year segment or long hyphenated slug."""
    path = url_path(url).lower()
    if any(marker in path for marker in POST_PATH_MARKERS):
        return True
    if _YEAR_SEGMENT_RE.search(path):
        return True
    slug = path.rstrip("/").rsplit("/", 1)[-1]
    return "-" in slug and len(slug) >= _MIN_SLUG_LENGTH


def is_listing_page(snapshot: PageSnapshot) -> bool:
    """Blog/article/news path segment, or a title or any <h1> mentioning the blog."""
    path = url_path(snapshot.url).lower()
    if any(marker in path for marker in LISTING_PATH_MARKERS):
        return True
    texts = (snapshot.title, *snapshot.h1_headings)
    return any(marker in text.lower() for text in texts for marker in LISTING_TITLE_MARKERS)


def extract_links(snapshot: PageSnapshot, origin: Origin) -> List[str]:
    """
    Canonical same-origin links of *snapshot*, skip-list applied.

    Hrefs carrying a ``#`` fragment are not followed here; on listing pages
    :func:`find_post_links` picks them up with the fragment stripped.

    Pagination-shaped URLs are left out: they are only followed through
    :func:`find_pagination_links` on listing pages.
    """
    return [
        url
        for url in _canonical(snapshot.outbound_links, origin, fragments=False)
        if not is_pagination_url(url)
    ]


def find_post_links(snapshot: PageSnapshot, origin: Origin) -> List[str]:
    """Post-shaped links, including in-page anchors like ``/blog/post#comments``."""
    return [
        url
        for url in _canonical(snapshot.outbound_links, origin)
        if is_post_url(url) and not is_pagination_url(url)
    ]


def find_pagination_links(snapshot: PageSnapshot, origin: Origin) -> List[str]:
    """rel=next/prev targets first, then ``page=`` and ``/page/N`` links."""
    hinted = _canonical(snapshot.pagination_hints, origin)
    shaped = [url for url in _canonical(snapshot.outbound_links, origin) if is_pagination_url(url)]
    return list(dict.fromkeys([*hinted, *shaped]))
