# === FILE: link_scout/parser/html_parser.py ===
"""HTML parsing utilities for LinkScout.

Turns raw markup into an immutable :class:`~link_scout.crawler.models.PageSnapshot`:

* title: document <title> text, the first <h1> when the title is empty.
* meta_description: ``meta[name=description]`` or ``og:description``.
* headings: text of <h1>…<h3>, document order; h1_headings: the <h1> subset.
* paragraphs / list_items: text of <p> and <li>.
* raw_text: visible text (no <script>, <style>, …).
* outbound_links: absolute http(s) URLs from <a href>, deduplicated, stable order.
* pagination_hints: targets of ``rel="next"``/``rel="prev"`` anchors and links.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable, List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from link_scout.crawler.models import PageSnapshot

__all__: Sequence[str] = ("parse_html",)

_SKIPPED_HREF_PREFIXES = ("mailto:", "javascript:", "tel:", "#")
_PAGINATION_RELS = {"next", "prev", "previous"}


def _texts(tags: Iterable[Tag]) -> tuple[str, ...]:
    texts = (" ".join(tag.get_text(" ", strip=True).split()) for tag in tags)
    return tuple(text for text in texts if text)


def _absolute(base_url: str, href: str) -> str | None:
    href = href.strip()
    if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
        return None
    absolute = urljoin(base_url, href)
    if urlparse(absolute).scheme not in ("http", "https"):
        return None
    return absolute


def _links(soup: BeautifulSoup, base_url: str) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        absolute = _absolute(base_url, href)
        if absolute is not None:
            seen.setdefault(absolute, None)
    return tuple(seen)


def _pagination_hints(soup: BeautifulSoup, base_url: str) -> tuple[str, ...]:
    hints: List[str] = []
    for tag in soup.find_all(["a", "link"], href=True):
        rels = {str(rel).lower() for rel in (tag.get("rel") or [])}
        if not rels & _PAGINATION_RELS:
            continue
        href = tag.get("href")
        absolute = _absolute(base_url, href) if isinstance(href, str) else None
        if absolute is not None and absolute not in hints:
            hints.append(absolute)
    return tuple(hints)


def _meta_description(soup: BeautifulSoup) -> str:
    for attrs in ({"name": "description"}, {"property": "og:description"}):
        tag = soup.find("meta", attrs=attrs)
        if isinstance(tag, Tag):
            content = tag.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()
    return ""


def parse_html(url: str, html: str, base_url: str | None = None) -> PageSnapshot:
    """Parse *html* fetched for *url*.

    Parameters
    ----------
    url
        Canonical URL the snapshot is recorded under.
    html
        Raw markup.
    base_url
        URL relative links are resolved against (the final URL after
        redirects); defaults to *url*. A ``<base href>`` in the document wins.
    """
    soup = BeautifulSoup(html, "html.parser")
    resolve_against = base_url or url
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag) and isinstance(base_tag.get("href"), str):
        resolve_against = urljoin(resolve_against, base_tag["href"])  # type: ignore[arg-type]

    title_tag = soup.find("title")
    title = " ".join(title_tag.get_text(" ", strip=True).split()) if title_tag else ""
    headings = _texts(soup.find_all(["h1", "h2", "h3"]))
    h1_headings = _texts(soup.find_all("h1"))
    if not title:
        first_h1 = soup.find("h1")
        title = " ".join(first_h1.get_text(" ", strip=True).split()) if first_h1 else ""

    links = _links(soup, resolve_against)
    hints = _pagination_hints(soup, resolve_against)
    paragraphs = _texts(soup.find_all("p"))
    list_items = _texts(soup.find_all("li"))
    meta_description = _meta_description(soup)

    # Visible text (skip <script>, <style>, etc.)
    for element in soup(["script", "style", "noscript", "template"]):
        element.decompose()
    raw_text = " ".join(soup.stripped_strings)

    return PageSnapshot(
        url=url,
        title=title,
        meta_description=meta_description,
        headings=headings,
        h1_headings=h1_headings,
        paragraphs=paragraphs,
        list_items=list_items,
        raw_text=raw_text,
        outbound_links=links,
        pagination_hints=hints,
    )
