# File: link_scout/parser/sitemap_parser.py
"""link_scout.parser.sitemap_parser: Чтение sitemap.xml / sitemap_index.xml и извлечение URL."""

from __future__ import annotations

import asyncio
import html
import re
from typing import List, Optional

from link_scout.errors import CrawlCancelled, FetchErrorKind
from link_scout.logger import get_logger
from link_scout.tasks import FailureCounter, attempt
from link_scout.utils import Origin, is_same_origin, remove_duplicates, try_normalize, url_path

log = get_logger("sitemap")

SITEMAP_PATHS = ("/sitemap.xml", "/sitemap_index.xml")

_LOC_RE = re.compile(r"<loc>(.*?)</loc>", re.IGNORECASE | re.DOTALL)
_CDATA_RE = re.compile(r"^<!\[CDATA\[(.*)\]\]>$", re.DOTALL)


def parse_sitemap(xml_content: str) -> List[str]:
    """Возвращает текст всех тегов <loc> в порядке появления.

    Литеральное сопоставление тегов вместо XML-парсера: битые и обрезанные
    sitemap всё равно отдают найденные URL.

    Пример:
    ```python
    from link_scout.parser.sitemap_parser import parse_sitemap

    urls = parse_sitemap("<urlset><url><loc>https://x.com/a</loc></url></urlset>")
    # ['https://x.com/a']
    ```
    """
    locs: List[str] = []
    for match in _LOC_RE.finditer(xml_content):
        value = match.group(1).strip()
        cdata = _CDATA_RE.match(value)
        if cdata:
            value = cdata.group(1).strip()
        value = html.unescape(value)
        if value:
            locs.append(value)
    return locs


def _is_nested_sitemap(url: str) -> bool:
    return url_path(url).lower().endswith(".xml")


async def read_sitemap(
    provider,
    origin: Origin,
    *,
    follow_index: bool = True,
    stop: Optional[asyncio.Event] = None,
    failures: Optional[FailureCounter] = None,
) -> List[str]:
    """Пробует sitemap.xml, затем sitemap_index.xml; первый файл с <loc> выигрывает.

    Возвращает канонические URL. Никогда не бросает исключений: отсутствие
    sitemap: ожидаемая ситуация, результат тогда пустой.
    """
    urls: List[str] = []
    quiet = (FetchErrorKind.NOT_FOUND, FetchErrorKind.NETWORK_ERROR, FetchErrorKind.TIMEOUT)

    async def _locs(url: str) -> List[str]:
        text = await attempt(provider.fetch_text, url, log=log, stop=stop, failures=failures, quiet_kinds=quiet)
        if text is None:
            return []
        return [u for u in (try_normalize(loc, origin=origin) for loc in parse_sitemap(text)) if u]

    try:
        for path in SITEMAP_PATHS:
            sitemap_url = origin.url_for(path)
            found = await _locs(sitemap_url)
            if not found:
                continue
            log.info("Sitemap %s: %d <loc> entries", sitemap_url, len(found))
            for loc in found:
                if follow_index and _is_nested_sitemap(loc) and is_same_origin(loc, origin):
                    urls.extend(u for u in await _locs(loc) if not _is_nested_sitemap(u))
                else:
                    urls.append(loc)
            break
        else:
            log.debug("No sitemap found for %s", origin.root)
    except CrawlCancelled:
        log.info("Sitemap reading cancelled, keeping %d URLs", len(urls))
    return remove_duplicates(urls)
