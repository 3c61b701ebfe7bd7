# File: link_scout/utils.py
"""link_scout.utils: URL canonicalisation, same-origin checks and the skip-list filter."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Collection, List, Optional, Sequence, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

from link_scout.errors import NormalizationError, NormalizationErrorKind
from link_scout.logger import logger

__all__: Sequence[str] = (
    "Origin",
    "normalize_url",
    "try_normalize",
    "is_same_origin",
    "is_skipped_url",
    "url_path",
    "remove_duplicates",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}
_NON_HTTP_PREFIXES = ("mailto:", "tel:", "javascript:", "data:", "sms:", "callto:", "skype:", "ftp:", "file:")
_MULTI_SLASH_RE = re.compile(r"/{2,}")

# Path segments of admin/auth/commerce areas that never carry linkable content.
SKIPPED_SEGMENTS = frozenset(
    {
        "wp-admin",
        "wp-login.php",
        "wp-json",
        "admin",
        "administrator",
        "login",
        "logout",
        "signin",
        "sign-in",
        "signup",
        "sign-up",
        "register",
        "auth",
        "oauth",
        "cart",
        "basket",
        "checkout",
        "account",
        "my-account",
    }
)

_SKIPPED_EXTENSION_RE = re.compile(
    r"\.("
    r"pdf|doc[xm]?|xls[xmb]?|ppt[xm]?|odt|ods|odp|rtf|csv"
    r"|jpe?g|png|gif|svg|webp|bmp|ico|tiff?|avif"
    r"|zip|rar|gz|tgz|tar|7z|bz2"
    r"|css|js|mjs|map|json|xml|rss|atom"
    r"|mp3|mp4|m4a|wav|avi|mov|webm|ogg"
    r"|woff2?|ttf|otf|eot|exe|dmg|apk|msi"
    r")$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class Origin:
    """Scheme and host of the crawl seed; host includes a non-default port."""

    scheme: str
    host: str

    @classmethod
    def from_url(cls, url: str) -> Origin:
        parts = urlsplit(normalize_url(url))
        return cls(parts.scheme, parts.netloc)

    @property
    def root(self) -> str:
        return f"{self.scheme}://{self.host}/"

    def url_for(self, path: str) -> str:
        """Canonical URL of *path* on this origin."""
        return normalize_url(path, base=self.root, origin=self)


def _netloc(scheme: str, raw: str) -> str:
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        raise NormalizationError(raw, NormalizationErrorKind.MALFORMED) from exc
    host = (parts.hostname or "").rstrip(".")
    if not host:
        raise NormalizationError(raw, NormalizationErrorKind.MALFORMED)
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == _DEFAULT_PORTS[scheme]:
        return host
    return f"{host}:{port}"


def normalize_url(
    raw: str,
    base: Union[str, None] = None,
    origin: Optional[Origin] = None,
) -> str:
    """Return the canonical form of *raw*.

    Relative references are resolved against *base*. Fragments are dropped,
    scheme and host are lowercased, default ports removed, duplicate slashes
    and dot segments collapsed and the trailing slash stripped (the root
    path stays ``/``). Path case and the query string are preserved. When
    *origin* is given, a URL on the origin's host takes the origin's scheme,
    so ``http://`` and ``https://`` links to the seed site share one key.

    Raises :class:`NormalizationError` for ``mailto:``/``tel:``/… links and
    for anything that does not parse as an http(s) URL with a host.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise NormalizationError(str(raw), NormalizationErrorKind.MALFORMED)
    candidate = raw.strip()
    if candidate.lower().startswith(_NON_HTTP_PREFIXES):
        raise NormalizationError(raw, NormalizationErrorKind.NOT_HTTP)

    if base:
        candidate = urljoin(base, candidate)
    elif candidate.startswith("//"):
        candidate = f"{origin.scheme if origin else 'https'}:{candidate}"
    elif "://" not in candidate:
        candidate = f"{origin.scheme if origin else 'https'}://{candidate}"

    scheme = urlsplit(candidate).scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise NormalizationError(raw, NormalizationErrorKind.NOT_HTTP)
    netloc = _netloc(scheme, candidate)
    if origin is not None and netloc == origin.host:
        scheme = origin.scheme

    parts = urlsplit(candidate)
    path = _MULTI_SLASH_RE.sub("/", parts.path or "/")
    if not path.startswith("/"):
        path = "/" + path
    path = posixpath.normpath(path)
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def try_normalize(
    raw: str,
    base: Union[str, None] = None,
    origin: Optional[Origin] = None,
) -> Optional[str]:
    """:func:`normalize_url` that returns *None* instead of raising."""
    try:
        return normalize_url(raw, base=base, origin=origin)
    except NormalizationError as exc:
        logger.debug("Dropped URL %s", exc)
        return None


def is_same_origin(url: str, origin: Origin) -> bool:
    """True when the host of canonical *url* is exactly the origin host."""
    return urlsplit(url).netloc == origin.host


def url_path(url: str) -> str:
    return urlsplit(url).path or "/"


def is_skipped_url(url: str) -> bool:
    """True for admin/auth/cart/account areas and non-HTML file extensions."""
    path = url_path(url)
    segments = [segment.lower() for segment in path.split("/") if segment]
    if any(segment in SKIPPED_SEGMENTS for segment in segments):
        return True
    return bool(segments) and bool(_SKIPPED_EXTENSION_RE.search(segments[-1]))


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
