# File: link_scout/errors.py
"""link_scout.errors: Exception taxonomy shared by the discovery pipeline."""

from __future__ import annotations

from enum import Enum


class FetchErrorKind(str, Enum):
    """Why a page could not be turned into a snapshot."""

    TIMEOUT = "timeout"
    NON_HTML = "non_html"
    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"


class FetchError(Exception):
    """A single URL could not be fetched. Always recovered locally."""

    def __init__(self, url: str, kind: FetchErrorKind, detail: str = "") -> None:
        self.url = url
        self.kind = kind
        self.detail = detail
        message = f"{kind.value}: {url}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NormalizationErrorKind(str, Enum):
    NOT_HTTP = "not_http"
    MALFORMED = "malformed"


class NormalizationError(ValueError):
    """Raw URL cannot become a canonical http(s) URL."""

    def __init__(self, raw: str, kind: NormalizationErrorKind) -> None:
        self.raw = raw
        self.kind = kind
        super().__init__(f"{kind.value}: {raw!r}")


class AggregationError(RuntimeError):
    """Discovery produced nothing usable: the seed site was unreachable."""

    def __init__(self, seed: str, reason: str = "") -> None:
        self.seed = seed
        self.reason = reason
        suffix = f" ({reason})" if reason else ""
        super().__init__(f"Seed site could not be reached: {seed}{suffix}")


class CrawlCancelled(Exception):
    """Raised inside a component when the pipeline stop signal fires."""


__all__ = [
    "FetchErrorKind",
    "FetchError",
    "NormalizationErrorKind",
    "NormalizationError",
    "AggregationError",
    "CrawlCancelled",
]
