# File: link_scout/tasks.py
"""link_scout.tasks: the single "attempt, log, continue" combinator and stop-signal racing.

Every network call of the pipeline goes through :func:`attempt`, so a failed
page is logged once and reported as *None* instead of being retried or
propagated. :func:`until_stopped` aborts an in-flight call when the stop
event fires.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from link_scout.errors import CrawlCancelled, FetchError, FetchErrorKind

T = TypeVar("T")

__all__ = ["attempt", "until_stopped", "FailureCounter"]


async def until_stopped(awaitable: Awaitable[T], stop: Optional[asyncio.Event]) -> T:
    """Await *awaitable* unless *stop* fires first; then cancel it and raise CrawlCancelled."""
    if stop is None:
        return await awaitable
    task = asyncio.ensure_future(awaitable)
    if stop.is_set():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise CrawlCancelled()
    waiter = asyncio.ensure_future(stop.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise
    if task in done:
        waiter.cancel()
        return task.result()
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise CrawlCancelled()


class FailureCounter:
    """Records swallowed fetch failures (URL -> kind) for the run summary."""

    def __init__(self) -> None:
        self.by_url: dict[str, str] = {}

    def add(self, error: FetchError) -> None:
        self.by_url[error.url] = error.kind.value

    @property
    def by_kind(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for kind in self.by_url.values():
            counts[kind] = counts.get(kind, 0) + 1
        return counts

    @property
    def total(self) -> int:
        return len(self.by_url)


async def attempt(
    operation: Callable[[str], Awaitable[T]],
    url: str,
    *,
    log: logging.Logger,
    stop: Optional[asyncio.Event] = None,
    failures: Optional[FailureCounter] = None,
    quiet_kinds: tuple[FetchErrorKind, ...] = (),
) -> Optional[T]:
    """Run ``operation(url)``; on :class:`FetchError` log, count and return *None*.

    Failures whose kind is in *quiet_kinds* are logged at DEBUG (expected
    misses such as probe 404s), everything else at WARNING.
    :class:`CrawlCancelled` is never swallowed.
    """
    try:
        return await until_stopped(operation(url), stop)
    except FetchError as exc:
        level = logging.DEBUG if exc.kind in quiet_kinds else logging.WARNING
        log.log(level, "Skipped %s", exc)
        if failures is not None:
            failures.add(exc)
        return None
