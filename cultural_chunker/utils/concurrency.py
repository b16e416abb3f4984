"""Concurrency primitives for per-chunk fan-out and multi-document batches.

Two patterns are exposed:

1. **bounded_map** -- The fan-out / join pattern used by the orchestrator:
   run one function over every chunk on a bounded thread pool, wait for
   *all* of them (the join barrier before relationship building), and
   return results in input order.  Exceptions are returned in place rather
   than raised so one bad chunk never aborts the document.

2. **throttled_gather** -- A drop-in replacement for ``asyncio.gather`` that
   wraps each awaitable in a semaphore acquire/release.  Used by callers
   that process many independent documents from async code.

Neither helper keeps state between calls: pools and semaphores are created
per invocation, so concurrent ``process()`` calls never share a resource.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

_T = TypeVar("_T")
_R = TypeVar("_R")


def default_worker_count(task_count: int, max_workers: int | None = None) -> int:
    """Return the pool size for *task_count* tasks.

    Mirrors :class:`~concurrent.futures.ThreadPoolExecutor`'s own default
    (``min(32, cpu_count + 4)``) and never exceeds the number of tasks.

    Parameters
    ----------
    task_count:
        Number of tasks that will be submitted.
    max_workers:
        Explicit upper bound; ``None`` uses the core-based default.

    Returns
    -------
    int
        A worker count of at least 1.
    """
    if max_workers is None:
        max_workers = min(32, (os.cpu_count() or 1) + 4)
    return max(1, min(max_workers, task_count))


def bounded_map(
    fn: Callable[[_T], _R],
    items: Sequence[_T],
    max_workers: int | None = None,
) -> list[_R | Exception]:
    """Apply *fn* to every item on a bounded thread pool and join.

    Parameters
    ----------
    fn:
        Function applied to each item.  Must not mutate shared state.
    items:
        Inputs, one task per item.
    max_workers:
        Upper bound on concurrently running tasks.

    Returns
    -------
    list[_R | Exception]
        Results in the same order as *items*; a task that raised an
        :class:`Exception` contributes the exception object instead of a
        result.  Anything else (``KeyboardInterrupt``, ``SystemExit``) is
        re-raised after the join, on the inline and pooled paths alike.
    """
    if not items:
        return []

    workers = default_worker_count(len(items), max_workers)
    if workers == 1:
        return [_call_capturing(fn, item) for item in items]

    # Leaving the ``with`` block waits for every future: this is the join.
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chunk-worker") as pool:
        futures = [pool.submit(fn, item) for item in items]

    results: list[_R | Exception] = []
    for future in futures:
        exc = future.exception()
        if exc is not None and not isinstance(exc, Exception):
            raise exc
        results.append(exc if exc is not None else future.result())
    return results


def _call_capturing(fn: Callable[[_T], _R], item: _T) -> _R | Exception:
    """Run *fn* inline, returning its exception instead of raising it."""
    try:
        return fn(item)
    except Exception as exc:  # noqa: BLE001 -- surfaced to the caller as a value
        return exc


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    max_concurrent: int = 4,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with semaphore throttling.

    Each coroutine is wrapped so it acquires the semaphore before executing
    and releases it afterward.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Optional semaphore for concurrency control.  When omitted a fresh
        semaphore of size *max_concurrent* is created for this call only.
    max_concurrent:
        Size of the per-call semaphore.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
