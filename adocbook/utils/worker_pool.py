"""
Bounded fan-out over a thread pool.

Results come back in input order regardless of completion order; the first
failure cancels work that has not started yet and is re-raised.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from typing import Callable, Iterable, List, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def run_bounded(fn: Callable[[T], R], items: Iterable[T], max_workers: int = 8) -> List[R]:
    items = list(items)
    if not items:
        return []
    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(fn, item) for item in items]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in pending:
            fut.cancel()
        # Surface the earliest-submitted failure
        for fut in futures:
            if fut in done and not fut.cancelled() and fut.exception() is not None:
                raise fut.exception()
        return [fut.result() for fut in futures]
