"""Concurrency helpers for read-validate-write units of work."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from ims.domain.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    backoff_base: float = 0.01,
) -> T:
    """Execute ``func`` and retry it on optimistic-locking conflicts.

    ``func`` must re-read whatever it mutates, so a retry starts from the
    latest committed state. The last conflict propagates once attempts
    are exhausted.
    """
    for attempt in range(attempts):
        try:
            return func()
        except ConcurrencyConflictError:
            if attempt >= attempts - 1:
                raise
            logger.debug("Concurrent update detected, retrying (attempt %d)", attempt + 1)
            time.sleep(backoff_base * (2 ** attempt))
    raise ConcurrencyConflictError("No attempts were made")


class KeyedLock:
    """One mutex per key, created on first use.

    Used to serialize work on the same (product, warehouse) pair while
    letting unrelated pairs proceed in parallel.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.RLock())
        with lock:
            yield
