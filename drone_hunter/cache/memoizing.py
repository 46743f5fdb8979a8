"""
Compute-if-absent cache on top of a CacheStore.

Every remote fetch made while hunting goes through ``get_or_compute`` so that
a second run against a warm store issues no API calls at all.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, TypeVar

from drone_hunter.cache.stores import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoizingCache:
    """
    Memoize remote fetches by cache key.

    Features:
    - ``compute`` is called at most once per key for the lifetime of the store
    - failed computations store nothing, so the next call retries
    - per-key locks keep concurrent misses on the same key from fetching twice;
      a key's lock is dropped once no caller holds or waits on it
    """

    def __init__(self, store: CacheStore):
        self._store = store
        # key -> [lock, number of callers holding or waiting on it]
        self._locks: Dict[str, List[Any]] = {}
        self._guard = threading.Lock()
        self.hits = 0
        self.misses = 0

    @contextmanager
    def _key_lock(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """
        Return the stored value for ``key``, computing and storing it on a miss.

        Args:
            key: Stable cache key, e.g. ``branches/acme/infra``
            compute: Zero-argument callable producing the value

        Returns:
            The cached or freshly computed value
        """
        if self._store.exists(key):
            return self._hit(key)

        with self._key_lock(key):
            # Another thread may have filled the key while we waited
            if self._store.exists(key):
                return self._hit(key)

            value = compute()
            self._store.put(key, value)
            with self._guard:
                self.misses += 1
            logger.info(f"(fetch) {key}")
            return value

    def _hit(self, key: str) -> Any:
        with self._guard:
            self.hits += 1
        logger.debug(f"(cache) {key}")
        return self._store.get(key)
