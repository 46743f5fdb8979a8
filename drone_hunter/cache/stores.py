"""
Key-value stores backing the memoizing cache.

Values are JSON-serializable API payloads. Keys are opaque strings such as
``tree/acme/infra/<sha>``. Entries are never expired or invalidated here;
clearing the store is left to whoever owns it.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import redis

from drone_hunter.exceptions import DroneHunterConfigurationError

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    def exists(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any) -> None: ...


class MemoryCacheStore:
    """Process-local store, mostly for tests and one-off runs."""

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def exists(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str) -> Any:
        return self._data[key]

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value


class FileCacheStore:
    """
    Directory-backed store, one JSON document per key.

    Keys are percent-encoded into flat file names so ``/`` inside a key never
    creates subdirectories. Writes go through a temporary file and an atomic
    rename, so a crashed run never leaves a truncated entry behind.
    """

    def __init__(self, directory: str | os.PathLike = "drone-hunter.cache"):
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / f"{quote(key, safe='')}.json"

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def get(self, key: str) -> Any:
        path = self._path(key)
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            raise KeyError(key) from None

    def put(self, key: str, value: Any) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class RedisCacheStore:
    """Redis-backed store; entries are plain string keys holding JSON, without TTL."""

    def __init__(self, client: redis.Redis, prefix: str = "drone_hunter:"):
        self._redis = client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def exists(self, key: str) -> bool:
        return self._redis.exists(self._key(key)) > 0

    def get(self, key: str) -> Any:
        raw = self._redis.get(self._key(key))
        if raw is None:
            raise KeyError(key)
        if isinstance(raw, bytes):
            raw = raw.decode()
        return json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        # nx: keys are write-once
        self._redis.set(self._key(key), json.dumps(value), nx=True)


def build_cache_store(settings, backend: Optional[str] = None) -> CacheStore:
    """Create the store named by ``backend`` (or ``settings.CACHE_BACKEND``)."""
    name = (backend or settings.CACHE_BACKEND).lower()

    if name == "file":
        logger.debug(f"Using file cache at {settings.CACHE_DIR}")
        return FileCacheStore(settings.CACHE_DIR)

    if name == "redis":
        from drone_hunter.core.redis import get_redis

        logger.debug(f"Using redis cache at {settings.REDIS_URL}")
        return RedisCacheStore(
            get_redis(settings.REDIS_URL), prefix=settings.CACHE_KEY_PREFIX
        )

    if name == "memory":
        return MemoryCacheStore()

    raise DroneHunterConfigurationError(f"Unknown cache backend: {name!r}")
