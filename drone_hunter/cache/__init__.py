from .memoizing import MemoizingCache
from .stores import (
    CacheStore,
    FileCacheStore,
    MemoryCacheStore,
    RedisCacheStore,
    build_cache_store,
)

__all__ = [
    "MemoizingCache",
    "CacheStore",
    "FileCacheStore",
    "MemoryCacheStore",
    "RedisCacheStore",
    "build_cache_store",
]
