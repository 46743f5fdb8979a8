from typing import Optional

import redis

from drone_hunter.config import settings


class RedisClient:
    _client = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        if cls._client is None:
            cls._client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return cls._client


def get_redis(url: Optional[str] = None) -> redis.Redis:
    """Get sync Redis client; the shared one unless a different URL is given."""
    if url is None or url == settings.REDIS_URL:
        return RedisClient.get_client()
    return redis.from_url(url, decode_responses=True)
