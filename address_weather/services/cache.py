import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import redis

logger = logging.getLogger(__name__)


class RedisCache:
    """
    Stores JSON payload + metadata:
      key -> {"stored_at": <unix>, "payload": {...}}
    """

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.client = client or redis.from_url(redis_url, decode_responses=True)

    def read(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(key)
        except redis.RedisError as exc:
            logger.warning("Cache read for %s failed, treating as a miss: %s", key, exc)
            return None
        if not raw:
            return None

        try:
            obj = json.loads(raw)
            return obj.get("payload")
        except (ValueError, AttributeError):
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

    def write(self, key: str, payload: Any, ttl_seconds: int) -> None:
        obj = {"stored_at": int(time.time()), "payload": payload}
        try:
            self.client.setex(key, ttl_seconds, json.dumps(obj))
        except redis.RedisError as exc:
            logger.warning("Cache write for %s failed: %s", key, exc)


class MemoryCache:
    """In-process TTL cache with the same read/write surface as RedisCache."""

    def __init__(self, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time_func = time_func
        self._storage: Dict[str, Tuple[float, Any]] = {}

    def read(self, key: str) -> Optional[Any]:
        item = self._storage.get(key)
        if not item:
            return None
        expires_at, value = item
        if expires_at <= self._time_func():
            self._storage.pop(key, None)
            return None
        return value

    def write(self, key: str, payload: Any, ttl_seconds: int) -> None:
        self._storage[key] = (self._time_func() + ttl_seconds, payload)

    def clear(self) -> None:
        self._storage.clear()
