import json
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional, Dict, List, Union
import time
import logging

from redis.exceptions import RedisError

from app.core.config import settings
from app.core.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)

Keys = Union[str, List[str]]

def _as_list(keys: Keys) -> List[str]:
    return [keys] if isinstance(keys, str) else list(keys)

class CacheBackend(ABC):
    """Stores serialized strings. Every value is replaced whole, never patched."""

    # 0 means entries never expire
    default_ttl: int = 0

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    async def delete(self, keys: Keys) -> int:
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

class MemoryCacheBackend(CacheBackend):
    """Process-local cache. Relies on explicit invalidation unless a ttl is passed."""

    def __init__(self):
        self._cache: Dict[str, Dict] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            await self._cleanup_expired()
            item = self._cache.get(key)
            if item and (item.get("expiry", 0) == 0 or time.time() < item["expiry"]):
                return item["value"]
            elif key in self._cache:
                del self._cache[key]
            return None

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        async with self._lock:
            ttl = self.default_ttl if ttl is None else ttl
            expiry = time.time() + ttl if ttl > 0 else 0
            self._cache[key] = {
                "value": value,
                "expiry": expiry,
                "created_at": time.time()
            }
            return True

    async def delete(self, keys: Keys) -> int:
        async with self._lock:
            return sum(1 for key in _as_list(keys) if self._cache.pop(key, None) is not None)

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    def keys(self) -> List[str]:
        return list(self._cache.keys())

    async def _cleanup_expired(self):
        current_time = time.time()
        expired_keys = [
            key for key, item in self._cache.items()
            if item.get("expiry", 0) > 0 and current_time >= item["expiry"]
        ]
        for key in expired_keys:
            del self._cache[key]

class RedisCacheBackend(CacheBackend):
    """Networked cache. Connection problems surface as CacheUnavailableError."""

    def __init__(self, redis_url: str, default_ttl: Optional[int] = None):
        import redis.asyncio as redis
        self.redis = redis.from_url(redis_url, decode_responses=True)
        self.default_ttl = settings.CACHE_TTL if default_ttl is None else default_ttl

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            raise CacheUnavailableError(f"Cache read failed for {key}") from e

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        try:
            ttl = self.default_ttl if ttl is None else ttl
            if ttl == 0:
                await self.redis.set(key, value)
            else:
                await self.redis.setex(key, ttl, value)
            return True
        except RedisError as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            raise CacheUnavailableError(f"Cache write failed for {key}") from e

    async def delete(self, keys: Keys) -> int:
        keys = _as_list(keys)
        if not keys:
            return 0
        try:
            return await self.redis.delete(*keys)
        except RedisError as e:
            logger.error(f"Redis DELETE error for keys {keys}: {e}")
            raise CacheUnavailableError("Cache invalidation failed") from e

    async def exists(self, key: str) -> bool:
        try:
            return await self.redis.exists(key) > 0
        except RedisError as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            raise CacheUnavailableError(f"Cache read failed for {key}") from e

    async def close(self):
        await self.redis.aclose()

def create_cache_backend(redis_url: Optional[str] = None) -> CacheBackend:
    redis_url = redis_url if redis_url is not None else settings.REDIS_URL
    if redis_url:
        logger.info("Initializing Redis cache backend")
        return RedisCacheBackend(redis_url)

    logger.info("Using in-memory cache backend")
    return MemoryCacheBackend()

class CacheManager:
    """JSON (de)serialization in front of a backend.

    Built once at startup and handed to every request through the
    ``get_cache`` dependency.
    """

    def __init__(self, backend: CacheBackend):
        self.backend = backend

    @property
    def default_ttl(self) -> int:
        return self.backend.default_ttl

    def _serialize(self, value: Any) -> str:
        return json.dumps(value, default=str)

    def _deserialize(self, value: str) -> Any:
        return json.loads(value)

    async def get(self, key: str) -> Optional[Any]:
        value = await self.backend.get(key)
        return self._deserialize(value) if value is not None else None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return await self.backend.set(key, self._serialize(value), ttl)

    async def delete(self, keys: Keys) -> int:
        return await self.backend.delete(keys)

    async def exists(self, key: str) -> bool:
        return await self.backend.exists(key)

    async def close(self):
        if isinstance(self.backend, RedisCacheBackend):
            await self.backend.close()
