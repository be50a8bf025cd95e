from typing import Any, Callable, Optional
import logging

from app.core.cache import CacheManager
from app.core.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


async def read_through(
    cache: CacheManager,
    key: str,
    loader: Callable[[], Any],
    ttl: Optional[int] = None,
) -> Any:
    """Return the cached value for ``key`` or load, store and return it.

    ``loader`` must return JSON-compatible data so a hit and a miss hand back
    the same shape. An unreachable cache is not a miss: the store is queried
    once and nothing is written back.
    """
    try:
        cached_value = await cache.get(key)
    except CacheUnavailableError:
        logger.warning(f"Cache unavailable, reading {key} from the store")
        return loader()

    if cached_value is not None:
        logger.debug(f"Cache HIT for key: {key}")
        return cached_value

    result = loader()
    try:
        await cache.set(key, result, ttl=ttl)
        logger.debug(f"Cache MISS for key: {key} (stored)")
    except CacheUnavailableError:
        logger.error(f"Failed to populate cache key {key}")
    return result
