"""Cache invalidation for writes across products, orders, reviews and admin aggregates.

A write describes what it touched with one or more mutation events. Each
event variant carries only the identifiers it needs and maps to a fixed set
of keys; ``CacheInvalidator.invalidate`` evicts the union in one delete.

Product invalidation is targeted: only the ids carried by the event get
their ``product-{id}`` key evicted. The store is never enumerated.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import logging

from app.core.cache import CacheManager
from app.core.cache_config import CACHE_KEYS, PRODUCT_GROUP_KEYS, ADMIN_GROUP_KEYS
from app.core.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)

EntityId = Union[str, int]


@dataclass(frozen=True)
class ProductMutation:
    """Products were created, updated, deleted or had stock/ratings changed."""
    product_id: Union[EntityId, Sequence[EntityId], None] = None

    @property
    def product_ids(self) -> List[str]:
        if self.product_id is None:
            return []
        if isinstance(self.product_id, (str, int)):
            return [str(self.product_id)]
        return [str(i) for i in self.product_id]


@dataclass(frozen=True)
class OrderMutation:
    user_id: Optional[EntityId] = None
    order_id: Optional[EntityId] = None


@dataclass(frozen=True)
class ReviewMutation:
    product_id: Optional[EntityId] = None


@dataclass(frozen=True)
class AdminMutation:
    pass


MutationEvent = Union[ProductMutation, OrderMutation, ReviewMutation, AdminMutation]


def _suffix(value: Optional[EntityId]) -> str:
    # A missing id still yields a valid (harmless) key
    return "" if value is None else str(value)


def keys_for(event: MutationEvent) -> List[str]:
    """Exact cache keys made stale by one event."""
    if isinstance(event, ProductMutation):
        return PRODUCT_GROUP_KEYS + [CACHE_KEYS["product"].format(pid) for pid in event.product_ids]
    if isinstance(event, OrderMutation):
        return [
            CACHE_KEYS["all_orders"],
            CACHE_KEYS["my_orders"].format(_suffix(event.user_id)),
            CACHE_KEYS["order"].format(_suffix(event.order_id)),
        ]
    if isinstance(event, ReviewMutation):
        return [CACHE_KEYS["reviews"].format(_suffix(event.product_id))]
    if isinstance(event, AdminMutation):
        return list(ADMIN_GROUP_KEYS)
    raise TypeError(f"Unknown mutation event: {event!r}")


def collect_keys(*events: MutationEvent) -> List[str]:
    keys: List[str] = []
    for event in events:
        for key in keys_for(event):
            if key not in keys:
                keys.append(key)
    return keys


class CacheInvalidator:
    """Centralized cache invalidation for data consistency"""

    def __init__(self, cache: CacheManager):
        self.cache = cache

    async def invalidate(self, *events: MutationEvent) -> List[str]:
        keys = collect_keys(*events)
        if not keys:
            return keys
        try:
            deleted = await self.cache.delete(keys)
        except CacheUnavailableError:
            logger.error(f"Cache invalidation failed, entries may be stale: {keys}")
            raise
        logger.info(f"Invalidated {deleted} of {len(keys)} cache keys: {keys}")
        return keys
