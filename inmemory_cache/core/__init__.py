"""Cache engine, recency index, eviction notification and shared registry."""

from .arena import Entry, RecencyArena
from .cache import CacheStats, LRUCache, Lookup, MISS, validate_capacity
from .events import EvictionChannel, EvictionNotifier, Subscription
from .registry import CacheRegistry, get_shared_cache, reset_shared_caches

__all__ = [
    "CacheRegistry",
    "CacheStats",
    "Entry",
    "EvictionChannel",
    "EvictionNotifier",
    "LRUCache",
    "Lookup",
    "MISS",
    "RecencyArena",
    "Subscription",
    "get_shared_cache",
    "reset_shared_caches",
    "validate_capacity",
]
