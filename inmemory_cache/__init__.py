"""
In-memory cache package.

Provides a thread-safe, fixed-capacity LRU cache with eviction notifications,
an optional registry for explicitly shared instances, and a small demo CLI.
"""

from .__version__ import __version__
from .core import (
    CacheRegistry,
    CacheStats,
    EvictionChannel,
    LRUCache,
    Lookup,
    Subscription,
    get_shared_cache,
    reset_shared_caches,
)
from .exceptions import (
    CacheError,
    CacheNotConfiguredError,
    ChannelClosedError,
    ConfigurationConflictError,
    InvalidCapacityError,
    KeyNotFoundError,
)

__all__ = [
    "__version__",
    "CacheError",
    "CacheNotConfiguredError",
    "CacheRegistry",
    "CacheStats",
    "ChannelClosedError",
    "ConfigurationConflictError",
    "EvictionChannel",
    "InvalidCapacityError",
    "KeyNotFoundError",
    "LRUCache",
    "Lookup",
    "Subscription",
    "get_shared_cache",
    "reset_shared_caches",
]
