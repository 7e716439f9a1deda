"""Custom exceptions raised by the in-memory cache."""

from __future__ import annotations

from collections.abc import Hashable


class CacheError(Exception):
    """Base exception for all cache errors."""

    pass


class KeyNotFoundError(CacheError, KeyError):
    """Raised when a key has no entry in the cache.

    Subclasses :class:`KeyError` so callers written against mapping
    semantics keep working.
    """

    def __init__(self, key: Hashable) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"The key {self.key!r} was not found in the cache."


class InvalidCapacityError(CacheError, ValueError):
    """Raised when a cache is configured with a non-positive capacity."""

    def __init__(self, capacity: object) -> None:
        super().__init__(f"Cache capacity must be a positive integer, got {capacity!r}")
        self.capacity = capacity


class ConfigurationConflictError(CacheError, RuntimeError):
    """Raised when a shared cache is re-requested with a different capacity."""

    def __init__(self, name: str, configured: int, requested: int) -> None:
        super().__init__(
            f"Cache '{name}' is already configured with capacity {configured}; "
            f"cannot reconfigure it with capacity {requested}."
        )
        self.name = name
        self.configured = configured
        self.requested = requested


class CacheNotConfiguredError(CacheError, LookupError):
    """Raised when a shared cache is requested before it has been configured."""

    pass


class ChannelClosedError(CacheError):
    """Raised when reading from a closed, fully drained eviction channel."""

    pass
