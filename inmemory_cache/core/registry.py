"""Shared cache instances keyed by (key type, value type).

A :class:`CacheRegistry` hands out one :class:`LRUCache` per type pair. The
first request fixes the capacity; asking again with the same capacity (or
with none) returns the same instance, asking with a different one fails.

Prefer constructing :class:`LRUCache` directly and passing it to the code
that needs it. Use a registry only when independent call sites must share
one instance, and obtain the handle once at startup.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from ..exceptions import CacheNotConfiguredError, ConfigurationConflictError
from .cache import LRUCache, validate_capacity

logger = logging.getLogger(__name__)

TypePair = Tuple[Any, Any]


def _pair_name(pair: TypePair) -> str:
    key_type, value_type = pair
    return (
        f"{getattr(key_type, '__qualname__', repr(key_type))}"
        f"->{getattr(value_type, '__qualname__', repr(value_type))}"
    )


class CacheRegistry:
    """Thread-safe map from type pair to a lazily built shared cache."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._caches: Dict[TypePair, LRUCache[Any, Any]] = {}

    def __len__(self) -> int:
        return len(self._caches)

    def get_or_create(
        self, key_type: Any, value_type: Any, capacity: Optional[int] = None
    ) -> LRUCache[Any, Any]:
        """Return the shared cache for ``(key_type, value_type)``.

        Parameters
        ----------
        key_type, value_type:
            Any hashable markers; usually the Python types of keys and values.
        capacity: int, optional
            Capacity to configure on first use. When omitted, the pair must
            already be configured.

        Raises
        ------
        InvalidCapacityError
            If ``capacity`` is given and not a positive integer.
        CacheNotConfiguredError
            If ``capacity`` is omitted and the pair has no instance yet.
        ConfigurationConflictError
            If the pair is already configured with a different capacity.
        """
        if capacity is not None:
            validate_capacity(capacity)
        pair = (key_type, value_type)

        cache = self._caches.get(pair)
        if cache is None:
            if capacity is None:
                raise CacheNotConfiguredError(
                    f"No shared cache configured for {_pair_name(pair)}; "
                    "pass a capacity on first use."
                )
            with self._lock:
                cache = self._caches.get(pair)
                if cache is None:
                    cache = LRUCache(capacity, name=_pair_name(pair))
                    self._caches[pair] = cache
                    logger.info(
                        "registry.created",
                        extra={"cache": cache.name, "capacity": capacity},
                    )
                    return cache

        if capacity is not None and capacity != cache.capacity:
            logger.warning(
                "registry.conflict",
                extra={
                    "cache": cache.name,
                    "configured": cache.capacity,
                    "requested": capacity,
                },
            )
            raise ConfigurationConflictError(cache.name, cache.capacity, capacity)
        return cache

    def configured(self, key_type: Any, value_type: Any) -> Optional[int]:
        """Capacity configured for the pair, or None if unconfigured."""
        cache = self._caches.get((key_type, value_type))
        return None if cache is None else cache.capacity

    def clear(self) -> None:
        """Forget every instance. Intended for tests."""
        with self._lock:
            self._caches.clear()


_shared = CacheRegistry()


def get_shared_cache(
    key_type: Any, value_type: Any, capacity: Optional[int] = None
) -> LRUCache[Any, Any]:
    """:meth:`CacheRegistry.get_or_create` on the process-wide registry."""
    return _shared.get_or_create(key_type, value_type, capacity)


def reset_shared_caches() -> None:
    """Test-only helper to clear the process-wide registry."""
    _shared.clear()
