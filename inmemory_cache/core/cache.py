"""Thread-safe fixed-capacity LRU cache.

:class:`LRUCache` composes a key index (``dict`` from key to arena handle)
with a :class:`~inmemory_cache.core.arena.RecencyArena` behind a single
``threading.Lock``. Every operation mutates both structures in the same
critical section, so callers never observe one without the other.

Eviction notifications are delivered after the lock is released.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from ..exceptions import CacheError, InvalidCapacityError, KeyNotFoundError
from .arena import Entry, RecencyArena
from .events import EvictionChannel, EvictionHandler, EvictionNotifier, Subscription

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

# Upper bound on slots pre-allocated at construction; larger caches grow lazily
_RESERVE_LIMIT = 4096


def validate_capacity(capacity: object) -> int:
    """Return ``capacity`` if it is a positive int, else raise.

    Raises
    ------
    InvalidCapacityError
        For non-integers (``bool`` included) and values <= 0.
    """
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidCapacityError(capacity)
    return capacity


@dataclass(frozen=True)
class Lookup(Generic[V]):
    """Outcome of :meth:`LRUCache.lookup`.

    Truthy on a hit. ``value`` is only meaningful when ``found`` is True.
    """

    found: bool
    value: Optional[V] = None

    def __bool__(self) -> bool:
        return self.found

    def value_or(self, default: Any) -> Any:
        """Return the cached value on a hit, ``default`` on a miss."""
        return self.value if self.found else default


MISS: Lookup[Any] = Lookup(found=False)


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for a cache instance.

    Attributes
    ----------
    capacity: int
        Configured maximum number of entries.
    size: int
        Entries currently held.
    hits: int
        Successful ``get``/``lookup`` calls.
    misses: int
        ``get``/``lookup`` calls for absent keys.
    evictions: int
        Entries dropped to make room for new keys.
    """

    capacity: int
    size: int
    hits: int
    misses: int
    evictions: int

    @property
    def hit_ratio(self) -> float:
        """Hits over total lookups (0.0 when nothing was looked up)."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class LRUCache(Generic[K, V]):  # pylint: disable=too-many-instance-attributes
    """Fixed-capacity least-recently-used cache.

    Parameters
    ----------
    capacity: int
        Maximum number of entries; fixed for the lifetime of the instance.
    on_evict: Iterable[EvictionHandler], optional
        Handlers subscribed before the instance is returned, so they see
        every eviction including the first.
    name: str
        Label used in log records.

    Raises
    ------
    InvalidCapacityError
        If ``capacity`` is not a positive integer.
    """

    def __init__(
        self,
        capacity: int,
        on_evict: Optional[Iterable[EvictionHandler]] = None,
        name: str = "cache",
    ) -> None:
        self._capacity = validate_capacity(capacity)
        self.name = name
        self._lock = threading.Lock()
        self._index: Dict[K, int] = {}
        self._order: RecencyArena[K, V] = RecencyArena(
            reserve=min(self._capacity, _RESERVE_LIMIT)
        )
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self.evicted: EvictionNotifier[K, V] = EvictionNotifier(name)
        for handler in on_evict or ():
            self.evicted.subscribe(handler)
        logger.debug(
            "cache.created",
            extra={
                "cache": name,
                "capacity": self._capacity,
                "subscribers": len(self.evicted),
            },
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"capacity={self._capacity}, count={self.count})"
        )

    @property
    def capacity(self) -> int:
        """Maximum number of entries."""
        return self._capacity

    @property
    def count(self) -> int:
        """Number of entries currently held."""
        with self._lock:
            return len(self._index)

    def __len__(self) -> int:
        return self.count

    def add(self, key: K, value: V) -> None:
        """Insert or update ``key``.

        An existing key gets a fresh entry at the head and never causes an
        eviction. A new key at full capacity first evicts the tail entry;
        subscribers are then notified once, after the lock is released.
        """
        evicted: Optional[Entry[K, V]] = None
        with self._lock:
            handle = self._index.get(key)
            if handle is not None:
                self._order.unlink(handle)
            elif len(self._index) >= self._capacity:
                victim = self._order.tail()
                if victim is None:
                    raise CacheError(
                        f"cache '{self.name}' is full but its recency index is empty"
                    )
                evicted = self._order.unlink(victim)
                del self._index[evicted.key]
                self._evictions += 1
            self._index[key] = self._order.insert_front(Entry(key, value))

        if evicted is not None:
            logger.debug(
                "cache.evicted",
                extra={"cache": self.name, "key": repr(evicted.key)},
            )
            self.evicted.emit(evicted.key, evicted.value)

    def lookup(self, key: K) -> Lookup[V]:
        """Return a :class:`Lookup` for ``key``; a hit marks it most recently used."""
        with self._lock:
            handle = self._index.get(key)
            if handle is None:
                self._misses += 1
                return MISS
            self._order.move_to_front(handle)
            self._hits += 1
            return Lookup(found=True, value=self._order.entry(handle).value)

    def get(self, key: K) -> V:
        """Return the value for ``key`` and mark it most recently used.

        Raises
        ------
        KeyNotFoundError
            If ``key`` has no entry.
        """
        result = self.lookup(key)
        if not result.found:
            raise KeyNotFoundError(key)
        return result.value  # type: ignore[return-value]

    def try_remove(self, key: K) -> bool:
        """Remove ``key`` if present. Never notifies eviction subscribers."""
        with self._lock:
            handle = self._index.pop(key, None)
            if handle is None:
                return False
            self._order.unlink(handle)
            return True

    def reset(self) -> None:
        """Drop every entry without notifying subscribers; capacity is kept."""
        with self._lock:
            cleared = len(self._index)
            self._index.clear()
            self._order.clear()
        logger.info("cache.reset", extra={"cache": self.name, "cleared": cleared})

    def subscribe(self, handler: EvictionHandler) -> Subscription:
        """Shortcut for ``cache.evicted.subscribe(handler)``."""
        return self.evicted.subscribe(handler)

    def open_channel(
        self, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> EvictionChannel[K, V]:
        """Subscribe a new :class:`EvictionChannel` to this cache."""
        return EvictionChannel(self.evicted, loop=loop)

    # Read-only introspection; none of these touch recency.

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._index

    def keys(self) -> List[K]:
        """Snapshot of keys from most to least recently used."""
        with self._lock:
            return [entry.key for entry in self._order]

    def items(self) -> List[Tuple[K, V]]:
        """Snapshot of ``(key, value)`` pairs from most to least recently used."""
        with self._lock:
            return [(entry.key, entry.value) for entry in self._order]

    def stats(self) -> CacheStats:
        """Return current counters."""
        with self._lock:
            return CacheStats(
                capacity=self._capacity,
                size=len(self._index),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __getitem__(self, key: K) -> V:
        return self.get(key)

    def __setitem__(self, key: K, value: V) -> None:
        self.add(key, value)
