"""Recency index backed by a slot arena.

Entries live in parallel lists indexed by an integer *handle*. Recency order
is an intrusive doubly-linked list threaded through the ``prev``/``next``
lists, head = most recently used, tail = least recently used. Released slots
are pushed on a free list and reused, so a handle stays valid until its own
slot is unlinked regardless of what happens to other slots.

The arena is not thread-safe; :class:`~inmemory_cache.core.cache.LRUCache`
owns it and serializes every call under its lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterator, List, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")

NIL = -1


@dataclass(frozen=True)
class Entry(Generic[K, V]):
    """Immutable key/value pair stored at one position of the recency index."""

    key: K
    value: V


class RecencyArena(Generic[K, V]):
    """Ordered MRU -> LRU sequence of entries with O(1) relinking.

    Parameters
    ----------
    reserve: int
        Number of slots to pre-allocate. The arena still grows on demand
        beyond this; the cache passes its capacity so steady-state inserts
        never grow the lists.
    """

    def __init__(self, reserve: int = 0) -> None:
        self._reserve = max(0, reserve)
        self._entries: List[Optional[Entry[K, V]]] = []
        self._prev: List[int] = []
        self._next: List[int] = []
        self._free: List[int] = []
        self._head = NIL
        self._tail = NIL
        self._size = 0
        self._allocate(self._reserve)

    def _allocate(self, slots: int) -> None:
        start = len(self._entries)
        self._entries.extend([None] * slots)
        self._prev.extend([NIL] * slots)
        self._next.extend([NIL] * slots)
        # Lowest slot on top of the stack so handles are handed out in order
        self._free.extend(range(start + slots - 1, start - 1, -1))

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Entry[K, V]]:
        """Yield live entries from most to least recently used."""
        handle = self._head
        while handle != NIL:
            yield self._check(handle)
            handle = self._next[handle]

    def insert_front(self, entry: Entry[K, V]) -> int:
        """Store ``entry`` in a free slot at the head and return its handle."""
        if not self._free:
            self._allocate(max(1, len(self._entries)))
        handle = self._free.pop()
        self._entries[handle] = entry
        self._link_front(handle)
        self._size += 1
        return handle

    def move_to_front(self, handle: int) -> None:
        """Mark the entry at ``handle`` as most recently used."""
        self._check(handle)
        if handle == self._head:
            return
        self._detach(handle)
        self._link_front(handle)

    def unlink(self, handle: int) -> Entry[K, V]:
        """Remove the entry at ``handle``, free its slot and return the entry."""
        entry = self._check(handle)
        self._detach(handle)
        self._entries[handle] = None
        self._free.append(handle)
        self._size -= 1
        return entry

    def tail(self) -> Optional[int]:
        """Handle of the least recently used entry, or None when empty."""
        return None if self._tail == NIL else self._tail

    def head(self) -> Optional[int]:
        """Handle of the most recently used entry, or None when empty."""
        return None if self._head == NIL else self._head

    def entry(self, handle: int) -> Entry[K, V]:
        """Return the entry stored at ``handle``."""
        return self._check(handle)

    def clear(self) -> None:
        """Drop every entry and shrink back to the reserved slot count."""
        self._entries = []
        self._prev = []
        self._next = []
        self._free = []
        self._head = NIL
        self._tail = NIL
        self._size = 0
        self._allocate(self._reserve)

    def _check(self, handle: int) -> Entry[K, V]:
        if not 0 <= handle < len(self._entries):
            raise ValueError(f"handle {handle} is out of range")
        entry = self._entries[handle]
        if entry is None:
            raise ValueError(f"handle {handle} refers to a released slot")
        return entry

    def _link_front(self, handle: int) -> None:
        self._prev[handle] = NIL
        self._next[handle] = self._head
        if self._head != NIL:
            self._prev[self._head] = handle
        self._head = handle
        if self._tail == NIL:
            self._tail = handle

    def _detach(self, handle: int) -> None:
        prev_h = self._prev[handle]
        next_h = self._next[handle]
        if prev_h != NIL:
            self._next[prev_h] = next_h
        else:
            self._head = next_h
        if next_h != NIL:
            self._prev[next_h] = prev_h
        else:
            self._tail = prev_h
        self._prev[handle] = NIL
        self._next[handle] = NIL
