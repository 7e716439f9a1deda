"""Eviction notification: synchronous multicast and an asyncio channel.

The cache computes what was evicted while holding its data lock and calls
:meth:`EvictionNotifier.emit` only after releasing it, so a handler may call
back into the same cache without deadlocking.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Generic,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from ..exceptions import ChannelClosedError

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

EvictionHandler = Callable[[Any, Any], None]


class Subscription:
    """Handle returned by :meth:`EvictionNotifier.subscribe`.

    Usable as a context manager; the handler is detached on exit.
    """

    def __init__(self, notifier: "EvictionNotifier[Any, Any]", handler: EvictionHandler):
        self._notifier = notifier
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        """Whether the handler is still attached."""
        return self._active

    def unsubscribe(self) -> None:
        """Detach the handler. Calling this more than once is a no-op."""
        if self._active:
            self._notifier._remove(self)  # pylint: disable=protected-access
            self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class EvictionNotifier(Generic[K, V]):
    """Ordered list of eviction handlers.

    The handler list is an immutable tuple swapped under its own lock, which
    is independent of the cache's data lock. :meth:`emit` invokes a snapshot
    of it without holding any lock, so handlers may subscribe or unsubscribe
    while a broadcast is in flight.
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._subscriptions: Tuple[Subscription, ...] = ()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, handler: EvictionHandler) -> Subscription:
        """Register ``handler(key, value)`` to be called once per eviction.

        Handlers run in registration order. Subscribing the same callable
        twice delivers each eviction to it twice.

        Raises
        ------
        TypeError
            If ``handler`` is not callable.
        """
        if not callable(handler):
            raise TypeError(f"eviction handler must be callable, got {handler!r}")
        subscription = Subscription(self, handler)
        with self._lock:
            self._subscriptions = self._subscriptions + (subscription,)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions = tuple(
                s for s in self._subscriptions if s is not subscription
            )

    def emit(self, key: K, value: V) -> None:
        """Deliver one eviction to every handler.

        A handler exception is logged and re-raised to the caller; handlers
        after the failing one do not see this event.
        """
        with self._lock:
            subscriptions = self._subscriptions
        for subscription in subscriptions:
            try:
                subscription.handler(key, value)
            except Exception:
                logger.error(
                    "cache.eviction.handler_failed",
                    exc_info=True,
                    extra={"cache": self.name, "key": repr(key)},
                )
                raise


class _Closed:  # pylint: disable=too-few-public-methods
    """Sentinel queued once a channel is closed."""


_CLOSED = _Closed()


class EvictionChannel(Generic[K, V]):
    """Asyncio queue fed by evictions from any thread.

    The evicting thread only schedules a ``put_nowait`` on the channel's
    event loop and returns, so slow consumers never block cache writers.
    The channel subscribes itself on construction; :meth:`close` detaches it
    and ends iteration once already-queued evictions are drained.

    Parameters
    ----------
    notifier: EvictionNotifier
        Notifier to subscribe to (usually ``cache.evicted``).
    loop: asyncio.AbstractEventLoop, optional
        Loop that consumers run on. Defaults to the running loop, so a
        channel created outside a coroutine must pass one explicitly.
    """

    def __init__(
        self,
        notifier: EvictionNotifier[K, V],
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._queue: "asyncio.Queue[Union[Tuple[K, V], _Closed]]" = asyncio.Queue()
        self._closed = False
        self._name = notifier.name
        self._subscription = notifier.subscribe(self._publish)

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._closed

    def _publish(self, key: K, value: V) -> None:
        if self._closed:
            return
        if self._loop.is_closed():
            logger.warning("channel.loop_closed", extra={"cache": self._name})
            self._closed = True
            # May fire before __init__ has stored the subscription
            subscription = getattr(self, "_subscription", None)
            if subscription is not None:
                subscription.unsubscribe()
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, (key, value))

    def close(self) -> None:
        """Stop receiving evictions. Safe to call from any thread."""
        if self._closed:
            return
        self._closed = True
        self._subscription.unsubscribe()
        if not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._queue.put_nowait, _CLOSED)
        logger.debug("channel.closed", extra={"cache": self._name})

    async def get(self) -> Tuple[K, V]:
        """Wait for the next evicted ``(key, value)`` pair.

        Raises
        ------
        ChannelClosedError
            When the channel is closed and every queued eviction was consumed.
        """
        item = await self._queue.get()
        if isinstance(item, _Closed):
            # Leave the sentinel for any other consumer
            self._queue.put_nowait(item)
            raise ChannelClosedError(f"eviction channel for '{self._name}' is closed")
        return item

    def __aiter__(self) -> AsyncIterator[Tuple[K, V]]:
        return self

    async def __anext__(self) -> Tuple[K, V]:
        try:
            return await self.get()
        except ChannelClosedError:
            raise StopAsyncIteration from None
