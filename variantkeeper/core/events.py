"""
In-process event bus with explicit subscription handles.

The external installer announces finished transactions by publishing
:data:`~variantkeeper.constants.OPERATION_COMPLETED`. Each subscriber owns
the :class:`Subscription` it gets back and must unsubscribe on teardown.
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from variantkeeper.utils.logger import get_logger

logger = get_logger("events")

Handler = Callable[[Any], Union[None, Awaitable[None]]]


class Subscription:
    """Handle for one registered handler. Unsubscribing twice is a no-op."""

    __slots__ = ("_bus", "name", "handler", "_active")

    def __init__(self, bus: "EventBus", name: str, handler: Handler) -> None:
        self._bus = bus
        self.name = name
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.unsubscribe()


class EventBus:
    """Named-event publisher.

    Example:
        >>> bus = EventBus()
        >>> sub = bus.subscribe("install-complete", print)
        >>> sub.unsubscribe()
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, name: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, name, handler)
        self._subscriptions.setdefault(name, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._subscriptions.get(subscription.name, [])
        if subscription in handlers:
            handlers.remove(subscription)
        if not handlers:
            self._subscriptions.pop(subscription.name, None)

    def subscriber_count(self, name: Optional[str] = None) -> int:
        if name is not None:
            return len(self._subscriptions.get(name, []))
        return sum(len(subs) for subs in self._subscriptions.values())

    async def publish(self, name: str, payload: Any = None) -> int:
        """Deliver *payload* to every handler subscribed to *name*.

        Handlers run in subscription order and coroutine handlers are
        awaited. A failing handler is logged and the remaining handlers
        still run.

        Returns:
            Number of handlers that were invoked.
        """
        # Snapshot so handlers may unsubscribe while being notified
        subscriptions = list(self._subscriptions.get(name, []))
        delivered = 0

        for subscription in subscriptions:
            if not subscription.active:
                continue
            delivered += 1
            try:
                result = subscription.handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Handler for event %r failed", name)

        logger.debug("Published %r to %d handler(s)", name, delivered)
        return delivered
