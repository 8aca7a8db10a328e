"""Synchronous publish/subscribe bus for slide tracker domain events.

Recording, analysis and the training session announce what happened on the
bus; the UI, exporters and tests subscribe by event class.
"""

from __future__ import annotations

import threading
from collections import Counter, defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Type, TypeVar

from log_config.logger import get_logger

logger = get_logger(__name__)

E = TypeVar("E")
Handler = Callable[[E], None]


class EventBus:
    """Routes events to handlers registered for their exact class.

    Handlers run on the publishing thread, in subscription order. A handler
    that raises is logged and counted; the remaining handlers still run and
    the publisher never sees the error.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handlers: DefaultDict[Type, List[Handler]] = defaultdict(list)
        self._published: Counter = Counter()
        self._handler_failures = 0

    def subscribe(self, event_type: Type[E], handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)
            count = len(self._handlers[event_type])
        logger.debug(f"{event_type.__name__}: {count} handler(s)")

    def unsubscribe(self, event_type: Type[E], handler: Handler) -> bool:
        """Drop ``handler``; False if it was not subscribed to ``event_type``."""
        with self._lock:
            handlers = self._handlers.get(event_type)
            if not handlers or handler not in handlers:
                return False
            handlers.remove(handler)
            return True

    def publish(self, event: Any) -> None:
        """Deliver ``event`` to a snapshot of the current handlers.

        Handlers subscribed while the event is being delivered only see
        later events.
        """
        name = type(event).__name__
        with self._lock:
            handlers = list(self._handlers.get(type(event), ()))
            self._published[name] += 1

        failures = 0
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                failures += 1
                logger.opt(exception=e).error(
                    f"{name} handler {getattr(handler, '__name__', handler)!r} raised {e!r}"
                )

        if failures:
            with self._lock:
                self._handler_failures += failures
            logger.warning(f"{failures} of {len(handlers)} {name} handler(s) failed")

    def get_subscriber_count(self, event_type: Type[E]) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))

    def get_stats(self) -> Dict[str, Any]:
        """Snapshot of subscriptions, per-event publish counts and handler failures."""
        with self._lock:
            return {
                "event_types": sum(1 for handlers in self._handlers.values() if handlers),
                "total_subscribers": sum(len(handlers) for handlers in self._handlers.values()),
                "event_counts": dict(self._published),
                "handler_failures": self._handler_failures,
            }

    def reset(self) -> None:
        """Forget every handler and all counters."""
        with self._lock:
            self._handlers.clear()
            self._published.clear()
            self._handler_failures = 0
        logger.debug("EventBus reset")

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (
            f"EventBus(event_types={stats['event_types']}, "
            f"subscribers={stats['total_subscribers']}, "
            f"published={sum(stats['event_counts'].values())})"
        )
