"""Synchronous EventBus for observers of composite trackers.

Subclasses of CompositeTracker are informed through the abstract hook
methods. External observers (plotting, tap prediction, debug logging)
subscribe to the event types below instead.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from log_config.logger import get_logger

logger = get_logger(__name__)

# Type variables for type-safe event handling
EventType = TypeVar("EventType")
EventHandler = Callable[[EventType], None]


@dataclass(frozen=True)
class SegmentAdvancedEvent:
    """Published when a composite tracker switches to a new segment.

    Attributes:
        tracker_name: Name of the publishing tracker
        finalized_index: Index of the segment that was just finalized
        new_index: Index of the new current segment
        start_time_guess: Approximate switch time (midpoint between the
            last point of the old and the first point of the new segment)
    """
    tracker_name: str
    finalized_index: int
    new_index: int
    start_time_guess: Optional[float]


@dataclass(frozen=True)
class SegmentStartTimeUpdatedEvent:
    """Published each time the supposed start time of the current segment is updated.

    At least once per segment, right after the segment is created.
    ``start_time`` is None while it cannot be determined.
    """
    tracker_name: str
    segment_index: int
    start_time: Optional[float]


class EventBus:
    """Publish/subscribe hub; handlers run synchronously on the publisher's thread.

    A bus is owned by one tracker (or shared by trackers confined to the
    same thread), so it does no locking. A failing handler is logged and
    does not prevent the remaining handlers from running.

    Example:
        ```python
        bus = EventBus()

        def handle_advance(event: SegmentAdvancedEvent):
            print(f"Segment {event.new_index} started near {event.start_time_guess}")

        bus.subscribe(SegmentAdvancedEvent, handle_advance)
        ```
    """

    def __init__(self) -> None:
        self._subscribers: Dict[Type, List[EventHandler]] = {}
        self._event_count: Dict[Type, int] = {}
        self._start_time = time.time()

    def subscribe(self, event_type: Type[EventType], handler: EventHandler) -> None:
        """Register handler for event type.

        Args:
            event_type: The event class to subscribe to
            handler: Callback function that takes event as parameter
        """
        self._subscribers.setdefault(event_type, []).append(handler)
        self._event_count.setdefault(event_type, 0)
        logger.debug(f"Subscribed handler to {event_type.__name__} "
                     f"({len(self._subscribers[event_type])} total subscribers)")

    def unsubscribe(self, event_type: Type[EventType], handler: EventHandler) -> bool:
        """Unregister handler for event type.

        Returns:
            True if handler was found and removed, False otherwise
        """
        if event_type not in self._subscribers:
            return False

        try:
            self._subscribers[event_type].remove(handler)
        except ValueError:
            return False
        logger.debug(f"Unsubscribed handler from {event_type.__name__} "
                     f"({len(self._subscribers[event_type])} remaining)")
        return True

    def publish(self, event: EventType) -> None:
        """Publish event to all subscribers.

        If a handler raises an exception, it is logged and other handlers
        still execute.
        """
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))
        self._event_count[event_type] = self._event_count.get(event_type, 0) + 1

        if not handlers:
            return

        failed_handlers = 0
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                failed_handlers += 1
                logger.opt(exception=e).error(
                    f"Event handler error for {event_type.__name__}: {e.__class__.__name__}: {e}"
                )

        if failed_handlers > 0:
            logger.warning(f"{failed_handlers}/{len(handlers)} handlers failed for {event_type.__name__}")

    def get_subscriber_count(self, event_type: Type[EventType]) -> int:
        return len(self._subscribers.get(event_type, []))

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics.

        Returns:
            Dict with statistics:
            - event_types: Number of event types registered
            - total_subscribers: Total number of subscriptions
            - event_counts: Dict of event_type -> publish count
            - uptime_seconds: Time since bus creation
        """
        return {
            "event_types": len(self._subscribers),
            "total_subscribers": sum(len(handlers) for handlers in self._subscribers.values()),
            "event_counts": {
                event_type.__name__: count
                for event_type, count in self._event_count.items()
            },
            "uptime_seconds": time.time() - self._start_time,
        }

    def clear_all_subscribers(self) -> None:
        self._subscribers.clear()
        self._event_count.clear()

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (f"EventBus(event_types={stats['event_types']}, "
                f"subscribers={stats['total_subscribers']})")


__all__ = ["EventBus", "SegmentAdvancedEvent", "SegmentStartTimeUpdatedEvent"]
