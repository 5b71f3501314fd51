"""
Change Notification

Observer registry the tracking core publishes to after each mutation. The
core never knows how observers deliver the change (UI refresh, push, ...).

Events:
- StatisticsChanged(snapshot): a new statistics snapshot was computed
- TrackersChanged(): the tracker inventory was modified
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Type

from pydantic import BaseModel, ConfigDict

from habit_tracker.models.statistics import StatisticsSnapshot

logger = logging.getLogger(__name__)


class TrackerEvent(BaseModel):
    """Base class for core events"""
    model_config = ConfigDict(frozen=True)


class StatisticsChanged(TrackerEvent):
    snapshot: StatisticsSnapshot


class TrackersChanged(TrackerEvent):
    pass


Observer = Callable[[Any], None]


class EventBus:
    """
    Synchronous observer registry.

    Observers are called in subscription order on the publishing context. An
    observer that raises is logged and skipped; the others still receive the
    event.
    """

    def __init__(self):
        self._observers: Dict[Type[TrackerEvent], List[Observer]] = defaultdict(list)

    def subscribe(self, event_type: Type[TrackerEvent], observer: Observer) -> Callable[[], None]:
        """
        Register an observer for an event type

        Returns:
            Callable that removes the subscription
        """
        self._observers[event_type].append(observer)
        logger.debug(f"Subscribed {observer!r} to {event_type.__name__}")

        def unsubscribe() -> None:
            try:
                self._observers[event_type].remove(observer)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: TrackerEvent) -> int:
        """
        Deliver an event to every observer of its type or a base event type

        Observers of a more specific type run before observers of its bases.

        Returns:
            Number of observers that handled the event without raising
        """
        observers = [
            observer
            for event_type in type(event).__mro__
            for observer in self._observers.get(event_type, [])
        ]
        delivered = 0
        for observer in observers:
            try:
                observer(event)
                delivered += 1
            except Exception:
                logger.error(
                    f"Observer {observer!r} failed handling {type(event).__name__}",
                    exc_info=True
                )
        return delivered
