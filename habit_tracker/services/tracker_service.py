"""
TrackerService - Tracking Session

Owns the tracker inventory, the completion ledger and the view state for one
user session, and is the single place where they are mutated. Storage is
injected; every ledger mutation is persisted, then statistics are recomputed
and published.

All calls are expected on one event loop: storage I/O may run elsewhere (see
BlockingStorageAdapter) but results are applied here, after the await.
"""

import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional
from uuid import UUID

from habit_tracker import config
from habit_tracker.events import EventBus, StatisticsChanged, TrackersChanged
from habit_tracker.exceptions import (
    HabitTrackerError,
    NotFoundError,
    ValidationError,
    wrap_storage_exception,
)
from habit_tracker.models.statistics import StatisticsSnapshot
from habit_tracker.models.tracker import Tracker, TrackerCategory
from habit_tracker.storage.base import TrackerStorage
from habit_tracker.tracking.filters import (
    CategoryFilterPipeline,
    FilterMode,
    build_categories,
    completion_predicate,
)
from habit_tracker.tracking.ledger import CompletionLedger
from habit_tracker.tracking.recurrence import due_trackers
from habit_tracker.tracking.statistics import StatisticsAggregator
from habit_tracker.utils.calendar import DayLike, start_of_day, today

logger = logging.getLogger(__name__)


class TrackerService:
    """
    Service for trackers, completions and their derived views.

    Responsibilities:
    - Tracker inventory (create, edit, pin/unpin, delete)
    - Completion toggling through the CompletionLedger
    - Statistics recomputation after every ledger mutation
    - Filtered category view for the selected day, mode and search text
    """

    def __init__(
        self,
        storage: TrackerStorage,
        event_bus: Optional[EventBus] = None,
        aggregator: Optional[StatisticsAggregator] = None,
        clock: Callable[[], date] = today,
    ):
        """
        Initialize TrackerService.

        Args:
            storage: Storage collaborator
            event_bus: Where change events are published (new bus if omitted)
            aggregator: Statistics aggregator (one sharing clock if omitted)
            clock: Returns the current calendar day
        """
        self.storage = storage
        self.events = event_bus or EventBus()
        self.clock = clock
        self.aggregator = aggregator or StatisticsAggregator(clock=clock)
        self.ledger = CompletionLedger()
        self.pipeline = CategoryFilterPipeline(self.ledger)

        self._trackers: Dict[UUID, Tracker] = {}
        self._category_titles: List[str] = []

        self.current_date: date = clock()
        self.filter_mode: FilterMode = FilterMode.ALL
        self.search_text: str = ""
        logger.debug("TrackerService initialized")

    # ------------------------------------------------------------------
    # Storage access
    # ------------------------------------------------------------------

    async def _storage_call(
        self,
        operation: str,
        func: Callable[..., Awaitable[Any]],
        *args,
        write: bool = False
    ) -> Any:
        try:
            return await func(*args)
        except HabitTrackerError:
            raise
        except Exception as e:
            raise wrap_storage_exception(e, operation=operation, write=write) from e

    async def load(self) -> None:
        """
        Load trackers, completion records and the stored statistics

        Raises:
            StorageReadError: If trackers or records cannot be fetched
        """
        trackers = await self._storage_call("fetch_all_trackers", self.storage.fetch_all_trackers)
        records = await self._storage_call(
            "fetch_all_completion_records",
            self.storage.fetch_all_completion_records
        )

        self._trackers = {tracker.id: tracker for tracker in trackers}
        self.ledger = CompletionLedger(records)
        self.pipeline.ledger = self.ledger

        await self.aggregator.load(self.storage)
        logger.info(f"Loaded {len(self._trackers)} trackers and {len(self.ledger)} completion records")
        self.events.publish(TrackersChanged())

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    @property
    def trackers(self) -> List[Tracker]:
        return list(self._trackers.values())

    def get_tracker(self, tracker_id: UUID) -> Tracker:
        """
        Look up a tracker by id

        Raises:
            NotFoundError: If the id is unknown
        """
        tracker = self._trackers.get(tracker_id)
        if tracker is None:
            raise NotFoundError(
                f"Tracker {tracker_id} does not exist",
                record_type="Tracker",
                record_id=str(tracker_id),
            )
        return tracker

    def categories(self) -> List[TrackerCategory]:
        """All categories, unfiltered, pinned first then alphabetical"""
        return build_categories(self._trackers.values(), self._category_titles)

    def _validate_category_title(self, title: str) -> str:
        if not title or not title.strip():
            raise ValidationError("Category title cannot be empty", field="category_title", value=title)
        if title == config.PINNED_CATEGORY_TITLE:
            raise ValidationError(
                f"'{title}' is reserved for pinned trackers",
                field="category_title",
                value=title
            )
        return title

    def create_category(self, title: str) -> bool:
        """
        Add an empty category

        Returns:
            True if created, False if a category with that title exists
        """
        title = self._validate_category_title(title)
        if any(category.title == title for category in self.categories()):
            return False
        self._category_titles.append(title)
        logger.info(f"Created category: {title}")
        self.events.publish(TrackersChanged())
        return True

    async def add_tracker(self, tracker: Tracker, category_title: str) -> Tracker:
        """
        Save a new tracker into a category

        Returns:
            The stored tracker (original_category set to category_title)
        """
        category_title = self._validate_category_title(category_title)
        tracker = tracker.with_changes(original_category=category_title)

        await self._storage_call(
            "insert_or_replace_tracker",
            self.storage.insert_or_replace_tracker,
            tracker,
            write=True
        )
        self._trackers[tracker.id] = tracker
        logger.info(f"Added tracker '{tracker.title}' to category {category_title}")

        self.events.publish(TrackersChanged())
        # Tracker count feeds ideal days and average completion
        await self.refresh_statistics()
        return tracker

    async def update_tracker(self, tracker: Tracker, category_title: Optional[str] = None) -> Tracker:
        """
        Replace an existing tracker with an edited value

        Args:
            tracker: Edited tracker carrying the existing id
            category_title: New category, or None to keep the current one

        Raises:
            NotFoundError: If no tracker has that id
            ValidationError: If the resulting category is blank or the pinned title
        """
        existing = self.get_tracker(tracker.id)
        if category_title is None:
            category_title = tracker.original_category
        if category_title is None:
            category_title = existing.original_category
        if category_title is not None:
            tracker = tracker.with_changes(original_category=self._validate_category_title(category_title))

        await self._storage_call(
            "insert_or_replace_tracker",
            self.storage.insert_or_replace_tracker,
            tracker,
            write=True
        )
        self._trackers[tracker.id] = tracker
        logger.info(f"Updated tracker: {tracker.title}")
        self.events.publish(TrackersChanged())
        return tracker

    async def toggle_pin(self, tracker_id: UUID) -> Tracker:
        """
        Pin or unpin a tracker

        Pinning records the tracker's current category so unpinning can put it
        back; unpinning keeps that recorded category.
        """
        existing = self.get_tracker(tracker_id)
        if existing.is_pinned:
            updated = existing.with_changes(is_pinned=False)
        else:
            updated = existing.with_changes(
                is_pinned=True,
                original_category=existing.original_category or config.DEFAULT_CATEGORY_TITLE
            )

        await self._storage_call(
            "insert_or_replace_tracker",
            self.storage.insert_or_replace_tracker,
            updated,
            write=True
        )
        self._trackers[tracker_id] = updated
        logger.info(f"Tracker {'pinned' if updated.is_pinned else 'unpinned'}: {updated.title}")
        self.events.publish(TrackersChanged())
        return updated

    async def delete_tracker(self, tracker_id: UUID) -> None:
        """
        Delete a tracker and all of its completion records

        Raises:
            NotFoundError: If no tracker has that id
        """
        tracker = self.get_tracker(tracker_id)
        await self._storage_call("delete_tracker", self.storage.delete_tracker, tracker_id, write=True)

        del self._trackers[tracker_id]
        removed = self.ledger.remove_tracker(tracker_id)
        logger.info(f"Deleted tracker '{tracker.title}' and {removed} completion records")

        self.events.publish(TrackersChanged())
        await self.refresh_statistics()

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------

    def _resolve_day(self, day: Optional[DayLike]) -> date:
        return self.current_date if day is None else start_of_day(day)

    def is_completed(self, tracker_id: UUID, day: Optional[DayLike] = None) -> bool:
        return self.ledger.contains(tracker_id, self._resolve_day(day))

    def completed_days_count(self, tracker_id: UUID) -> int:
        """Distinct days the tracker was completed on"""
        return self.ledger.count_for(tracker_id)

    async def complete(self, tracker_id: UUID, day: Optional[DayLike] = None) -> bool:
        """
        Mark a tracker completed on a day (defaults to the selected day)

        Returns:
            True if a new record was stored, False if it already existed
        """
        tracker = self.get_tracker(tracker_id)
        day = self._resolve_day(day)
        if self.ledger.contains(tracker_id, day):
            return False

        await self._storage_call(
            "insert_completion_record",
            self.storage.insert_completion_record,
            tracker_id,
            day,
            write=True
        )
        self.ledger.add(tracker_id, day)
        logger.info(f"Completed '{tracker.title}' on {day.isoformat()}")

        await self.refresh_statistics()
        return True

    async def uncomplete(self, tracker_id: UUID, day: Optional[DayLike] = None) -> bool:
        """
        Remove a tracker's completion on a day (defaults to the selected day)

        Returns:
            True if a record was removed, False if there was none
        """
        tracker = self.get_tracker(tracker_id)
        day = self._resolve_day(day)
        if not self.ledger.contains(tracker_id, day):
            return False

        await self._storage_call(
            "delete_completion_record",
            self.storage.delete_completion_record,
            tracker_id,
            day,
            write=True
        )
        self.ledger.remove(tracker_id, day)
        logger.info(f"Removed completion of '{tracker.title}' on {day.isoformat()}")

        await self.refresh_statistics()
        return True

    async def toggle_completion(self, tracker_id: UUID, day: Optional[DayLike] = None) -> bool:
        """
        Flip completion state for a day

        Returns:
            The new state (True = completed)
        """
        if self.is_completed(tracker_id, day):
            await self.uncomplete(tracker_id, day)
            return False
        await self.complete(tracker_id, day)
        return True

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    @property
    def statistics(self) -> StatisticsSnapshot:
        return self.aggregator.last_snapshot

    async def refresh_statistics(self) -> StatisticsSnapshot:
        """Recompute, persist and publish statistics (never raises)"""
        snapshot = await self.aggregator.refresh(self.storage)
        self.events.publish(StatisticsChanged(snapshot=snapshot))
        return snapshot

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def set_date(self, day: DayLike) -> None:
        """
        Select a day explicitly

        An active TODAY filter is replaced by ALL.
        """
        self.current_date = start_of_day(day)
        if self.filter_mode == FilterMode.TODAY:
            self.filter_mode = FilterMode.ALL
            logger.debug("Explicit date selected, TODAY filter replaced by ALL")

    def set_filter(self, mode: FilterMode) -> None:
        """
        Select a filter mode

        TODAY also moves the selected date to the current day.
        """
        self.filter_mode = FilterMode(mode)
        if self.filter_mode == FilterMode.TODAY:
            self.current_date = self.clock()
        logger.debug(f"Applied filter: {self.filter_mode.value}")

    def set_search(self, text: str) -> None:
        self.search_text = text or ""

    def clear_search(self) -> None:
        self.search_text = ""

    def visible_categories(self) -> List[TrackerCategory]:
        """Categories to render for the selected date, filter and search"""
        predicate = completion_predicate(self.filter_mode, self.ledger, self.current_date)
        return self.pipeline.apply(
            self.categories(),
            self.current_date,
            predicate,
            self.search_text,
        )

    def has_trackers_for_date(self) -> bool:
        """True if any tracker is due on the selected date, ignoring filter and search"""
        return bool(due_trackers(self._trackers.values(), self.current_date, self.ledger))
