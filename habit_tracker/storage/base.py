"""Storage collaborator interface"""
from typing import Optional, Protocol, Sequence, runtime_checkable
from uuid import UUID

from habit_tracker.models.completion import CompletionRecord
from habit_tracker.models.statistics import StatisticsSnapshot
from habit_tracker.models.tracker import Tracker
from habit_tracker.utils.calendar import DayLike


@runtime_checkable
class TrackerStorage(Protocol):
    """
    Persistence capability used by the tracking core.

    Fetches raise StorageReadError, mutations raise StorageWriteError, and
    mutations referencing an unknown tracker raise NotFoundError.
    """

    async def fetch_all_trackers(self) -> Sequence[Tracker]:
        ...

    async def fetch_all_completion_records(self) -> Sequence[CompletionRecord]:
        ...

    async def fetch_statistics_snapshot(self) -> Optional[StatisticsSnapshot]:
        ...

    async def insert_or_replace_tracker(self, tracker: Tracker) -> None:
        ...

    async def delete_tracker(self, tracker_id: UUID) -> None:
        """Delete a tracker and every completion record that references it"""
        ...

    async def insert_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        ...

    async def delete_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        ...

    async def replace_statistics_snapshot(self, snapshot: StatisticsSnapshot) -> None:
        """Replace the single stored statistics row (never merged)"""
        ...


class BlockingTrackerStorage(Protocol):
    """Synchronous flavour of TrackerStorage, for blocking backends"""

    def fetch_all_trackers(self) -> Sequence[Tracker]:
        ...

    def fetch_all_completion_records(self) -> Sequence[CompletionRecord]:
        ...

    def fetch_statistics_snapshot(self) -> Optional[StatisticsSnapshot]:
        ...

    def insert_or_replace_tracker(self, tracker: Tracker) -> None:
        ...

    def delete_tracker(self, tracker_id: UUID) -> None:
        ...

    def insert_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        ...

    def delete_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        ...

    def replace_statistics_snapshot(self, snapshot: StatisticsSnapshot) -> None:
        ...
