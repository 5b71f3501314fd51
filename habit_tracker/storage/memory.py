"""
In-memory tracker store

Dict-backed implementation of TrackerStorage. Nothing is persisted across
process restarts; used for tests and for running the core without a
database.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Set, Tuple
from uuid import UUID

from habit_tracker.exceptions import NotFoundError
from habit_tracker.models.completion import CompletionRecord
from habit_tracker.models.statistics import StatisticsSnapshot
from habit_tracker.models.tracker import Tracker
from habit_tracker.utils.calendar import DayLike, start_of_day

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """In-memory store for trackers, completion records and statistics"""

    def __init__(
        self,
        trackers: Optional[List[Tracker]] = None,
        records: Optional[List[CompletionRecord]] = None,
    ):
        self._trackers: Dict[UUID, Tracker] = {}
        self._records: Set[Tuple[UUID, date]] = set()
        self._statistics: Optional[StatisticsSnapshot] = None

        for tracker in trackers or []:
            self._trackers[tracker.id] = tracker
        for record in records or []:
            self._records.add((record.tracker_id, record.day))

    async def fetch_all_trackers(self) -> List[Tracker]:
        return list(self._trackers.values())

    async def fetch_all_completion_records(self) -> List[CompletionRecord]:
        return [
            CompletionRecord(tracker_id=tracker_id, day=day)
            for tracker_id, day in sorted(self._records, key=lambda r: (r[1], str(r[0])))
        ]

    async def fetch_statistics_snapshot(self) -> Optional[StatisticsSnapshot]:
        return self._statistics

    async def insert_or_replace_tracker(self, tracker: Tracker) -> None:
        self._trackers[tracker.id] = tracker
        logger.debug(f"Saved tracker {tracker.id} to memory store")

    async def delete_tracker(self, tracker_id: UUID) -> None:
        if tracker_id not in self._trackers:
            raise NotFoundError(
                f"Tracker {tracker_id} does not exist",
                record_type="Tracker",
                record_id=str(tracker_id),
                operation="delete_tracker",
            )
        del self._trackers[tracker_id]
        removed = {record for record in self._records if record[0] == tracker_id}
        self._records -= removed
        logger.debug(f"Deleted tracker {tracker_id} and {len(removed)} records from memory store")

    async def insert_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        self._records.add((tracker_id, start_of_day(day)))

    async def delete_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        self._records.discard((tracker_id, start_of_day(day)))

    async def replace_statistics_snapshot(self, snapshot: StatisticsSnapshot) -> None:
        self._statistics = snapshot
