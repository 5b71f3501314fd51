"""
Completion Ledger

Set of (tracker id, calendar day) completion facts. Identity is by calendar
day: two completions logged at different times on the same day are the same
record. The ledger itself never talks to storage; the owning service persists
each mutation and recomputes statistics afterwards.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set
from uuid import UUID
import logging

from habit_tracker.models.completion import CompletionRecord
from habit_tracker.utils.calendar import DayLike, start_of_day

logger = logging.getLogger(__name__)


class CompletionLedger:
    """In-memory completion set keyed by tracker id"""

    def __init__(self, records: Iterable[CompletionRecord] = ()):
        self._days_by_tracker: Dict[UUID, Set[date]] = defaultdict(set)
        for record in records:
            self._days_by_tracker[record.tracker_id].add(record.day)

    def add(self, tracker_id: UUID, day: DayLike) -> bool:
        """
        Record a completion (idempotent)

        Returns:
            True if the record was new, False if it already existed
        """
        day = start_of_day(day)
        days = self._days_by_tracker[tracker_id]
        if day in days:
            return False
        days.add(day)
        logger.debug(f"Ledger add: tracker {tracker_id} on {day.isoformat()}")
        return True

    def remove(self, tracker_id: UUID, day: DayLike) -> bool:
        """
        Delete a completion (idempotent)

        Returns:
            True if a record was removed, False if it was absent
        """
        day = start_of_day(day)
        days = self._days_by_tracker.get(tracker_id)
        if not days or day not in days:
            return False
        days.discard(day)
        if not days:
            del self._days_by_tracker[tracker_id]
        logger.debug(f"Ledger remove: tracker {tracker_id} on {day.isoformat()}")
        return True

    def remove_tracker(self, tracker_id: UUID) -> int:
        """Drop every record of a tracker, returning how many were removed"""
        days = self._days_by_tracker.pop(tracker_id, set())
        return len(days)

    def contains(self, tracker_id: UUID, day: DayLike) -> bool:
        days = self._days_by_tracker.get(tracker_id)
        return bool(days) and start_of_day(day) in days

    def has_any(self, tracker_id: UUID) -> bool:
        """True if the tracker was ever completed"""
        return bool(self._days_by_tracker.get(tracker_id))

    def count_for(self, tracker_id: UUID) -> int:
        """Total distinct completed days for a tracker"""
        return len(self._days_by_tracker.get(tracker_id, ()))

    def grouped_by_day(self) -> Dict[date, Set[UUID]]:
        """Map each completed day to the set of trackers completed on it"""
        grouped: Dict[date, Set[UUID]] = defaultdict(set)
        for tracker_id, days in self._days_by_tracker.items():
            for day in days:
                grouped[day].add(tracker_id)
        return dict(grouped)

    def records(self) -> List[CompletionRecord]:
        """All records, ordered by day then tracker id"""
        return sorted(
            (
                CompletionRecord(tracker_id=tracker_id, day=day)
                for tracker_id, days in self._days_by_tracker.items()
                for day in days
            ),
            key=lambda record: (record.day, str(record.tracker_id)),
        )

    def __len__(self) -> int:
        return sum(len(days) for days in self._days_by_tracker.values())

    def __contains__(self, record: CompletionRecord) -> bool:
        return self.contains(record.tracker_id, record.day)
