"""
Statistics Aggregator

Derives the published metrics from the full completion history:
- completed_count: distinct completion records
- ideal_days: days on which every current tracker was completed
- best_streak: longest run of consecutive days with any completion
- average_completion_percent: share of trackers completed today

Statistics are recomputed in full after every ledger mutation (no
incremental streak maintenance).

Known limitation: ideal days compare against the *current* tracker count, so
adding a tracker can retroactively turn a previously ideal day into a normal
one on the next recomputation.
"""

from collections import defaultdict
from datetime import date
from typing import Callable, Dict, Iterable, Sequence, Set
from uuid import UUID
import logging

from habit_tracker.exceptions import wrap_storage_exception
from habit_tracker.models.completion import CompletionRecord
from habit_tracker.models.statistics import StatisticsSnapshot
from habit_tracker.models.tracker import Tracker
from habit_tracker.storage.base import TrackerStorage
from habit_tracker.utils.calendar import days_between, today

logger = logging.getLogger(__name__)


def group_by_day(records: Iterable[CompletionRecord]) -> Dict[date, Set[UUID]]:
    """Map each day to the trackers completed on it"""
    grouped: Dict[date, Set[UUID]] = defaultdict(set)
    for record in records:
        grouped[record.day].add(record.tracker_id)
    return dict(grouped)


def calculate_best_streak(days: Iterable[date]) -> int:
    """
    Longest run of strictly consecutive calendar days

    Returns:
        0 for no days, 1 for a single day
    """
    ordered = sorted(set(days))
    if not ordered:
        return 0

    current_streak = 1
    best_streak = 1
    for previous, current in zip(ordered, ordered[1:]):
        if days_between(previous, current) == 1:
            current_streak += 1
            best_streak = max(best_streak, current_streak)
        else:
            current_streak = 1

    return best_streak


def calculate_ideal_days(grouped: Dict[date, Set[UUID]], total_trackers: int) -> int:
    """Count days where the number of completed trackers equals the tracker total"""
    if total_trackers == 0:
        return 0
    return sum(1 for tracker_ids in grouped.values() if len(tracker_ids) == total_trackers)


def calculate_average_completion(completed_today: int, total_trackers: int) -> int:
    """Percentage of trackers completed today, half-up rounded, within 0-100"""
    if total_trackers <= 0:
        return 0
    # Integer half-up rounding of 100 * completed / total
    percent = (200 * completed_today + total_trackers) // (2 * total_trackers)
    return max(0, min(100, percent))


class StatisticsAggregator:
    """
    Computes StatisticsSnapshot values and remembers the last good one.

    Args:
        clock: Returns the current calendar day; "today" for the average
            completion metric is read at each invocation.
    """

    def __init__(self, clock: Callable[[], date] = today):
        self.clock = clock
        self._last_snapshot = StatisticsSnapshot.zero()

    @property
    def last_snapshot(self) -> StatisticsSnapshot:
        return self._last_snapshot

    def compute(
        self,
        all_trackers: Sequence[Tracker],
        all_records: Iterable[CompletionRecord],
    ) -> StatisticsSnapshot:
        """
        Compute the four metrics from the tracker inventory and history

        Args:
            all_trackers: Every known tracker
            all_records: Every completion record (duplicates collapse)

        Returns:
            Fresh StatisticsSnapshot
        """
        records = set(all_records)
        grouped = group_by_day(records)
        total_trackers = len(all_trackers)
        completed_today = len(grouped.get(self.clock(), ()))

        snapshot = StatisticsSnapshot(
            completed_count=len(records),
            ideal_days=calculate_ideal_days(grouped, total_trackers),
            average_completion_percent=calculate_average_completion(completed_today, total_trackers),
            best_streak=calculate_best_streak(grouped.keys()),
        )
        logger.debug(
            f"Computed statistics over {len(grouped)} days and "
            f"{total_trackers} trackers: {snapshot.model_dump()}"
        )
        return snapshot

    async def refresh(self, storage: TrackerStorage) -> StatisticsSnapshot:
        """
        Recompute from storage and replace the stored statistics row

        Never raises: an unreadable source yields the last-known snapshot, a
        failed write still returns (and remembers) the computed one. Failures
        are reported through the exception hierarchy's logging.

        Returns:
            The current snapshot
        """
        try:
            trackers = await storage.fetch_all_trackers()
            records = await storage.fetch_all_completion_records()
        except Exception as e:
            wrap_storage_exception(e, operation="refresh_statistics")
            logger.warning("Statistics source unreadable, keeping last-known snapshot")
            return self._last_snapshot

        snapshot = self.compute(trackers, records)
        self._last_snapshot = snapshot

        try:
            await storage.replace_statistics_snapshot(snapshot)
        except Exception as e:
            wrap_storage_exception(e, operation="replace_statistics_snapshot", write=True)
            logger.warning("Statistics computed but not persisted")
        else:
            logger.info(f"Statistics updated: {snapshot.model_dump()}")

        return snapshot

    async def load(self, storage: TrackerStorage) -> StatisticsSnapshot:
        """Read the persisted snapshot, falling back to the last-known one"""
        try:
            stored = await storage.fetch_statistics_snapshot()
        except Exception as e:
            wrap_storage_exception(e, operation="fetch_statistics_snapshot")
            return self._last_snapshot

        if stored is not None:
            self._last_snapshot = stored
        return self._last_snapshot
