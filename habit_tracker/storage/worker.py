"""
Worker-thread adapter for blocking stores

Runs each call of a synchronous store on a worker thread and hands the result
back to the awaiting coroutine, so results are always applied on the event
loop that owns the tracking session. Backend exceptions are converted to
StorageReadError / StorageWriteError.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence
from uuid import UUID

from habit_tracker.exceptions import HabitTrackerError, wrap_storage_exception
from habit_tracker.models.completion import CompletionRecord
from habit_tracker.models.statistics import StatisticsSnapshot
from habit_tracker.models.tracker import Tracker
from habit_tracker.storage.base import BlockingTrackerStorage
from habit_tracker.utils.calendar import DayLike

logger = logging.getLogger(__name__)


class BlockingStorageAdapter:
    """Async TrackerStorage on top of a BlockingTrackerStorage"""

    def __init__(self, backend: BlockingTrackerStorage):
        self.backend = backend

    async def _run(self, operation: str, func: Callable[..., Any], *args, write: bool = False) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except HabitTrackerError:
            raise
        except Exception as e:
            raise wrap_storage_exception(e, operation=operation, write=write) from e

    async def fetch_all_trackers(self) -> Sequence[Tracker]:
        return await self._run("fetch_all_trackers", self.backend.fetch_all_trackers)

    async def fetch_all_completion_records(self) -> Sequence[CompletionRecord]:
        return await self._run(
            "fetch_all_completion_records",
            self.backend.fetch_all_completion_records
        )

    async def fetch_statistics_snapshot(self) -> Optional[StatisticsSnapshot]:
        return await self._run(
            "fetch_statistics_snapshot",
            self.backend.fetch_statistics_snapshot
        )

    async def insert_or_replace_tracker(self, tracker: Tracker) -> None:
        await self._run(
            "insert_or_replace_tracker",
            self.backend.insert_or_replace_tracker,
            tracker,
            write=True
        )

    async def delete_tracker(self, tracker_id: UUID) -> None:
        await self._run("delete_tracker", self.backend.delete_tracker, tracker_id, write=True)

    async def insert_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        await self._run(
            "insert_completion_record",
            self.backend.insert_completion_record,
            tracker_id,
            day,
            write=True
        )

    async def delete_completion_record(self, tracker_id: UUID, day: DayLike) -> None:
        await self._run(
            "delete_completion_record",
            self.backend.delete_completion_record,
            tracker_id,
            day,
            write=True
        )

    async def replace_statistics_snapshot(self, snapshot: StatisticsSnapshot) -> None:
        await self._run(
            "replace_statistics_snapshot",
            self.backend.replace_statistics_snapshot,
            snapshot,
            write=True
        )
