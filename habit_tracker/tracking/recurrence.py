"""
Recurrence Matching

Decides whether a tracker is due on a given calendar day.

Two policies:
- irregular (one-off) trackers are pending until first completed, then only
  shown on the day they were completed
- regular trackers follow their weekly schedule and ignore completion state
"""

from datetime import date
from typing import Optional
import logging

from habit_tracker.models.tracker import Tracker
from habit_tracker.tracking.ledger import CompletionLedger
from habit_tracker.utils.calendar import DayLike, start_of_day, weekday_of

logger = logging.getLogger(__name__)


def is_irregular(tracker: Tracker) -> bool:
    """
    One-off detection: exactly one schedule entry AND a creation date.

    NOTE: a weekly habit scheduled for a single weekday that also carries a
    creation date is classified as irregular. Kept as-is so stored data keeps
    its behaviour; see DESIGN.md (open questions).
    """
    return tracker.is_irregular


def is_due(tracker: Tracker, day: DayLike, ledger: Optional[CompletionLedger] = None) -> bool:
    """
    Check whether a tracker should be shown on a day

    Args:
        tracker: Tracker to check
        day: Calendar day (timestamps are normalized)
        ledger: Completion ledger, needed for irregular trackers. When omitted
            the tracker is treated as never completed.

    Returns:
        True if the tracker is due on that day
    """
    day = start_of_day(day)

    if is_irregular(tracker):
        if ledger is None or not ledger.has_any(tracker.id):
            # Pending until the first completion
            return True
        return ledger.contains(tracker.id, day)

    return weekday_of(day) in tracker.schedule


def due_trackers(trackers, day: date, ledger: Optional[CompletionLedger] = None) -> list[Tracker]:
    """Filter trackers down to the ones due on day, preserving order"""
    return [tracker for tracker in trackers if is_due(tracker, day, ledger)]
