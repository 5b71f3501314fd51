"""Unit tests for recurrence matching (habit_tracker/tracking/recurrence.py)"""
from datetime import date, datetime, timedelta

from habit_tracker.tracking.recurrence import is_due, is_irregular, due_trackers
from habit_tracker.utils.calendar import Weekday


# ============================================================================
# Regular Trackers
# ============================================================================

def test_wednesday_tracker_over_400_days(wednesday_tracker, ledger):
    """Due iff the weekday is Wednesday, across a year boundary"""
    start = date(2023, 12, 1)
    for offset in range(400):
        day = start + timedelta(days=offset)
        assert is_due(wednesday_tracker, day, ledger) == (day.isoweekday() == 3), day


def test_regular_tracker_ignores_completions(wednesday_tracker, ledger):
    ledger.add(wednesday_tracker.id, date(2024, 1, 3))

    assert is_due(wednesday_tracker, date(2024, 1, 10), ledger) is True
    assert is_due(wednesday_tracker, date(2024, 1, 4), ledger) is False


def test_empty_schedule_never_due(tracker_factory, ledger):
    tracker = tracker_factory(schedule=[])

    assert not any(is_due(tracker, date(2024, 1, d), ledger) for d in range(1, 8))


def test_timestamp_is_normalized(wednesday_tracker):
    assert is_due(wednesday_tracker, datetime(2024, 1, 3, 23, 59)) is True


# ============================================================================
# Irregular Trackers
# ============================================================================

def test_irregular_detection(irregular_tracker, wednesday_tracker):
    assert is_irregular(irregular_tracker) is True
    # Single weekday but no creation date: weekly habit
    assert is_irregular(wednesday_tracker) is False


def test_irregular_shown_every_day_until_completed(irregular_tracker, ledger):
    for offset in range(14):
        assert is_due(irregular_tracker, date(2024, 1, 1) + timedelta(days=offset), ledger)


def test_irregular_without_ledger_is_pending(irregular_tracker):
    assert is_due(irregular_tracker, date(2024, 2, 14)) is True


def test_irregular_only_on_completion_day(irregular_tracker, ledger):
    completed_on = date(2024, 1, 10)
    ledger.add(irregular_tracker.id, completed_on)

    assert is_due(irregular_tracker, completed_on, ledger) is True
    assert is_due(irregular_tracker, completed_on - timedelta(days=1), ledger) is False
    assert is_due(irregular_tracker, completed_on + timedelta(days=1), ledger) is False


def test_irregular_completed_on_other_weekday_than_schedule(irregular_tracker, ledger):
    """The schedule entry of a one-off tracker is not consulted"""
    thursday = date(2024, 1, 4)
    ledger.add(irregular_tracker.id, thursday)

    assert irregular_tracker.schedule == {Weekday.MONDAY}
    assert is_due(irregular_tracker, thursday, ledger) is True


def test_irregular_pending_again_after_uncomplete(irregular_tracker, ledger):
    ledger.add(irregular_tracker.id, date(2024, 1, 10))
    ledger.remove(irregular_tracker.id, date(2024, 1, 10))

    assert is_due(irregular_tracker, date(2024, 1, 20), ledger) is True


def test_due_trackers_preserves_order(tracker_factory, wednesday_tracker, ledger):
    daily = tracker_factory(title="Stretch")
    monday_only = tracker_factory(title="Plan week", schedule=[Weekday.MONDAY])

    result = due_trackers([daily, monday_only, wednesday_tracker], date(2024, 1, 3), ledger)

    assert result == [daily, wednesday_tracker]
