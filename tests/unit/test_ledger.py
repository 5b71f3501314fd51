"""Unit tests for the completion ledger (habit_tracker/tracking/ledger.py)"""
from datetime import date, datetime
from uuid import uuid4

from habit_tracker.models.completion import CompletionRecord
from habit_tracker.tracking.ledger import CompletionLedger


def test_add_is_idempotent(ledger):
    tracker_id = uuid4()

    assert ledger.add(tracker_id, date(2024, 1, 1)) is True
    assert ledger.add(tracker_id, date(2024, 1, 1)) is False
    assert ledger.count_for(tracker_id) == 1


def test_same_day_timestamps_collapse(ledger):
    tracker_id = uuid4()
    ledger.add(tracker_id, datetime(2024, 1, 1, 6, 15))
    ledger.add(tracker_id, datetime(2024, 1, 1, 22, 40))

    assert ledger.count_for(tracker_id) == 1
    assert ledger.contains(tracker_id, date(2024, 1, 1))
    assert len(ledger) == 1


def test_remove_never_added_is_noop(ledger):
    tracker_id = uuid4()

    assert ledger.remove(tracker_id, date(2024, 1, 1)) is False
    assert ledger.contains(tracker_id, date(2024, 1, 1)) is False
    assert len(ledger) == 0


def test_remove_existing(ledger):
    tracker_id = uuid4()
    ledger.add(tracker_id, date(2024, 1, 1))
    ledger.add(tracker_id, date(2024, 1, 2))

    assert ledger.remove(tracker_id, datetime(2024, 1, 1, 12, 0)) is True
    assert ledger.count_for(tracker_id) == 1
    assert ledger.has_any(tracker_id) is True

    ledger.remove(tracker_id, date(2024, 1, 2))
    assert ledger.has_any(tracker_id) is False


def test_count_for_unknown_tracker(ledger):
    assert ledger.count_for(uuid4()) == 0


def test_grouped_by_day(ledger):
    run, read = uuid4(), uuid4()
    ledger.add(run, date(2024, 1, 1))
    ledger.add(read, date(2024, 1, 1))
    ledger.add(run, date(2024, 1, 2))

    grouped = ledger.grouped_by_day()

    assert grouped == {
        date(2024, 1, 1): {run, read},
        date(2024, 1, 2): {run},
    }


def test_remove_tracker_cascades(ledger):
    run, read = uuid4(), uuid4()
    ledger.add(run, date(2024, 1, 1))
    ledger.add(run, date(2024, 1, 2))
    ledger.add(read, date(2024, 1, 2))

    assert ledger.remove_tracker(run) == 2
    assert ledger.count_for(run) == 0
    assert ledger.grouped_by_day() == {date(2024, 1, 2): {read}}


def test_build_from_records_and_export():
    tracker_id = uuid4()
    records = [
        CompletionRecord(tracker_id=tracker_id, day=date(2024, 1, 2)),
        CompletionRecord(tracker_id=tracker_id, day=date(2024, 1, 1)),
        CompletionRecord(tracker_id=tracker_id, day=datetime(2024, 1, 1, 18, 0)),
    ]

    ledger = CompletionLedger(records)

    assert [record.day for record in ledger.records()] == [date(2024, 1, 1), date(2024, 1, 2)]
    assert records[0] in ledger
