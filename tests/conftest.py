"""Global test fixtures and utilities for habit-tracker tests"""
import pytest
from datetime import date, datetime
from unittest.mock import Mock

from habit_tracker.events import EventBus
from habit_tracker.models.tracker import Tracker
from habit_tracker.storage.memory import InMemoryStorage
from habit_tracker.services.tracker_service import TrackerService
from habit_tracker.tracking.ledger import CompletionLedger
from habit_tracker.utils.calendar import Weekday


# ============================================================================
# Calendar Fixtures
# ============================================================================

@pytest.fixture
def fixed_today():
    """Wednesday, 2024-01-03"""
    return date(2024, 1, 3)


@pytest.fixture
def fixed_clock(fixed_today):
    """Clock callable returning fixed_today"""
    return lambda: fixed_today


# ============================================================================
# Tracker Fixtures
# ============================================================================

@pytest.fixture
def tracker_factory():
    """Factory for creating trackers with sensible defaults"""
    def _create(title="Morning Run", schedule=None, **kwargs):
        return Tracker(
            title=title,
            color=kwargs.pop("color", "#FD4C49"),
            emoji=kwargs.pop("emoji", "🏃"),
            schedule=frozenset(schedule if schedule is not None else list(Weekday)),
            **kwargs
        )

    return _create


@pytest.fixture
def wednesday_tracker(tracker_factory):
    """Regular tracker due on Wednesdays only"""
    return tracker_factory(title="Water plants", schedule=[Weekday.WEDNESDAY])


@pytest.fixture
def irregular_tracker(tracker_factory):
    """One-off tracker (single schedule entry plus creation date)"""
    return tracker_factory(
        title="Renew passport",
        schedule=[Weekday.MONDAY],
        creation_date=datetime(2024, 1, 1, 9, 30),
    )


@pytest.fixture
def ledger():
    return CompletionLedger()


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def event_recorder(event_bus):
    """Mock observer subscribed to both core events"""
    from habit_tracker.events import StatisticsChanged, TrackersChanged

    recorder = Mock()
    event_bus.subscribe(StatisticsChanged, recorder.statistics_changed)
    event_bus.subscribe(TrackersChanged, recorder.trackers_changed)
    return recorder


@pytest.fixture
def service(storage, event_bus, fixed_clock):
    """TrackerService on an empty in-memory store with a fixed clock"""
    return TrackerService(storage, event_bus=event_bus, clock=fixed_clock)
