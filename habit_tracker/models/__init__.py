"""Tracker, completion and statistics models"""
from habit_tracker.models.tracker import Weekday, Tracker, TrackerCategory
from habit_tracker.models.completion import CompletionRecord
from habit_tracker.models.statistics import StatisticsSnapshot

__all__ = [
    "Weekday",
    "Tracker",
    "TrackerCategory",
    "CompletionRecord",
    "StatisticsSnapshot",
]
