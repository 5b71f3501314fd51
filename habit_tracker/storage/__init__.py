"""Storage collaborators for the tracking core"""
from habit_tracker.storage.base import TrackerStorage, BlockingTrackerStorage
from habit_tracker.storage.memory import InMemoryStorage
from habit_tracker.storage.worker import BlockingStorageAdapter

__all__ = [
    "TrackerStorage",
    "BlockingTrackerStorage",
    "InMemoryStorage",
    "BlockingStorageAdapter",
]
