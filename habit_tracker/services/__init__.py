"""Service layer for the habit tracker"""
from habit_tracker.services.tracker_service import TrackerService

__all__ = ["TrackerService"]
