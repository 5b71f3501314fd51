"""Completion record model"""
from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, field_validator
from uuid import UUID

from habit_tracker.utils.calendar import start_of_day


class CompletionRecord(BaseModel):
    """Fact that a tracker was completed on a calendar day"""
    model_config = ConfigDict(frozen=True)

    tracker_id: UUID
    day: date

    @field_validator('day', mode='before')
    @classmethod
    def normalize_day(cls, v):
        """Collapse timestamps to their calendar day"""
        if isinstance(v, datetime):
            return start_of_day(v)
        return v
