"""Tracker models"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid import UUID, uuid4

from habit_tracker.utils.calendar import Weekday


class Tracker(BaseModel):
    """
    A habit definition.

    Trackers are immutable values: edits and pin/unpin produce a new value
    carrying the same id (see ``with_changes``).
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    title: str
    color: str
    emoji: str
    schedule: frozenset[Weekday] = Field(default_factory=frozenset)
    is_pinned: bool = False
    creation_date: Optional[datetime] = None
    original_category: Optional[str] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Ensure title is not blank"""
        if not v.strip():
            raise ValueError("Tracker title cannot be empty")
        return v

    @property
    def is_irregular(self) -> bool:
        """
        One-off tracker: exactly one scheduled weekday and a creation date.

        A regular habit scheduled for a single weekday that also carries a
        creation date is indistinguishable from a one-off under this rule.
        """
        return len(self.schedule) == 1 and self.creation_date is not None

    def with_changes(self, **changes) -> "Tracker":
        """Return a copy with the given fields replaced, keeping the id"""
        changes.pop("id", None)
        return self.model_copy(update=changes)


class TrackerCategory(BaseModel):
    """Named, ordered group of trackers"""
    model_config = ConfigDict(frozen=True)

    title: str
    trackers: tuple[Tracker, ...] = ()

    def tracker_ids(self) -> list[UUID]:
        return [tracker.id for tracker in self.trackers]
