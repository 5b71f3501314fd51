"""Statistics snapshot model"""
from pydantic import BaseModel, ConfigDict, Field


class StatisticsSnapshot(BaseModel):
    """The four published metrics, recomputed in full on every ledger mutation"""
    model_config = ConfigDict(frozen=True)

    completed_count: int = Field(default=0, ge=0)
    ideal_days: int = Field(default=0, ge=0)
    average_completion_percent: int = Field(default=0, ge=0, le=100)
    best_streak: int = Field(default=0, ge=0)

    @classmethod
    def zero(cls) -> "StatisticsSnapshot":
        return cls()

    @property
    def has_data(self) -> bool:
        """False when every metric is zero (nothing to show yet)"""
        return any((
            self.completed_count,
            self.ideal_days,
            self.average_completion_percent,
            self.best_streak,
        ))
