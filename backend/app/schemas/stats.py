from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .flow import CamelModel, TrackingType


class Timeframe(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ALL = "all"

    @property
    def days(self) -> int | None:
        return {"weekly": 7, "monthly": 30, "yearly": 365}.get(self.value)


class TimeBasedStats(CamelModel):
    total_duration: float = 0
    average_duration: float = 0
    total_pauses: int = 0


class QuantitativeStats(CamelModel):
    total_count: float = 0
    average_count: float = 0
    unit_text: str = ""


class FlowStats(CamelModel):
    completed: int = 0
    partial: int = 0
    failed: int = 0
    skipped: int = 0
    inactive: int = 0
    scheduled_days: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: float = 0
    final_score: int = 0
    emotion_bonus: int = 0
    notes_count: int = 0
    cheat_entries_count: int = 0
    streak_bonus: int = 0
    average_mood_score: float | None = None
    time_based_stats: TimeBasedStats = Field(default_factory=TimeBasedStats)
    quantitative_stats: QuantitativeStats = Field(default_factory=QuantitativeStats)
    timeframe: Timeframe
    start_date: date
    end_date: date
    calculated_at: datetime


class Scoreboard(CamelModel):
    completed: int
    partial: int
    failed: int
    skipped: int
    inactive: int
    streak: int
    streak_bonus: int
    emotion_bonus: int
    notes_count: int
    completion_rate: float
    final_score: int
    time_based_stats: TimeBasedStats
    quantitative_stats: QuantitativeStats


class StatusCounts(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed: int = Field(alias="Completed")
    partial: int = Field(alias="Partial")
    missed: int = Field(alias="Missed")
    inactive: int = Field(alias="Inactive")
    skipped: int = Field(alias="Skipped")


class ActivityBreakdown(CamelModel):
    total: int
    by_status: StatusCounts
    time_based: TimeBasedStats
    quantitative: QuantitativeStats


class EmotionShare(CamelModel):
    emotion: str
    count: int
    percentage: float


class EmotionDistribution(CamelModel):
    total_emotions: int
    by_emotion: dict[str, int]
    distribution: list[EmotionShare]


class FlowSummary(CamelModel):
    flow_id: int | str
    flow_title: str
    flow_type: TrackingType
    completed: int
    partial: int
    failed: int
    skipped: int
    inactive: int
    current_streak: int
    longest_streak: int
    completion_rate: float
    scheduled_days: int
    points: int


class WeeklyTrendPoint(CamelModel):
    day: date = Field(alias="date")
    display_date: str
    percentage: float
    completed: int
    scheduled: int


class Achievement(CamelModel):
    title: str
    description: str
    icon: str
    color: str
    progress: int
    target: int


class SuccessMetrics(CamelModel):
    total_successful_days: int = 0
    total_failed_days: int = 0
    success_rate: float = 0
    pure_completion_rate: float = 0
    partial_success_rate: float = 0
    failure_rate: float = 0
    skip_rate: float = 0


class AggregateStats(CamelModel):
    total_flows: int = 0
    total_completed: int = 0
    total_partial: int = 0
    total_failed: int = 0
    total_skipped: int = 0
    total_inactive: int = 0
    total_points: int = 0
    total_emotion_bonus: int = 0
    total_notes_count: int = 0
    total_cheat_entries: int = 0
    total_scheduled_days: int = 0
    longest_streak: int = 0
    average_completion_rate: float = 0
    pure_completion_rate: float = 0
    success_metrics: SuccessMetrics = Field(default_factory=SuccessMetrics)
    heat_map_data: dict[date, int] = Field(default_factory=dict)
    weekly_trends: list[WeeklyTrendPoint] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    flow_summaries: list[FlowSummary] = Field(default_factory=list)
    calculated_at: datetime
    timeframe: Timeframe


__all__ = [
    "Achievement",
    "ActivityBreakdown",
    "AggregateStats",
    "EmotionDistribution",
    "EmotionShare",
    "FlowStats",
    "FlowSummary",
    "QuantitativeStats",
    "Scoreboard",
    "StatusCounts",
    "SuccessMetrics",
    "TimeBasedStats",
    "Timeframe",
    "WeeklyTrendPoint",
]
