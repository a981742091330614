from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Weekday = Literal["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MonthDay = Annotated[int, Field(ge=1, le=31)]


class TrackingType(str, Enum):
    BINARY = "Binary"
    QUANTITATIVE = "Quantitative"
    TIME_BASED = "Time-based"


class Frequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class Symbol(str, Enum):
    COMPLETED = "+"
    FAILED = "-"
    PARTIAL = "*"
    SKIPPED = "/"


class Emotion(str, Enum):
    BIG_SMILE = "Big smile"
    SLIGHTLY_SMILING = "Slightly smiling"
    NEUTRAL = "Neutral"
    SLIGHTLY_WORRIED = "Slightly worried"
    SAD = "Sad"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuantitativePayload(CamelModel):
    count: float = Field(default=0, ge=0)
    unit_text: str = ""


class TimebasedPayload(CamelModel):
    total_duration: float = Field(default=0, ge=0)
    pauses_count: int = Field(default=0, ge=0)


class DayEntry(CamelModel):
    """Recorded outcome of one calendar date of a flow."""

    symbol: Symbol | None = None
    emotion: Emotion | None = None
    mood_score: float | None = None
    note: str | None = None
    cheat_mode: bool = False
    quantitative: QuantitativePayload | None = None
    timebased: TimebasedPayload | None = None

    @field_validator("symbol", mode="before")
    @classmethod
    def _unknown_symbol_is_inactive(cls, value: object) -> object:
        try:
            return Symbol(value)
        except ValueError:
            return None

    @field_validator("emotion", mode="before")
    @classmethod
    def _unknown_emotion_is_none(cls, value: object) -> object:
        try:
            return Emotion(value)
        except ValueError:
            return None

    @field_validator("note", mode="before")
    @classmethod
    def _blank_note_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @property
    def has_note(self) -> bool:
        return self.note is not None


class Flow(CamelModel):
    """A tracked habit together with its per-day status map.

    The status map is keyed by calendar date. Payloads are checked against
    ``tracking_type`` here so the stats engine can trust every entry it sees.
    """

    id: int | str
    title: str = ""
    tracking_type: TrackingType = TrackingType.BINARY
    frequency: Frequency = Frequency.DAILY
    every_day: bool = False
    days_of_week: list[Weekday] = Field(default_factory=list)
    selected_month_days: list[MonthDay] = Field(default_factory=list)
    start_date: date | None = None
    created_at: datetime | None = None
    status: dict[date, DayEntry] = Field(default_factory=dict)

    @field_validator("frequency", mode="before")
    @classmethod
    def _default_frequency(cls, value: str | None) -> str:
        return value or Frequency.DAILY.value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: object) -> object:
        # anything but a mapping counts as "no history"
        if not isinstance(value, dict):
            return {}
        return value

    @model_validator(mode="after")
    def _check_payloads(self) -> Flow:
        for day, entry in self.status.items():
            if entry.quantitative is not None and entry.timebased is not None:
                raise ValueError(f"entry {day.isoformat()} carries more than one payload")
            if (
                entry.quantitative is not None
                and self.tracking_type != TrackingType.QUANTITATIVE
            ):
                raise ValueError(
                    f"entry {day.isoformat()} has a quantitative payload "
                    f"on a {self.tracking_type.value} flow"
                )
            if entry.timebased is not None and self.tracking_type != TrackingType.TIME_BASED:
                raise ValueError(
                    f"entry {day.isoformat()} has a time-based payload "
                    f"on a {self.tracking_type.value} flow"
                )
        return self


class AggregateRequest(BaseModel):
    flows: list[Flow] = Field(default_factory=list)


__all__ = [
    "AggregateRequest",
    "CamelModel",
    "DayEntry",
    "Emotion",
    "Flow",
    "Frequency",
    "QuantitativePayload",
    "Symbol",
    "TimebasedPayload",
    "TrackingType",
]
