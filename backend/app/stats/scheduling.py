from __future__ import annotations

from datetime import date

from ..schemas.flow import Flow, Frequency

_WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def weekday_abbreviation(day: date) -> str:
    return _WEEKDAY_ABBREVIATIONS[day.weekday()]


def is_scheduled(flow: Flow, day: date) -> bool:
    """Return whether ``flow`` expects an entry on ``day``.

    Daily flows follow ``every_day`` or the listed weekdays, monthly flows the
    listed days of the month. Every other frequency is treated as always
    scheduled.
    """

    if flow.frequency == Frequency.DAILY:
        return flow.every_day or weekday_abbreviation(day) in flow.days_of_week
    if flow.frequency == Frequency.MONTHLY:
        return day.day in flow.selected_month_days
    # Weekly flows carry no day selection of their own.
    return True
