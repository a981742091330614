from __future__ import annotations

import calendar
import logging
from collections.abc import Callable, Iterator, Sequence
from datetime import UTC, date, datetime, timedelta
from typing import NamedTuple

from ..schemas.flow import DayEntry, Emotion, Flow, Symbol, TrackingType
from ..schemas.stats import (
    ActivityBreakdown,
    AggregateStats,
    EmotionDistribution,
    EmotionShare,
    FlowStats,
    FlowSummary,
    QuantitativeStats,
    Scoreboard,
    StatusCounts,
    SuccessMetrics,
    TimeBasedStats,
    Timeframe,
    WeeklyTrendPoint,
)
from .achievements import generate_achievements
from .scheduling import is_scheduled
from .scoring import NOTE_POINTS, STREAK_POINTS_PER_DAY, emotion_score, percentage, symbol_points

logger = logging.getLogger(__name__)

_MONTH_ABBREVIATIONS = (
    "", "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class Streaks(NamedTuple):
    current: int
    longest: int


class StatsEngine:
    """Derive completion, streak and scoring statistics from flow status maps.

    The engine is pure: it reads the flows it is given, never mutates them and
    keeps no state between calls. ``clock`` is the only source of "now".
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def today(self) -> date:
        return self._clock().date()

    def _local_date(self, moment: datetime) -> date:
        tz = self._clock().tzinfo
        if moment.tzinfo is not None and tz is not None:
            moment = moment.astimezone(tz)
        return moment.date()

    def resolve_window(self, flow: Flow, timeframe: Timeframe | str) -> tuple[date, date]:
        timeframe = _as_timeframe(timeframe)
        end = self.today()
        days = timeframe.days
        if days is not None:
            return end - timedelta(days=days - 1), end
        if flow.start_date is not None:
            start = flow.start_date
        elif flow.created_at is not None:
            start = self._local_date(flow.created_at)
        elif flow.status:
            start = min(flow.status)
        else:
            start = end
        return start, end

    def compute_stats(
        self,
        flow: Flow,
        timeframe: Timeframe | str = Timeframe.ALL,
        *,
        include_emotions: bool = True,
        include_notes: bool = True,
    ) -> FlowStats:
        timeframe = _as_timeframe(timeframe)
        start, end = self.resolve_window(flow, timeframe)

        counts = dict.fromkeys(("completed", "partial", "failed", "skipped", "inactive"), 0)
        points = 0
        emotion_bonus = 0
        notes_count = 0
        cheat_entries = 0
        scheduled_days = 0
        mood_scores: list[float] = []
        time_based = TimeBasedStats()
        quantitative = QuantitativeStats()

        for _, entry in self._counted_entries(flow, start, end):
            scheduled_days += 1
            counts[_classify(entry)] += 1
            points += symbol_points(entry.symbol)

            if include_emotions and entry.emotion is not None:
                score = emotion_score(entry.emotion)
                emotion_bonus += score
                points += score

            if include_notes and entry.has_note:
                notes_count += 1
                points += NOTE_POINTS

            if entry.cheat_mode:
                cheat_entries += 1

            if entry.mood_score is not None:
                mood_scores.append(entry.mood_score)

            if entry.timebased is not None and flow.tracking_type == TrackingType.TIME_BASED:
                time_based.total_duration += entry.timebased.total_duration
                time_based.total_pauses += entry.timebased.pauses_count

            if entry.quantitative is not None and flow.tracking_type == TrackingType.QUANTITATIVE:
                quantitative.total_count += entry.quantitative.count
                quantitative.unit_text = entry.quantitative.unit_text

        if scheduled_days:
            time_based.average_duration = time_based.total_duration / scheduled_days
            quantitative.average_count = quantitative.total_count / scheduled_days

        streaks = self.compute_streaks(flow, start, end)
        streak_bonus = streaks.current * STREAK_POINTS_PER_DAY
        points += streak_bonus

        average_mood = (
            round(sum(mood_scores) / len(mood_scores), 2) if mood_scores else None
        )

        logger.debug(
            "flow stats computed",
            extra={
                "extra_fields": {
                    "flow_id": flow.id,
                    "timeframe": timeframe.value,
                    "scheduled_days": scheduled_days,
                }
            },
        )

        return FlowStats(
            **counts,
            scheduled_days=scheduled_days,
            current_streak=streaks.current,
            longest_streak=streaks.longest,
            completion_rate=percentage(counts["completed"] + counts["partial"], scheduled_days),
            final_score=points,
            emotion_bonus=emotion_bonus,
            notes_count=notes_count,
            cheat_entries_count=cheat_entries,
            streak_bonus=streak_bonus,
            average_mood_score=average_mood,
            time_based_stats=time_based,
            quantitative_stats=quantitative,
            timeframe=timeframe,
            start_date=start,
            end_date=end,
            calculated_at=self._clock(),
        )

    def compute_streaks(self, flow: Flow, start: date, end: date) -> Streaks:
        """Walk scheduled entries in date order and track runs of completions.

        ``current`` is the run ending at the latest counted entry, which is not
        necessarily today: a flow nobody touched for a week still reports the
        streak it had when the last entry was written.
        """

        running = 0
        longest = 0
        entries = sorted(self._counted_entries(flow, start, end), key=lambda item: item[0])
        for _, entry in entries:
            if entry.symbol == Symbol.COMPLETED:
                running += 1
                longest = max(longest, running)
            else:
                running = 0
        return Streaks(current=running, longest=longest)

    def aggregate(
        self,
        flows: Sequence[Flow],
        timeframe: Timeframe | str = Timeframe.ALL,
    ) -> AggregateStats:
        timeframe = _as_timeframe(timeframe)
        if not flows:
            return AggregateStats(calculated_at=self._clock(), timeframe=timeframe)

        totals = AggregateStats(
            total_flows=len(flows),
            calculated_at=self._clock(),
            timeframe=timeframe,
        )
        for flow in flows:
            stats = self.compute_stats(flow, timeframe)
            totals.total_completed += stats.completed
            totals.total_partial += stats.partial
            totals.total_failed += stats.failed
            totals.total_skipped += stats.skipped
            totals.total_inactive += stats.inactive
            totals.total_points += stats.final_score
            totals.total_emotion_bonus += stats.emotion_bonus
            totals.total_notes_count += stats.notes_count
            totals.total_cheat_entries += stats.cheat_entries_count
            totals.total_scheduled_days += stats.scheduled_days
            totals.longest_streak = max(totals.longest_streak, stats.longest_streak)
            totals.flow_summaries.append(self.flow_summary(flow, stats=stats))

        scheduled = totals.total_scheduled_days
        metrics = SuccessMetrics(
            total_successful_days=totals.total_completed + totals.total_partial,
            total_failed_days=totals.total_failed + totals.total_skipped,
            success_rate=percentage(totals.total_completed + totals.total_partial, scheduled),
            pure_completion_rate=percentage(totals.total_completed, scheduled),
            partial_success_rate=percentage(totals.total_partial, scheduled),
            failure_rate=percentage(totals.total_failed, scheduled),
            skip_rate=percentage(totals.total_skipped, scheduled),
        )
        totals.success_metrics = metrics
        totals.average_completion_rate = metrics.success_rate
        totals.pure_completion_rate = metrics.pure_completion_rate
        totals.weekly_trends = self.weekly_trends(flows)
        totals.achievements = generate_achievements(
            totals.total_completed,
            totals.longest_streak,
            metrics.success_rate,
            len(flows),
        )
        totals.heat_map_data = self.heat_map(flows)
        return totals

    def weekly_trends(self, flows: Sequence[Flow]) -> list[WeeklyTrendPoint]:
        today = self.today()
        trends: list[WeeklyTrendPoint] = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            scheduled = 0
            completed = 0
            for flow in flows:
                if not is_scheduled(flow, day):
                    continue
                scheduled += 1
                if _completed_on(flow, day):
                    completed += 1
            trends.append(
                WeeklyTrendPoint(
                    day=day,
                    display_date=f"{_MONTH_ABBREVIATIONS[day.month]} {day.day}",
                    percentage=percentage(completed, scheduled),
                    completed=completed,
                    scheduled=scheduled,
                )
            )
        return trends

    def heat_map(self, flows: Sequence[Flow]) -> dict[date, int]:
        today = self.today()
        _, days_in_month = calendar.monthrange(today.year, today.month)
        heat: dict[date, int] = {}
        for day_number in range(1, days_in_month + 1):
            day = today.replace(day=day_number)
            heat[day] = sum(
                1 for flow in flows if is_scheduled(flow, day) and _completed_on(flow, day)
            )
        return heat

    @staticmethod
    def emotion_distribution(flow: Flow) -> EmotionDistribution:
        by_emotion = {emotion: 0 for emotion in Emotion}
        for entry in flow.status.values():
            if entry.emotion is not None:
                by_emotion[entry.emotion] += 1
        total = sum(by_emotion.values())
        return EmotionDistribution(
            total_emotions=total,
            by_emotion={emotion.value: count for emotion, count in by_emotion.items()},
            distribution=[
                EmotionShare(
                    emotion=emotion.value,
                    count=count,
                    percentage=percentage(count, total),
                )
                for emotion, count in by_emotion.items()
            ],
        )

    def scoreboard(self, flow: Flow) -> Scoreboard:
        stats = self.compute_stats(flow, Timeframe.ALL)
        return Scoreboard(
            completed=stats.completed,
            partial=stats.partial,
            failed=stats.failed,
            skipped=stats.skipped,
            inactive=stats.inactive,
            streak=stats.current_streak,
            streak_bonus=stats.streak_bonus,
            emotion_bonus=stats.emotion_bonus,
            notes_count=stats.notes_count,
            completion_rate=stats.completion_rate,
            final_score=stats.final_score,
            time_based_stats=stats.time_based_stats,
            quantitative_stats=stats.quantitative_stats,
        )

    def activity_breakdown(self, flow: Flow) -> ActivityBreakdown:
        stats = self.compute_stats(flow, Timeframe.ALL)
        return ActivityBreakdown(
            total=stats.scheduled_days,
            by_status=StatusCounts(
                completed=stats.completed,
                partial=stats.partial,
                missed=stats.failed,
                inactive=stats.inactive,
                skipped=stats.skipped,
            ),
            time_based=stats.time_based_stats,
            quantitative=stats.quantitative_stats,
        )

    def flow_summary(self, flow: Flow, *, stats: FlowStats | None = None) -> FlowSummary:
        if stats is None:
            stats = self.compute_stats(flow, Timeframe.ALL)
        return FlowSummary(
            flow_id=flow.id,
            flow_title=flow.title,
            flow_type=flow.tracking_type,
            completed=stats.completed,
            partial=stats.partial,
            failed=stats.failed,
            skipped=stats.skipped,
            inactive=stats.inactive,
            current_streak=stats.current_streak,
            longest_streak=stats.longest_streak,
            completion_rate=stats.completion_rate,
            scheduled_days=stats.scheduled_days,
            points=stats.final_score,
        )

    @staticmethod
    def _counted_entries(
        flow: Flow,
        start: date,
        end: date,
    ) -> Iterator[tuple[date, DayEntry]]:
        for day, entry in flow.status.items():
            if day < start or day > end:
                continue
            if not is_scheduled(flow, day):
                continue
            yield day, entry


def _as_timeframe(value: Timeframe | str) -> Timeframe:
    try:
        return Timeframe(value)
    except ValueError:
        return Timeframe.ALL


def _classify(entry: DayEntry) -> str:
    if entry.symbol == Symbol.COMPLETED:
        return "completed"
    if entry.symbol == Symbol.PARTIAL:
        return "partial"
    if entry.symbol == Symbol.FAILED:
        return "failed"
    if entry.symbol == Symbol.SKIPPED:
        return "skipped"
    return "inactive"


def _completed_on(flow: Flow, day: date) -> bool:
    entry = flow.status.get(day)
    return entry is not None and entry.symbol == Symbol.COMPLETED


__all__ = ["StatsEngine", "Streaks"]
