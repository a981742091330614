from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from backend.app.stats import StatsEngine


@pytest.fixture()
def two_flows(make_flow):
    reading = make_flow(
        {
            "2024-01-01": {"symbol": "+"},
            "2024-01-02": {"symbol": "+"},
            "2024-01-03": {"symbol": "-"},
        },
        id=1,
        title="Read",
    )
    running = make_flow(
        {
            "2024-01-01": {"symbol": "*"},
            "2024-01-02": {"symbol": "/"},
        },
        id="run",
        title="Run",
        trackingType="Time-based",
    )
    return [reading, running]


def test_aggregate_sums_flows(engine, two_flows) -> None:
    result = engine.aggregate(two_flows)

    assert result.total_flows == 2
    assert result.total_completed == 2
    assert result.total_partial == 1
    assert result.total_failed == 1
    assert result.total_skipped == 1
    assert result.total_scheduled_days == 5
    assert result.total_points == 25
    assert result.longest_streak == 2

    metrics = result.success_metrics
    assert metrics.total_successful_days == 3
    assert metrics.total_failed_days == 2
    assert metrics.success_rate == pytest.approx(60.0)
    assert metrics.pure_completion_rate == pytest.approx(40.0)
    assert metrics.partial_success_rate == pytest.approx(20.0)
    assert metrics.failure_rate == pytest.approx(20.0)
    assert metrics.skip_rate == pytest.approx(20.0)
    assert result.average_completion_rate == metrics.success_rate
    assert result.pure_completion_rate == metrics.pure_completion_rate

    assert [item.title for item in result.achievements] == ["Getting Started", "Halfway There"]
    assert [summary.flow_id for summary in result.flow_summaries] == [1, "run"]
    assert result.flow_summaries[1].flow_type.value == "Time-based"
    assert len(result.weekly_trends) == 7
    assert len(result.heat_map_data) == 31


def test_aggregate_without_flows_returns_defaults(engine) -> None:
    result = engine.aggregate([], "weekly")

    assert result.total_flows == 0
    assert result.success_metrics.success_rate == 0
    assert result.heat_map_data == {}
    assert result.weekly_trends == []
    assert result.achievements == []
    assert result.flow_summaries == []
    assert result.timeframe.value == "weekly"


def test_aggregate_with_only_unscheduled_entries_has_zero_rates(engine, make_flow) -> None:
    flow = make_flow({"2024-01-02": {"symbol": "+"}}, everyDay=False, daysOfWeek=["Mon"])

    result = engine.aggregate([flow])

    assert result.total_scheduled_days == 0
    assert result.success_metrics.success_rate == 0
    assert result.success_metrics.skip_rate == 0


def test_weekly_trends_cover_last_seven_days(engine, make_flow) -> None:
    daily = make_flow(
        {"2024-01-09": {"symbol": "+"}, "2024-01-10": {"symbol": "+"}},
        id=1,
    )
    mondays = make_flow(
        {"2024-01-08": {"symbol": "-"}},
        id=2,
        everyDay=False,
        daysOfWeek=["Mon"],
    )

    trends = engine.weekly_trends([daily, mondays])

    assert [point.day for point in trends][0] == date(2024, 1, 4)
    assert trends[-1].day == date(2024, 1, 10)
    assert trends[-1].display_date == "Jan 10"
    assert (trends[-1].completed, trends[-1].scheduled, trends[-1].percentage) == (1, 1, 100)
    monday = trends[4]
    assert monday.day == date(2024, 1, 8)
    assert (monday.completed, monday.scheduled, monday.percentage) == (0, 2, 0)


def test_weekly_trend_without_scheduled_flows_is_zero(engine, make_flow) -> None:
    mondays = make_flow(everyDay=False, daysOfWeek=["Mon"])

    trends = engine.weekly_trends([mondays])

    wednesday = trends[-1]
    assert wednesday.scheduled == 0
    assert wednesday.percentage == 0


def test_heat_map_covers_current_month(make_flow) -> None:
    engine = StatsEngine(clock=lambda: datetime(2024, 2, 15, 9, 0, tzinfo=UTC))
    first = make_flow(
        {"2024-02-01": {"symbol": "+"}, "2024-02-02": {"symbol": "*"}, "2024-01-31": {"symbol": "+"}},
        id=1,
    )
    second = make_flow(
        {"2024-02-01": {"symbol": "+"}, "2024-02-05": {"symbol": "+"}},
        id=2,
        everyDay=False,
        daysOfWeek=["Thu"],
    )

    heat = engine.heat_map([first, second])

    assert len(heat) == 29
    assert min(heat) == date(2024, 2, 1)
    assert max(heat) == date(2024, 2, 29)
    assert heat[date(2024, 2, 1)] == 2
    assert heat[date(2024, 2, 2)] == 0
    # 2024-02-05 is a Monday, outside the second flow's schedule
    assert heat[date(2024, 2, 5)] == 0


def test_emotion_distribution_spans_whole_history(engine, make_flow) -> None:
    flow = make_flow(
        {
            "2023-06-01": {"symbol": "+", "emotion": "Big smile"},
            "2024-01-01": {"symbol": "-", "emotion": "Sad"},
            "2024-01-02": {"symbol": "+", "emotion": "Big smile"},
            "2024-01-03": {"symbol": "+", "emotion": "Big smile"},
            "2024-01-04": {"symbol": "+"},
        },
        everyDay=False,
    )

    result = engine.emotion_distribution(flow)

    assert result.total_emotions == 4
    assert result.by_emotion["Big smile"] == 3
    assert result.by_emotion["Neutral"] == 0
    assert [share.emotion for share in result.distribution] == [
        "Big smile",
        "Slightly smiling",
        "Neutral",
        "Slightly worried",
        "Sad",
    ]
    assert result.distribution[0].percentage == pytest.approx(75.0)
    assert result.distribution[4].percentage == pytest.approx(25.0)


def test_emotion_distribution_without_emotions(engine, make_flow) -> None:
    result = engine.emotion_distribution(make_flow({"2024-01-01": {"symbol": "+"}}))

    assert result.total_emotions == 0
    assert all(share.percentage == 0 for share in result.distribution)


def test_projections_share_all_time_stats(engine, make_flow) -> None:
    flow = make_flow(
        {
            "2024-01-01": {"symbol": "+", "quantitative": {"count": 2, "unitText": "km"}},
            "2024-01-02": {"symbol": "-"},
            "2024-01-03": {"symbol": "/"},
            "2024-01-04": {"symbol": "+", "quantitative": {"count": 4, "unitText": "km"}},
        },
        id=9,
        title="Walk",
        trackingType="Quantitative",
    )

    scoreboard = engine.scoreboard(flow)
    breakdown = engine.activity_breakdown(flow)
    summary = engine.flow_summary(flow)

    assert scoreboard.streak == 1
    assert scoreboard.streak_bonus == 2
    assert scoreboard.final_score == 22
    assert scoreboard.quantitative_stats.total_count == 6

    assert breakdown.total == 4
    assert breakdown.by_status.missed == 1
    assert breakdown.by_status.skipped == 1
    by_status = breakdown.model_dump(by_alias=True)["byStatus"]
    assert by_status == {"Completed": 2, "Partial": 0, "Missed": 1, "Inactive": 0, "Skipped": 1}

    assert summary.flow_id == 9
    assert summary.flow_title == "Walk"
    assert summary.points == 22
    assert summary.longest_streak == 1
