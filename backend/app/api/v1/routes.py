from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ...core.config import Settings, get_settings
from ...metrics import ENTRIES_SCANNED, STATS_COMPUTATIONS
from ...schemas.flow import AggregateRequest, Flow
from ...schemas.stats import (
    ActivityBreakdown,
    AggregateStats,
    EmotionDistribution,
    FlowStats,
    FlowSummary,
    Scoreboard,
    Timeframe,
)
from ...stats import StatsEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


def get_stats_engine(request: Request) -> StatsEngine:
    return request.app.state.stats_engine


def resolve_timeframe(
    timeframe: Timeframe | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> Timeframe:
    if timeframe is not None:
        return timeframe
    return Timeframe(settings.default_timeframe)


def _record(kind: str, timeframe: Timeframe, *flows: Flow) -> None:
    STATS_COMPUTATIONS.labels(kind=kind, timeframe=timeframe.value).inc()
    ENTRIES_SCANNED.inc(sum(len(flow.status) for flow in flows))


@router.post("", response_model=AggregateStats)
async def aggregate_stats(
    payload: AggregateRequest,
    engine: StatsEngine = Depends(get_stats_engine),
    timeframe: Timeframe = Depends(resolve_timeframe),
    settings: Settings = Depends(get_settings),
) -> AggregateStats:
    if len(payload.flows) > settings.max_flows_per_request:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"at most {settings.max_flows_per_request} flows per request",
        )
    result = engine.aggregate(payload.flows, timeframe)
    _record("aggregate", timeframe, *payload.flows)
    logger.info(
        "aggregate stats computed",
        extra={"timeframe": timeframe.value, "flow_count": len(payload.flows)},
    )
    return result


@router.post("/flow", response_model=FlowStats)
async def flow_stats(
    flow: Flow,
    engine: StatsEngine = Depends(get_stats_engine),
    timeframe: Timeframe = Depends(resolve_timeframe),
    include_emotions: bool = Query(default=True, alias="includeEmotions"),
    include_notes: bool = Query(default=True, alias="includeNotes"),
) -> FlowStats:
    result = engine.compute_stats(
        flow,
        timeframe,
        include_emotions=include_emotions,
        include_notes=include_notes,
    )
    _record("flow", timeframe, flow)
    return result


@router.post("/flow/scoreboard", response_model=Scoreboard)
async def flow_scoreboard(
    flow: Flow,
    engine: StatsEngine = Depends(get_stats_engine),
) -> Scoreboard:
    result = engine.scoreboard(flow)
    _record("scoreboard", Timeframe.ALL, flow)
    return result


@router.post("/flow/activity", response_model=ActivityBreakdown)
async def flow_activity(
    flow: Flow,
    engine: StatsEngine = Depends(get_stats_engine),
) -> ActivityBreakdown:
    result = engine.activity_breakdown(flow)
    _record("activity", Timeframe.ALL, flow)
    return result


@router.post("/flow/emotions", response_model=EmotionDistribution)
async def flow_emotions(
    flow: Flow,
    engine: StatsEngine = Depends(get_stats_engine),
) -> EmotionDistribution:
    result = engine.emotion_distribution(flow)
    _record("emotions", Timeframe.ALL, flow)
    return result


@router.post("/flow/summary", response_model=FlowSummary)
async def flow_summary(
    flow: Flow,
    engine: StatsEngine = Depends(get_stats_engine),
) -> FlowSummary:
    result = engine.flow_summary(flow)
    _record("summary", Timeframe.ALL, flow)
    return result
