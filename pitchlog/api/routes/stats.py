"""
Stats routes: records, streaks, morale, goals, achievements and summary tables.

Every endpoint receives the full match list (creation order) and
recomputes from scratch; nothing here touches the database.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from pitchlog.api.deps import get_analytics_cache
from pitchlog.api.schemas import MatchListRequest
from pitchlog.core.config import settings
from pitchlog.services.analytics.cache import AnalyticsCache
from pitchlog.services.analytics.filters import available_tournaments, available_years
from pitchlog.services.analytics.goals_service import (
    AchievementCondition,
    AchievementMetric,
    AchievementOperator,
    GoalMetric,
    GoalType,
    compute_goal_progress,
    evaluate_achievement,
)
from pitchlog.services.analytics.morale_service import compute_morale
from pitchlog.services.analytics.records_service import compute_current_streaks, compute_historical_records
from pitchlog.services.analytics.summary_service import compute_period_summaries

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])


class MoraleRequest(MatchListRequest):
    window: Optional[int] = Field(None, ge=1, description="Matches per window (defaults to MORALE_WINDOW)")


class GoalProgressRequest(MatchListRequest):
    metric: GoalMetric
    goal_type: GoalType = GoalType.ACCUMULATE
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class AchievementConditionIn(BaseModel):
    metric: AchievementMetric
    value: int = Field(..., ge=0, description="Threshold the metric must reach")
    window: int = Field(0, ge=0, description="Most recent matches to inspect (0 = all)")
    operator: AchievementOperator = AchievementOperator.GREATER_THAN_OR_EQUAL_TO


class AchievementRequest(MatchListRequest):
    condition: AchievementConditionIn


@router.post("/records")
async def get_historical_records(
    request: MatchListRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """
    Longest streaks and single-match peaks.

    Each record carries its value and how many times it was reached.
    """
    matches = request.to_domain()
    records = cache.get_or_compute("records", matches, compute_historical_records)
    return jsonable_encoder(records)


@router.post("/streaks/current")
async def get_current_streaks(
    request: MatchListRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """Streaks still running at the most recent match."""
    matches = request.to_domain()
    streaks = cache.get_or_compute("current_streaks", matches, compute_current_streaks)
    return jsonable_encoder(streaks)


@router.post("/morale")
async def get_morale(
    request: MoraleRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """
    Recency-weighted form of the tracked player.

    Returns null when the (sliced) match list is empty.
    """
    matches = request.to_domain()
    window = request.window or settings.MORALE_WINDOW
    morale = cache.get_or_compute("morale", matches, compute_morale, window=window)
    return jsonable_encoder(morale)


@router.post("/goal-progress")
async def get_goal_progress(
    request: GoalProgressRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """Current value of a personal goal metric over an optional date range."""
    matches = request.to_domain()
    value = cache.get_or_compute(
        "goal_progress",
        matches,
        compute_goal_progress,
        metric=request.metric,
        goal_type=request.goal_type,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    return {
        "metric": request.metric.value,
        "goal_type": request.goal_type.value,
        "value": value,
    }


@router.post("/achievements/evaluate")
async def evaluate_achievement_condition(request: AchievementRequest):
    """Check whether a custom achievement condition holds in the recent window."""
    condition = AchievementCondition(
        metric=request.condition.metric,
        value=request.condition.value,
        window=request.condition.window,
        operator=request.condition.operator,
    )
    achieved = evaluate_achievement(condition, request.to_domain())
    return {
        "condition": jsonable_encoder(condition),
        "achieved": achieved,
    }


@router.post("/slices")
async def get_available_slices(request: MatchListRequest):
    """Years and tournament labels present in the match list, for slicing."""
    matches = request.to_domain()
    return {
        "years": available_years(matches),
        "tournaments": available_tournaments(matches),
    }


@router.post("/table")
async def get_summary_table(
    request: MatchListRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """Per-year (newest first) and per-tournament summary rows."""
    matches = request.to_domain()
    tables = cache.get_or_compute("table", matches, compute_period_summaries)
    return jsonable_encoder(tables)
