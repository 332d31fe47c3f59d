"""
Duel routes: teammate and opponent impact tables, players leaderboard and
head-to-head profiles.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from pydantic import Field

from pitchlog.api.deps import get_analytics_cache
from pitchlog.api.schemas import MatchListRequest
from pitchlog.core.config import settings
from pitchlog.services.analytics.cache import AnalyticsCache
from pitchlog.services.analytics.duel_service import (
    compute_duel_stats,
    compute_player_context,
    compute_player_scoreboard,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/duels", tags=["duels"])


class DuelRequest(MatchListRequest):
    tracked_player_name: Optional[str] = Field(
        None,
        description="Tracked player's name, excluded from teammates (defaults to TRACKED_PLAYER_NAME)"
    )

    def tracked_name(self) -> str:
        return self.tracked_player_name or settings.TRACKED_PLAYER_NAME


@router.post("")
async def get_duel_stats(
    request: DuelRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """
    Teammate and opponent tables ranked by impact score.

    Returns:
        - teammates: rows sorted by impact score, best first
        - opponents: rows sorted by impact score, best first
        Each row carries its rank change against the list without the newest match.
    """
    matches = request.to_domain()
    report = cache.get_or_compute(
        "duels",
        matches,
        compute_duel_stats,
        tracked_player_name=request.tracked_name(),
    )
    return jsonable_encoder(report)


@router.post("/players")
async def get_player_scoreboard(
    request: DuelRequest,
    cache: AnalyticsCache = Depends(get_analytics_cache)
):
    """Flat leaderboard of every other player by football points."""
    matches = request.to_domain()
    rows = cache.get_or_compute(
        "player_scoreboard",
        matches,
        compute_player_scoreboard,
        tracked_player_name=request.tracked_name(),
    )
    return {
        "players": jsonable_encoder(rows),
        "count": len(rows),
    }


@router.post("/players/{name}")
async def get_player_profile(name: str, request: MatchListRequest):
    """Head-to-head profile of one player as teammate and as opponent."""
    profile = compute_player_context(request.to_domain(), name)
    return jsonable_encoder(profile)
