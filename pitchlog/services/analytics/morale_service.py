"""
Morale calculator.

Recent matches say more about how a player feels than old ones, so the
recent window is scored with exponentially decaying recency weights:

    weight(age) = DECAY ** age        (age 0 = newest match)
    raw(match)  = result points + GOAL_WEIGHT * goals + ASSIST_WEIGHT * assists
    score       = clamp(100 * weighted_mean(raw) / RAW_CEILING, 0, 100)

Result points: WIN 3, DRAW 1, LOSS 0. A win with one goal scores 50; three
goals and three assists in a win is already past the ceiling.

The score falls into one of ten tiers of width 10, best to worst. The
trend compares the recent window with the window right before it; with
fewer than two full windows of history the trend is "new".
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from pitchlog.services.analytics.ordering import sort_chronologically
from pitchlog.services.analytics.types import MatchRecord, MatchResult, Trend, WinDrawLoss

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 5


class MoraleLevel(str, Enum):
    """Ten morale tiers, best first."""
    GODLIKE = "Godlike"
    STELLAR = "Stellar"
    INSPIRED = "Inspired"
    CONFIDENT = "Confident"
    SOLID = "Solid"
    REGULAR = "Regular"
    DOUBTFUL = "Doubtful"
    BLOCKED = "Blocked"
    FREE_FALL = "Free Fall"
    UNRECOGNIZABLE = "Unrecognizable"


# (inclusive lower bound, level), scanned top-down
MORALE_TIERS: Tuple[Tuple[float, MoraleLevel], ...] = (
    (90.0, MoraleLevel.GODLIKE),
    (80.0, MoraleLevel.STELLAR),
    (70.0, MoraleLevel.INSPIRED),
    (60.0, MoraleLevel.CONFIDENT),
    (50.0, MoraleLevel.SOLID),
    (40.0, MoraleLevel.REGULAR),
    (30.0, MoraleLevel.DOUBTFUL),
    (20.0, MoraleLevel.BLOCKED),
    (10.0, MoraleLevel.FREE_FALL),
    (0.0, MoraleLevel.UNRECOGNIZABLE),
)


@dataclass(frozen=True)
class RecentWindowSummary:
    """Plain description of the recent window (not used for scoring)."""
    matches_considered: int
    record: str  # "W-D-L"
    goals: int
    assists: int


@dataclass(frozen=True)
class PlayerMorale:
    level: MoraleLevel
    score: float  # 0..100
    trend: Trend
    recent_summary: RecentWindowSummary


def level_for_score(score: float) -> MoraleLevel:
    """Map a 0..100 score onto its tier."""
    for lower_bound, level in MORALE_TIERS:
        if score >= lower_bound:
            return level
    return MoraleLevel.UNRECOGNIZABLE


class MoraleCalculator:
    """Score recent form and its trend against the preceding window."""

    RESULT_POINTS = {
        MatchResult.WIN: 3.0,
        MatchResult.DRAW: 1.0,
        MatchResult.LOSS: 0.0,
    }
    GOAL_WEIGHT = 1.0
    ASSIST_WEIGHT = 0.75
    DECAY = 0.8  # Weight multiplier per step back in time
    RAW_CEILING = 8.0  # Weighted raw value that maps to a score of 100
    TREND_TOLERANCE = 5.0  # Score points either way that still count as "same"

    def __init__(self, window: int = DEFAULT_WINDOW):
        """
        Initialize the calculator.

        Args:
            window: Number of matches in the recent (and prior) window
        """
        if window < 1:
            raise ValueError(f"Morale window must be at least 1, got {window}")
        self.window = window

    def raw_value(self, match: MatchRecord) -> float:
        """Unweighted contribution of one match."""
        return (
            self.RESULT_POINTS[match.result]
            + self.GOAL_WEIGHT * match.goals_for
            + self.ASSIST_WEIGHT * match.assists
        )

    def window_score(self, window: Sequence[MatchRecord]) -> float:
        """
        Recency-weighted score of a chronological window, clamped to 0..100.

        Args:
            window: Matches oldest to newest (non-empty)
        """
        weighted_sum = 0.0
        total_weight = 0.0
        for age, match in enumerate(reversed(window)):
            weight = self.DECAY ** age
            weighted_sum += weight * self.raw_value(match)
            total_weight += weight

        mean = weighted_sum / total_weight
        return max(0.0, min(100.0, 100.0 * mean / self.RAW_CEILING))

    def trend(self, recent_score: float, prior: Sequence[MatchRecord]) -> Trend:
        """Compare the recent score with the prior window's score."""
        if len(prior) < self.window:
            return Trend.NEW

        delta = recent_score - self.window_score(prior)
        if delta > self.TREND_TOLERANCE:
            return Trend.UP
        if delta < -self.TREND_TOLERANCE:
            return Trend.DOWN
        return Trend.SAME

    @staticmethod
    def summarize(window: Sequence[MatchRecord]) -> RecentWindowSummary:
        record = WinDrawLoss(
            wins=sum(1 for m in window if m.is_win),
            draws=sum(1 for m in window if m.is_draw),
            losses=sum(1 for m in window if m.is_loss),
        )
        return RecentWindowSummary(
            matches_considered=len(window),
            record=record.as_string(),
            goals=sum(m.goals_for for m in window),
            assists=sum(m.assists for m in window),
        )

    def calculate(self, matches: Iterable[MatchRecord]) -> Optional[PlayerMorale]:
        """
        Compute morale for a match history.

        Args:
            matches: Match history in any order

        Returns:
            PlayerMorale, or None for an empty history
        """
        ordered: List[MatchRecord] = sort_chronologically(matches)
        if not ordered:
            return None

        recent = ordered[-self.window:]
        prior = ordered[-2 * self.window:-self.window] if len(ordered) > self.window else []

        score = self.window_score(recent)
        trend = self.trend(score, prior)

        logger.debug(f"Morale score {score:.1f} over {len(recent)} matches (trend={trend.value})")

        reported = round(score, 2)
        return PlayerMorale(
            level=level_for_score(reported),
            score=reported,
            trend=trend,
            recent_summary=self.summarize(recent),
        )


def compute_morale(matches: Iterable[MatchRecord], window: int = DEFAULT_WINDOW) -> Optional[PlayerMorale]:
    """Morale of the tracked player; None when there are no matches."""
    return MoraleCalculator(window=window).calculate(matches)
