"""
Personal goal progress and custom achievement checks.

Both are thin layers over the record calculator: a goal reads one metric
over a period, an achievement checks a streak condition over the last N
matches.
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from pitchlog.services.analytics.filters import filter_by_date_range
from pitchlog.services.analytics.ordering import sort_chronologically
from pitchlog.services.analytics.records_service import compute_historical_records
from pitchlog.services.analytics.types import MatchRecord

logger = logging.getLogger(__name__)


class GoalMetric(str, Enum):
    GOALS = "goals"
    ASSISTS = "assists"
    WINS = "wins"
    LONGEST_WIN_STREAK = "longest_win_streak"
    LONGEST_UNDEFEATED_STREAK = "longest_undefeated_streak"
    WIN_RATE = "win_rate"
    GOALS_PER_MATCH = "goals_per_match"
    UNDEFEATED_RATE = "undefeated_rate"


class GoalType(str, Enum):
    ACCUMULATE = "accumulate"
    PERCENTAGE = "percentage"
    AVERAGE = "average"
    STREAK = "streak"
    PEAK = "peak"


def compute_goal_progress(
    matches: Iterable[MatchRecord],
    metric: GoalMetric,
    goal_type: GoalType = GoalType.ACCUMULATE,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> float:
    """
    Current value of a goal metric.

    The period applies only when both bounds are given (inclusive). Peak
    goals read the best single match and only exist for goals and assists.
    Rates are percentages (0 to 100).
    """
    relevant = list(matches)
    if start_date and end_date:
        relevant = filter_by_date_range(relevant, start_date, end_date)

    total = len(relevant)
    if total == 0:
        return 0.0

    if goal_type == GoalType.PEAK:
        records = compute_historical_records(relevant)
        if metric == GoalMetric.GOALS:
            return float(records.best_goal_performance.value)
        if metric == GoalMetric.ASSISTS:
            return float(records.best_assist_performance.value)
        return 0.0

    if metric == GoalMetric.GOALS:
        return float(sum(m.goals_for for m in relevant))
    if metric == GoalMetric.ASSISTS:
        return float(sum(m.assists for m in relevant))
    if metric == GoalMetric.WINS:
        return float(sum(1 for m in relevant if m.is_win))
    if metric == GoalMetric.WIN_RATE:
        return 100.0 * sum(1 for m in relevant if m.is_win) / total
    if metric == GoalMetric.UNDEFEATED_RATE:
        return 100.0 * sum(1 for m in relevant if not m.is_loss) / total
    if metric == GoalMetric.GOALS_PER_MATCH:
        return sum(m.goals_for for m in relevant) / total
    if metric == GoalMetric.LONGEST_WIN_STREAK:
        return float(compute_historical_records(relevant).longest_win_streak.value)
    if metric == GoalMetric.LONGEST_UNDEFEATED_STREAK:
        return float(compute_historical_records(relevant).longest_undefeated_streak.value)

    logger.warning(f"Unknown goal metric: {metric}")
    return 0.0


# =============================================================================
# CUSTOM ACHIEVEMENTS
# =============================================================================

class AchievementMetric(str, Enum):
    WIN_STREAK = "win_streak"
    LOSS_STREAK = "loss_streak"
    UNDEFEATED_STREAK = "undefeated_streak"
    WINLESS_STREAK = "winless_streak"
    GOAL_STREAK = "goal_streak"
    ASSIST_STREAK = "assist_streak"
    GOAL_DROUGHT = "goal_drought"
    ASSIST_DROUGHT = "assist_drought"
    BREAK_WIN_AFTER_LOSS_STREAK = "break_win_after_loss_streak"
    BREAK_UNDEFEATED_AFTER_WINLESS_STREAK = "break_undefeated_after_winless_streak"


class AchievementOperator(str, Enum):
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"


# Streak metric -> HistoricalRecords attribute
_STREAK_RECORDS = {
    AchievementMetric.WIN_STREAK: "longest_win_streak",
    AchievementMetric.LOSS_STREAK: "longest_loss_streak",
    AchievementMetric.UNDEFEATED_STREAK: "longest_undefeated_streak",
    AchievementMetric.WINLESS_STREAK: "longest_winless_streak",
    AchievementMetric.GOAL_STREAK: "longest_goal_streak",
    AchievementMetric.ASSIST_STREAK: "longest_assist_streak",
    AchievementMetric.GOAL_DROUGHT: "longest_goal_drought",
    AchievementMetric.ASSIST_DROUGHT: "longest_assist_drought",
}


@dataclass(frozen=True)
class AchievementCondition:
    metric: AchievementMetric
    value: int
    window: int  # Most recent matches to inspect; 0 inspects the whole history
    operator: AchievementOperator = AchievementOperator.GREATER_THAN_OR_EQUAL_TO


def _win_after_run(window, in_run, threshold: int) -> bool:
    # A WIN that closes a run of at least `threshold` matches satisfying in_run
    run = 0
    for match in window:
        if match.is_win and run >= threshold:
            return True
        run = run + 1 if in_run(match) else 0
    return False


def evaluate_achievement(condition: AchievementCondition, matches: Iterable[MatchRecord]) -> bool:
    """
    Check a custom achievement condition against the recent window.

    Streak metrics compare the longest run inside the window with the
    condition value. The two "break" metrics need a WIN that ends a loss run
    (or a winless run) of at least that length, also inside the window.
    """
    ordered = sort_chronologically(matches)
    window = ordered[-condition.window:] if condition.window > 0 else ordered
    if not window:
        return False

    record_name = _STREAK_RECORDS.get(condition.metric)
    if record_name is not None:
        longest = getattr(compute_historical_records(window), record_name).value
        return longest >= condition.value

    if condition.metric == AchievementMetric.BREAK_WIN_AFTER_LOSS_STREAK:
        return _win_after_run(window, lambda m: m.is_loss, condition.value)
    if condition.metric == AchievementMetric.BREAK_UNDEFEATED_AFTER_WINLESS_STREAK:
        return _win_after_run(window, lambda m: not m.is_win, condition.value)

    logger.warning(f"Unknown achievement metric: {condition.metric}")
    return False
