"""
Streak and record calculator.

Longest runs are found in one chronological pass. Each predicate keeps a
running counter that grows while the predicate holds and drops to zero
when it breaks; alongside it we track the longest length seen and how many
separate runs reached exactly that length.

Predicates:
- win / draw / loss streak: result == WIN / DRAW / LOSS
- undefeated streak: result != LOSS
- winless streak: result != WIN
- goal / assist streak: goals_for > 0 / assists > 0
- goal / assist drought: goals_for == 0 / assists == 0

Example: results W W L W W D give longest_win_streak value=2, count=2.

Single-match peaks (best goals, best assists) report the maximum and the
number of matches tying it. A maximum of 0 is not a performance and
reports count 0.
"""
import logging
from typing import Callable, Dict, Iterable

from pitchlog.services.analytics.ordering import sort_chronologically
from pitchlog.services.analytics.types import (
    CurrentStreaks,
    HistoricalRecord,
    HistoricalRecords,
    MatchRecord,
    ResultStreak,
)

logger = logging.getLogger(__name__)

MatchPredicate = Callable[[MatchRecord], bool]

STREAK_PREDICATES: Dict[str, MatchPredicate] = {
    "longest_win_streak": lambda m: m.is_win,
    "longest_undefeated_streak": lambda m: not m.is_loss,
    "longest_draw_streak": lambda m: m.is_draw,
    "longest_loss_streak": lambda m: m.is_loss,
    "longest_winless_streak": lambda m: not m.is_win,
    "longest_goal_streak": lambda m: m.goals_for > 0,
    "longest_assist_streak": lambda m: m.assists > 0,
    "longest_goal_drought": lambda m: m.goals_for == 0,
    "longest_assist_drought": lambda m: m.assists == 0,
}


class RunTracker:
    """Running counter plus (longest length, runs reaching it) for one predicate."""

    __slots__ = ("current", "best", "best_count")

    def __init__(self):
        self.current = 0
        self.best = 0
        self.best_count = 0

    def push(self, holds: bool) -> None:
        if not holds:
            self.current = 0
            return

        self.current += 1
        if self.current > self.best:
            self.best = self.current
            self.best_count = 1
        elif self.current == self.best:
            # Each run passes through a given length once
            self.best_count += 1

    def record(self) -> HistoricalRecord:
        return HistoricalRecord(value=self.best, count=self.best_count)


class PeakTracker:
    """Maximum single-match value and how many matches tie it."""

    __slots__ = ("best", "count")

    def __init__(self):
        self.best = 0
        self.count = 0

    def push(self, value: int) -> None:
        if value <= 0:
            return
        if value > self.best:
            self.best = value
            self.count = 1
        elif value == self.best:
            self.count += 1

    def record(self) -> HistoricalRecord:
        return HistoricalRecord(value=self.best, count=self.count)


def compute_historical_records(matches: Iterable[MatchRecord]) -> HistoricalRecords:
    """
    Compute longest streaks and single-match peaks.

    Args:
        matches: Match history in any order

    Returns:
        HistoricalRecords; every record is value=0, count=0 for an empty history
    """
    ordered = sort_chronologically(matches)
    if not ordered:
        return HistoricalRecords()

    runs = {name: RunTracker() for name in STREAK_PREDICATES}
    best_goals = PeakTracker()
    best_assists = PeakTracker()

    for match in ordered:
        for name, predicate in STREAK_PREDICATES.items():
            runs[name].push(predicate(match))
        best_goals.push(match.goals_for)
        best_assists.push(match.assists)

    logger.debug(f"Computed historical records over {len(ordered)} matches")

    return HistoricalRecords(
        **{name: tracker.record() for name, tracker in runs.items()},
        best_goal_performance=best_goals.record(),
        best_assist_performance=best_assists.record(),
    )


def _trailing_run(newest_first, predicate: MatchPredicate) -> int:
    count = 0
    for match in newest_first:
        if not predicate(match):
            break
        count += 1
    return count


def compute_current_streaks(matches: Iterable[MatchRecord]) -> CurrentStreaks:
    """
    Streaks that are still running at the most recent match.

    The result streak is only reported from two identical results onward;
    a single result is not a streak.
    """
    newest_first = list(reversed(sort_chronologically(matches)))
    if not newest_first:
        return CurrentStreaks()

    last_result = newest_first[0].result
    same_result = _trailing_run(newest_first, lambda m: m.result == last_result)
    result_streak = ResultStreak(result=last_result, count=same_result) if same_result >= 2 else ResultStreak()

    return CurrentStreaks(
        result_streak=result_streak,
        goal_streak=_trailing_run(newest_first, STREAK_PREDICATES["longest_goal_streak"]),
        assist_streak=_trailing_run(newest_first, STREAK_PREDICATES["longest_assist_streak"]),
        goal_drought=_trailing_run(newest_first, STREAK_PREDICATES["longest_goal_drought"]),
        assist_drought=_trailing_run(newest_first, STREAK_PREDICATES["longest_assist_drought"]),
        winless_streak=_trailing_run(newest_first, STREAK_PREDICATES["longest_winless_streak"]),
    )
