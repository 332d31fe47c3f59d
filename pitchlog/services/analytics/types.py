"""
Domain types shared by the analytics services.

Match records are frozen so one snapshot can be handed to several
computations (or threads) without copying.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class MatchResult(str, Enum):
    """Outcome of a match from the tracked player's side."""
    WIN = "WIN"
    LOSS = "LOSS"
    DRAW = "DRAW"


class Trend(str, Enum):
    """Direction of a score or rank compared with the previous snapshot."""
    UP = "up"
    DOWN = "down"
    SAME = "same"
    NEW = "new"


@dataclass(frozen=True)
class PlayerContribution:
    """Another player's line in one match."""
    name: str
    goals: int = 0
    assists: int = 0


@dataclass(frozen=True)
class MatchRecord:
    """One logged match of the tracked player."""
    id: str
    date: date
    result: MatchResult
    goals_for: int = 0
    assists: int = 0
    goal_differential: Optional[int] = None
    notes: Optional[str] = None
    tournament: Optional[str] = None
    teammates: Tuple[PlayerContribution, ...] = field(default_factory=tuple)
    opponents: Tuple[PlayerContribution, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists (or None) from callers and keep the record hashable
        object.__setattr__(self, "result", MatchResult(self.result))
        object.__setattr__(self, "teammates", tuple(self.teammates or ()))
        object.__setattr__(self, "opponents", tuple(self.opponents or ()))

    @property
    def is_win(self) -> bool:
        return self.result == MatchResult.WIN

    @property
    def is_draw(self) -> bool:
        return self.result == MatchResult.DRAW

    @property
    def is_loss(self) -> bool:
        return self.result == MatchResult.LOSS


@dataclass(frozen=True)
class HistoricalRecord:
    """
    A record magnitude and how often it was reached.

    For streaks, count is the number of distinct runs that reached exactly
    the longest length; for single-match peaks, the number of matches tying
    the maximum.
    """
    value: int = 0
    count: int = 0


@dataclass(frozen=True)
class HistoricalRecords:
    """Longest runs and single-match peaks over a match history."""
    longest_win_streak: HistoricalRecord = HistoricalRecord()
    longest_undefeated_streak: HistoricalRecord = HistoricalRecord()
    longest_draw_streak: HistoricalRecord = HistoricalRecord()
    longest_loss_streak: HistoricalRecord = HistoricalRecord()
    longest_winless_streak: HistoricalRecord = HistoricalRecord()

    longest_goal_streak: HistoricalRecord = HistoricalRecord()
    longest_assist_streak: HistoricalRecord = HistoricalRecord()
    longest_goal_drought: HistoricalRecord = HistoricalRecord()
    longest_assist_drought: HistoricalRecord = HistoricalRecord()

    best_goal_performance: HistoricalRecord = HistoricalRecord()
    best_assist_performance: HistoricalRecord = HistoricalRecord()


@dataclass(frozen=True)
class ResultStreak:
    """Run of identical results ending at the newest match."""
    result: Optional[MatchResult] = None  # None when the run is shorter than 2
    count: int = 0


@dataclass(frozen=True)
class CurrentStreaks:
    """Streaks still running at the most recent match."""
    result_streak: ResultStreak = ResultStreak()
    goal_streak: int = 0
    assist_streak: int = 0
    goal_drought: int = 0
    assist_drought: int = 0
    winless_streak: int = 0


@dataclass(frozen=True)
class WinDrawLoss:
    wins: int = 0
    draws: int = 0
    losses: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.draws + self.losses

    def as_string(self) -> str:
        return f"{self.wins}-{self.draws}-{self.losses}"
