"""
Season and tournament summary tables.

One row per calendar year and one per tournament label, each with the
tracked player's totals over that slice:

    points        = 3 * wins + draws
    effectiveness = points / (matches_played * 3)

Untagged matches count towards their year but never towards a tournament.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from pitchlog.services.analytics.types import MatchRecord, WinDrawLoss

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodSummary:
    """Totals for one slice of the match history."""
    label: str
    matches_played: int
    record: WinDrawLoss
    points: int
    effectiveness: float  # 0.0 to 1.0
    win_rate: float  # 0.0 to 1.0
    goals: int
    assists: int
    contributions: int
    goals_per_match: float
    assists_per_match: float
    contributions_per_match: float


@dataclass(frozen=True)
class SummaryTables:
    by_year: Tuple[PeriodSummary, ...] = ()
    by_tournament: Tuple[PeriodSummary, ...] = ()


class _PeriodTally:
    __slots__ = ("wins", "draws", "losses", "goals", "assists")

    def __init__(self):
        self.wins = 0
        self.draws = 0
        self.losses = 0
        self.goals = 0
        self.assists = 0

    def add(self, match: MatchRecord) -> None:
        if match.is_win:
            self.wins += 1
        elif match.is_draw:
            self.draws += 1
        else:
            self.losses += 1
        self.goals += match.goals_for
        self.assists += match.assists

    def summary(self, label: str) -> PeriodSummary:
        matches = self.wins + self.draws + self.losses
        points = self.wins * 3 + self.draws
        contributions = self.goals + self.assists

        def rate(total: float) -> float:
            return total / matches if matches > 0 else 0.0

        return PeriodSummary(
            label=label,
            matches_played=matches,
            record=WinDrawLoss(wins=self.wins, draws=self.draws, losses=self.losses),
            points=points,
            effectiveness=rate(points / 3),
            win_rate=rate(self.wins),
            goals=self.goals,
            assists=self.assists,
            contributions=contributions,
            goals_per_match=rate(self.goals),
            assists_per_match=rate(self.assists),
            contributions_per_match=rate(contributions),
        )


def compute_period_summaries(matches: Iterable[MatchRecord]) -> SummaryTables:
    """
    Per-year and per-tournament summary rows.

    Args:
        matches: Match history in any order

    Returns:
        SummaryTables with years newest first and tournaments sorted by label
    """
    years: Dict[int, _PeriodTally] = {}
    tournaments: Dict[str, _PeriodTally] = {}

    for match in matches:
        years.setdefault(match.date.year, _PeriodTally()).add(match)
        label = (match.tournament or "").strip()
        if label:
            tournaments.setdefault(label, _PeriodTally()).add(match)

    logger.debug(f"Summary tables: {len(years)} years, {len(tournaments)} tournaments")

    return SummaryTables(
        by_year=tuple(years[year].summary(str(year)) for year in sorted(years, reverse=True)),
        by_tournament=tuple(tournaments[label].summary(label) for label in sorted(tournaments)),
    )
