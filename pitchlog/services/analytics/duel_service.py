"""
Duel impact engine.

Ranks every teammate and opponent of the tracked player by an impact
score: the summed per-match contribution, shrunk toward zero for small
samples by adding SMOOTHING_CONSTANT "ghost" matches to the denominator:

    impact_score = accumulated_score / (matches_played + SMOOTHING_CONSTANT)

Per-match contribution (ImpactWeights):
- result weight; a loss costs -1 alongside a teammate, -2 against an opponent
- +1.5 per tracked-player goal, +1.0 per tracked-player assist
- +0.25 per goal of signed goal differential (0 when not logged)
- the other player's own goals/assists: +0.75/+0.5 for a teammate,
  -0.75/-0.5 for an opponent

Rank change diffs the impact ranking against the same aggregation without
the newest match.

Besides the regularized tables there is a flat players leaderboard
(football points, no shrinkage) and a head-to-head profile for one player.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pitchlog.services.analytics.name_normalizer import display_name, normalize
from pitchlog.services.analytics.ordering import sort_chronologically, without_most_recent
from pitchlog.services.analytics.types import (
    MatchRecord,
    MatchResult,
    PlayerContribution,
    Trend,
    WinDrawLoss,
)

logger = logging.getLogger(__name__)

SMOOTHING_CONSTANT = 5  # Ghost matches in the impact score denominator


class DuelRole(str, Enum):
    TEAMMATE = "teammate"
    OPPONENT = "opponent"


@dataclass(frozen=True)
class ImpactWeights:
    """Linear weights of one match's contribution to a player's impact score."""
    win: float
    draw: float
    loss: float
    tracked_goal: float
    tracked_assist: float
    goal_differential: float
    player_goal: float
    player_assist: float

    def result_weight(self, result: MatchResult) -> float:
        if result == MatchResult.WIN:
            return self.win
        if result == MatchResult.DRAW:
            return self.draw
        return self.loss


TEAMMATE_WEIGHTS = ImpactWeights(
    win=3.0, draw=1.0, loss=-1.0,
    tracked_goal=1.5, tracked_assist=1.0,
    goal_differential=0.25,
    player_goal=0.75, player_assist=0.5,
)

OPPONENT_WEIGHTS = ImpactWeights(
    win=3.0, draw=1.0, loss=-2.0,
    tracked_goal=1.5, tracked_assist=1.0,
    goal_differential=0.25,
    player_goal=-0.75, player_assist=-0.5,
)

ROLE_WEIGHTS = {
    DuelRole.TEAMMATE: TEAMMATE_WEIGHTS,
    DuelRole.OPPONENT: OPPONENT_WEIGHTS,
}


@dataclass(frozen=True)
class DuelStats:
    """One row of the teammate or opponent table."""
    name: str
    role: DuelRole
    matches_played: int
    record: WinDrawLoss  # From the tracked player's side
    win_rate: float  # 0.0 to 1.0
    tracked_goals: int  # Tracked player's goals in the shared matches
    tracked_assists: int
    own_goals: int  # This player's own goals in the shared matches
    own_assists: int
    goals_per_match: float  # Tracked player's rates in the shared matches
    assists_per_match: float
    contributions_per_match: float
    impact_score: float
    rank_change: Trend


@dataclass(frozen=True)
class DuelReport:
    teammates: Tuple[DuelStats, ...] = ()
    opponents: Tuple[DuelStats, ...] = ()


@dataclass
class DuelAccumulator:
    """Running totals for one player in one role."""
    name: str
    matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    tracked_goals: int = 0
    tracked_assists: int = 0
    own_goals: int = 0
    own_assists: int = 0
    score: float = 0.0

    @property
    def impact_score(self) -> float:
        return impact_score(self.score, self.matches)

    def add(self, match: MatchRecord, contribution: PlayerContribution, weights: ImpactWeights) -> None:
        self.matches += 1
        if match.is_win:
            self.wins += 1
        elif match.is_draw:
            self.draws += 1
        else:
            self.losses += 1
        self.tracked_goals += match.goals_for
        self.tracked_assists += match.assists
        self.own_goals += contribution.goals
        self.own_assists += contribution.assists
        self.score += match_impact(match, contribution, weights)


def match_impact(match: MatchRecord, contribution: PlayerContribution, weights: ImpactWeights) -> float:
    """Contribution of one shared match to a player's accumulated score."""
    return (
        weights.result_weight(match.result)
        + weights.tracked_goal * match.goals_for
        + weights.tracked_assist * match.assists
        + weights.goal_differential * (match.goal_differential or 0)
        + weights.player_goal * contribution.goals
        + weights.player_assist * contribution.assists
    )


def impact_score(accumulated_score: float, matches_played: int) -> float:
    """Shrunk per-match average of an accumulated score."""
    if matches_played <= 0:
        return 0.0
    return accumulated_score / (matches_played + SMOOTHING_CONSTANT)


def merge_side(
    contributions: Iterable[PlayerContribution],
    exclude_key: str = ""
) -> Dict[str, PlayerContribution]:
    """
    Collapse one side of one match into one contribution per player.

    Blank names are dropped, as is exclude_key (the tracked player). A name
    listed twice on the same side counts as one appearance with summed goals
    and assists.
    """
    merged: Dict[str, PlayerContribution] = {}
    for contribution in contributions:
        key = normalize(contribution.name)
        if not key or key == exclude_key:
            continue
        previous = merged.get(key)
        if previous is None:
            merged[key] = PlayerContribution(
                name=display_name(contribution.name),
                goals=contribution.goals,
                assists=contribution.assists,
            )
        else:
            merged[key] = PlayerContribution(
                name=previous.name,
                goals=previous.goals + contribution.goals,
                assists=previous.assists + contribution.assists,
            )
    return merged


def aggregate_duels(
    ordered: Sequence[MatchRecord],
    tracked_player_name: str
) -> Tuple[Dict[str, DuelAccumulator], Dict[str, DuelAccumulator]]:
    """
    Accumulate teammate and opponent totals keyed by normalized name.

    Dict order is first appearance in the given match order, which is the
    tie-break order for equal impact scores.
    """
    tracked_key = normalize(tracked_player_name)
    teammates: Dict[str, DuelAccumulator] = {}
    opponents: Dict[str, DuelAccumulator] = {}

    for match in ordered:
        for key, contribution in merge_side(match.teammates, exclude_key=tracked_key).items():
            teammates.setdefault(key, DuelAccumulator(name=contribution.name)).add(
                match, contribution, TEAMMATE_WEIGHTS
            )
        for key, contribution in merge_side(match.opponents).items():
            opponents.setdefault(key, DuelAccumulator(name=contribution.name)).add(
                match, contribution, OPPONENT_WEIGHTS
            )

    return teammates, opponents


def rank_keys(accumulators: Dict[str, DuelAccumulator]) -> List[str]:
    """Keys ordered by impact score descending; ties keep first-appearance order."""
    return sorted(accumulators, key=lambda key: -accumulators[key].impact_score)


def rank_changes(current: Dict[str, DuelAccumulator], previous: Dict[str, DuelAccumulator]) -> Dict[str, Trend]:
    """Position change of every current key against the previous ranking."""
    previous_rank = {key: index for index, key in enumerate(rank_keys(previous))}
    changes: Dict[str, Trend] = {}
    for index, key in enumerate(rank_keys(current)):
        before = previous_rank.get(key)
        if before is None:
            changes[key] = Trend.NEW
        elif index < before:
            changes[key] = Trend.UP
        elif index > before:
            changes[key] = Trend.DOWN
        else:
            changes[key] = Trend.SAME
    return changes


def _per_match(total: int, matches: int) -> float:
    return total / matches if matches > 0 else 0.0


def _build_rows(
    current: Dict[str, DuelAccumulator],
    previous: Dict[str, DuelAccumulator],
    role: DuelRole
) -> Tuple[DuelStats, ...]:
    changes = rank_changes(current, previous)
    rows = []
    for key in rank_keys(current):
        acc = current[key]
        rows.append(DuelStats(
            name=acc.name,
            role=role,
            matches_played=acc.matches,
            record=WinDrawLoss(wins=acc.wins, draws=acc.draws, losses=acc.losses),
            win_rate=_per_match(acc.wins, acc.matches),
            tracked_goals=acc.tracked_goals,
            tracked_assists=acc.tracked_assists,
            own_goals=acc.own_goals,
            own_assists=acc.own_assists,
            goals_per_match=_per_match(acc.tracked_goals, acc.matches),
            assists_per_match=_per_match(acc.tracked_assists, acc.matches),
            contributions_per_match=_per_match(acc.tracked_goals + acc.tracked_assists, acc.matches),
            impact_score=acc.impact_score,
            rank_change=changes[key],
        ))
    return tuple(rows)


def compute_duel_stats(matches: Iterable[MatchRecord], tracked_player_name: str) -> DuelReport:
    """
    Teammate and opponent impact tables, each sorted by impact score descending.

    Args:
        matches: Match history in any order
        tracked_player_name: Excluded from the teammate table (case-insensitive)

    Returns:
        DuelReport; rank_change is "new" for everyone when there is at most one match
    """
    ordered = sort_chronologically(matches)
    if not ordered:
        return DuelReport()

    teammates, opponents = aggregate_duels(ordered, tracked_player_name)
    previous_teammates, previous_opponents = aggregate_duels(without_most_recent(ordered), tracked_player_name)

    logger.debug(
        f"Duel stats: {len(teammates)} teammates, {len(opponents)} opponents over {len(ordered)} matches"
    )

    return DuelReport(
        teammates=_build_rows(teammates, previous_teammates, DuelRole.TEAMMATE),
        opponents=_build_rows(opponents, previous_opponents, DuelRole.OPPONENT),
    )


# =============================================================================
# PLAYERS LEADERBOARD
# =============================================================================

@dataclass(frozen=True)
class PlayerScoreboardRow:
    """
    Unregularized totals for one player across both roles.

    Wins, draws and losses are the player's own: a tracked-player win is a
    win for a teammate and a loss for an opponent.
    """
    name: str
    matches_played: int
    wins: int
    draws: int
    losses: int
    goals: int
    assists: int
    points: int  # 3 * wins + draws
    win_rate: float  # 0.0 to 1.0
    effectiveness: float  # points / (matches_played * 3)


@dataclass
class _ScoreboardTally:
    name: str
    matches: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals: int = 0
    assists: int = 0

    def add(self, result: MatchResult, contribution: PlayerContribution) -> None:
        self.matches += 1
        if result == MatchResult.WIN:
            self.wins += 1
        elif result == MatchResult.DRAW:
            self.draws += 1
        else:
            self.losses += 1
        self.goals += contribution.goals
        self.assists += contribution.assists


_INVERTED_RESULT = {
    MatchResult.WIN: MatchResult.LOSS,
    MatchResult.DRAW: MatchResult.DRAW,
    MatchResult.LOSS: MatchResult.WIN,
}


def compute_player_scoreboard(
    matches: Iterable[MatchRecord],
    tracked_player_name: str
) -> List[PlayerScoreboardRow]:
    """
    Flat players leaderboard sorted by points, then effectiveness, then name.

    A player listed on both sides of the same match counts once, as a teammate.
    The tracked player is left out of the teammate side only, as in the duel
    tables; a same-named opponent is listed.
    """
    tracked_key = normalize(tracked_player_name)
    tallies: Dict[str, _ScoreboardTally] = {}

    for match in sort_chronologically(matches):
        teammates = merge_side(match.teammates, exclude_key=tracked_key)
        opponents = merge_side(match.opponents)

        for key, contribution in teammates.items():
            tallies.setdefault(key, _ScoreboardTally(name=contribution.name)).add(match.result, contribution)
        for key, contribution in opponents.items():
            if key in teammates:
                continue
            tallies.setdefault(key, _ScoreboardTally(name=contribution.name)).add(
                _INVERTED_RESULT[match.result], contribution
            )

    rows = []
    for tally in tallies.values():
        points = tally.wins * 3 + tally.draws
        rows.append(PlayerScoreboardRow(
            name=tally.name,
            matches_played=tally.matches,
            wins=tally.wins,
            draws=tally.draws,
            losses=tally.losses,
            goals=tally.goals,
            assists=tally.assists,
            points=points,
            win_rate=_per_match(tally.wins, tally.matches),
            effectiveness=points / (tally.matches * 3) if tally.matches > 0 else 0.0,
        ))

    rows.sort(key=lambda row: (-row.points, -row.effectiveness, normalize(row.name)))
    return rows


# =============================================================================
# HEAD-TO-HEAD PROFILE
# =============================================================================

@dataclass(frozen=True)
class PlayerContextStats:
    """Tracked player's numbers in the matches shared with one player in one role."""
    matches_played: int
    record: WinDrawLoss
    win_rate: float
    goals: int
    assists: int
    goals_per_match: float
    assists_per_match: float
    points: int
    match_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlayerProfile:
    name: str
    as_teammate: Optional[PlayerContextStats] = None
    as_opponent: Optional[PlayerContextStats] = None


def _context_stats(shared: Sequence[MatchRecord]) -> Optional[PlayerContextStats]:
    if not shared:
        return None
    record = WinDrawLoss(
        wins=sum(1 for m in shared if m.is_win),
        draws=sum(1 for m in shared if m.is_draw),
        losses=sum(1 for m in shared if m.is_loss),
    )
    goals = sum(m.goals_for for m in shared)
    assists = sum(m.assists for m in shared)
    return PlayerContextStats(
        matches_played=len(shared),
        record=record,
        win_rate=record.wins / len(shared),
        goals=goals,
        assists=assists,
        goals_per_match=goals / len(shared),
        assists_per_match=assists / len(shared),
        points=record.wins * 3 + record.draws,
        match_ids=tuple(m.id for m in shared),
    )


def compute_player_context(matches: Iterable[MatchRecord], player_name: str) -> PlayerProfile:
    """Head-to-head profile of one player, split by role."""
    key = normalize(player_name)
    ordered = sort_chronologically(matches)

    with_player = [m for m in ordered if any(normalize(p.name) == key for p in m.teammates)]
    against_player = [m for m in ordered if any(normalize(p.name) == key for p in m.opponents)]

    return PlayerProfile(
        name=display_name(player_name),
        as_teammate=_context_stats(with_player) if key else None,
        as_opponent=_context_stats(against_player) if key else None,
    )
