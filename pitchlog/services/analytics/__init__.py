"""
Analytics core: pure computations over a list of match records.

- records_service: longest streaks, single-match peaks, current streaks
- morale_service: recency-weighted form score, tier and trend
- duel_service: teammate/opponent impact scores, players leaderboard, head-to-head
- goals_service: goal metric progress, custom achievement conditions
- summary_service: per-year and per-tournament summary tables
- filters: season / date range / tournament slicing
- cache: optional content-hash memoization
"""
from pitchlog.services.analytics.types import (
    CurrentStreaks,
    HistoricalRecord,
    HistoricalRecords,
    MatchRecord,
    MatchResult,
    PlayerContribution,
    Trend,
    WinDrawLoss,
)
from pitchlog.services.analytics.records_service import compute_current_streaks, compute_historical_records
from pitchlog.services.analytics.morale_service import MoraleLevel, PlayerMorale, compute_morale
from pitchlog.services.analytics.summary_service import PeriodSummary, SummaryTables, compute_period_summaries
from pitchlog.services.analytics.duel_service import (
    DuelReport,
    DuelStats,
    compute_duel_stats,
    compute_player_context,
    compute_player_scoreboard,
)

__all__ = [
    "CurrentStreaks",
    "HistoricalRecord",
    "HistoricalRecords",
    "MatchRecord",
    "MatchResult",
    "PlayerContribution",
    "Trend",
    "WinDrawLoss",
    "compute_current_streaks",
    "compute_historical_records",
    "MoraleLevel",
    "PlayerMorale",
    "compute_morale",
    "DuelReport",
    "DuelStats",
    "compute_duel_stats",
    "compute_player_context",
    "compute_player_scoreboard",
    "PeriodSummary",
    "SummaryTables",
    "compute_period_summaries",
]
