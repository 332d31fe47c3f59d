"""Match-list slicing by season, date range and tournament."""
from datetime import date
from typing import Iterable, List, Optional

from pitchlog.services.analytics.types import MatchRecord


def filter_by_year(matches: Iterable[MatchRecord], year: Optional[int]) -> List[MatchRecord]:
    """Matches played in the given calendar year; every match when year is None."""
    if year is None:
        return list(matches)
    return [m for m in matches if m.date.year == year]


def filter_by_date_range(
    matches: Iterable[MatchRecord],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[MatchRecord]:
    """
    Matches between start_date and end_date, both inclusive.

    A missing bound leaves that side open. An inverted range is empty.
    """
    if start_date and end_date and start_date > end_date:
        return []
    return [
        m for m in matches
        if (start_date is None or m.date >= start_date)
        and (end_date is None or m.date <= end_date)
    ]


def filter_by_tournament(matches: Iterable[MatchRecord], tournament: Optional[str]) -> List[MatchRecord]:
    """Matches tagged with the tournament label (exact, after trimming)."""
    if not tournament:
        return list(matches)
    label = tournament.strip()
    return [m for m in matches if m.tournament and m.tournament.strip() == label]


def available_tournaments(matches: Iterable[MatchRecord]) -> List[str]:
    """Sorted distinct non-empty tournament labels."""
    return sorted({m.tournament.strip() for m in matches if m.tournament and m.tournament.strip()})


def available_years(matches: Iterable[MatchRecord]) -> List[int]:
    """Years with at least one match, newest first."""
    return sorted({m.date.year for m in matches}, reverse=True)
