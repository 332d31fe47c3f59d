"""
Chronological ordering of match records.

Every analytics computation reads matches oldest to newest. Matches on the
same date keep their relative input position (Python's sort is stable), and
callers pass matches in creation order, so same-day ties resolve by
creation order. The "most recent" match is the last element.
"""
from typing import Iterable, List

from pitchlog.services.analytics.types import MatchRecord


def sort_chronologically(matches: Iterable[MatchRecord]) -> List[MatchRecord]:
    """Return a new list ordered by date ascending, ties by input position."""
    return sorted(matches, key=lambda match: match.date)


def without_most_recent(matches: Iterable[MatchRecord]) -> List[MatchRecord]:
    """Chronological history minus its newest match (the one-match-earlier snapshot)."""
    return sort_chronologically(matches)[:-1]
