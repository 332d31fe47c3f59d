"""Unit tests for match-list slicing and chronological ordering."""
from datetime import date

from conftest import make_match

from pitchlog.services.analytics.filters import (
    available_tournaments,
    available_years,
    filter_by_date_range,
    filter_by_tournament,
    filter_by_year,
)
from pitchlog.services.analytics.ordering import sort_chronologically, without_most_recent


def _ids(matches):
    return [m.id for m in matches]


class TestOrdering:
    """Test chronological ordering with creation-order ties."""

    def test_sorts_by_date(self):
        """Matches are ordered oldest first."""
        matches = [make_match(day=2, match_id="c"), make_match(day=0, match_id="a"), make_match(day=1, match_id="b")]

        assert _ids(sort_chronologically(matches)) == ["a", "b", "c"]

    def test_same_date_keeps_input_order(self):
        """Same-day matches stay in creation order."""
        matches = [make_match(day=0, match_id="first"), make_match(day=0, match_id="second")]

        assert _ids(sort_chronologically(matches)) == ["first", "second"]

    def test_without_most_recent(self):
        """Drops only the newest match."""
        matches = [make_match(day=1, match_id="new"), make_match(day=0, match_id="old")]

        assert _ids(without_most_recent(matches)) == ["old"]
        assert without_most_recent([]) == []

    def test_without_most_recent_same_day(self):
        """Same-day ties drop the last one created."""
        matches = [make_match(day=0, match_id="first"), make_match(day=0, match_id="second")]

        assert _ids(without_most_recent(matches)) == ["first"]


class TestFilters:
    """Test season, range and tournament slicing."""

    def test_filter_by_year(self):
        """Keeps one calendar year; None keeps all."""
        matches = [make_match(day=0, match_id="2024"), make_match(day=400, match_id="2025")]

        assert _ids(filter_by_year(matches, 2025)) == ["2025"]
        assert len(filter_by_year(matches, None)) == 2

    def test_date_range_inclusive(self):
        """Both ends are inclusive."""
        matches = [make_match(day=d, match_id=str(d)) for d in range(5)]

        result = filter_by_date_range(matches, date(2024, 1, 2), date(2024, 1, 4))
        assert _ids(result) == ["1", "2", "3"]

    def test_date_range_open_ends(self):
        """A missing bound leaves that side open."""
        matches = [make_match(day=d, match_id=str(d)) for d in range(5)]

        assert _ids(filter_by_date_range(matches, start_date=date(2024, 1, 4))) == ["3", "4"]
        assert _ids(filter_by_date_range(matches, end_date=date(2024, 1, 1))) == ["0"]

    def test_inverted_range_is_empty(self):
        """Start after end selects nothing."""
        matches = [make_match(day=d) for d in range(3)]

        assert filter_by_date_range(matches, date(2024, 1, 3), date(2024, 1, 1)) == []

    def test_filter_by_tournament(self):
        """Matches the trimmed label exactly."""
        matches = [
            make_match(day=0, match_id="a", tournament="Liga"),
            make_match(day=1, match_id="b", tournament=" Liga "),
            make_match(day=2, match_id="c", tournament="Copa"),
            make_match(day=3, match_id="d"),
        ]

        assert _ids(filter_by_tournament(matches, "Liga")) == ["a", "b"]
        assert len(filter_by_tournament(matches, None)) == 4

    def test_available_slices(self):
        """Distinct tournaments sorted; years newest first."""
        matches = [
            make_match(day=0, tournament="Liga"),
            make_match(day=400, tournament="Copa"),
            make_match(day=401, tournament="Liga"),
            make_match(day=402, tournament="  "),
        ]

        assert available_tournaments(matches) == ["Copa", "Liga"]
        assert available_years(matches) == [2025, 2024]
