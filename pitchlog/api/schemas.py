"""
Request models shared by the API routes.

Match payloads are validated here and converted to the frozen domain
records the services work on; nothing past this module sees pydantic.
"""
import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from pitchlog.services.analytics.filters import filter_by_date_range, filter_by_tournament, filter_by_year
from pitchlog.services.analytics.types import MatchRecord, MatchResult, PlayerContribution


class PlayerContributionIn(BaseModel):
    """Another player's line in one match."""
    name: str = Field(..., description="Player name as logged")
    goals: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)

    def to_domain(self) -> PlayerContribution:
        return PlayerContribution(name=self.name, goals=self.goals, assists=self.assists)


class MatchIn(BaseModel):
    """One logged match of the tracked player."""
    id: str = Field(..., description="Match ID from the match log")
    date: dt.date = Field(..., description="Match date (ISO format)")
    result: MatchResult = Field(..., description="WIN, DRAW or LOSS")
    goals_for: int = Field(0, ge=0, description="Tracked player's goals")
    assists: int = Field(0, ge=0, description="Tracked player's assists")
    goal_differential: Optional[int] = Field(None, description="Signed team goal difference")
    notes: Optional[str] = None
    tournament: Optional[str] = None
    teammates: List[PlayerContributionIn] = Field(default_factory=list)
    opponents: List[PlayerContributionIn] = Field(default_factory=list)

    def to_domain(self) -> MatchRecord:
        return MatchRecord(
            id=self.id,
            date=self.date,
            result=self.result,
            goals_for=self.goals_for,
            assists=self.assists,
            goal_differential=self.goal_differential,
            notes=self.notes,
            tournament=self.tournament,
            teammates=tuple(p.to_domain() for p in self.teammates),
            opponents=tuple(p.to_domain() for p in self.opponents),
        )


class MatchSlice(BaseModel):
    """Optional narrowing of the match list before computing."""
    year: Optional[int] = Field(None, description="Calendar year")
    tournament: Optional[str] = Field(None, description="Tournament label")
    start_date: Optional[dt.date] = Field(None, description="Inclusive lower bound")
    end_date: Optional[dt.date] = Field(None, description="Inclusive upper bound")


class MatchListRequest(BaseModel):
    """Match list in creation order, optionally sliced."""
    matches: List[MatchIn] = Field(default_factory=list)
    filters: Optional[MatchSlice] = None

    def to_domain(self) -> List[MatchRecord]:
        matches = [m.to_domain() for m in self.matches]
        if self.filters is None:
            return matches

        matches = filter_by_year(matches, self.filters.year)
        matches = filter_by_tournament(matches, self.filters.tournament)
        return filter_by_date_range(matches, self.filters.start_date, self.filters.end_date)
