"""Shared pytest fixtures for pitchlog tests."""
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Generator, Iterable, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pitchlog.services.analytics.types import MatchRecord, MatchResult, PlayerContribution  # noqa: E402

START_DATE = date(2024, 1, 1)


def make_match(
    result: str = "WIN",
    day: int = 0,
    goals: int = 0,
    assists: int = 0,
    match_id: Optional[str] = None,
    goal_differential: Optional[int] = None,
    tournament: Optional[str] = None,
    teammates: Iterable = (),
    opponents: Iterable = (),
) -> MatchRecord:
    """
    Build a match record for tests.

    teammates/opponents accept plain names or (name, goals, assists) tuples.
    """
    def contributions(players):
        built = []
        for player in players:
            if isinstance(player, str):
                built.append(PlayerContribution(name=player))
            else:
                built.append(PlayerContribution(*player))
        return tuple(built)

    return MatchRecord(
        id=match_id or f"m{day}",
        date=START_DATE + timedelta(days=day),
        result=MatchResult(result),
        goals_for=goals,
        assists=assists,
        goal_differential=goal_differential,
        tournament=tournament,
        teammates=contributions(teammates),
        opponents=contributions(opponents),
    )


def make_matches(results: Iterable[str], **kwargs) -> List[MatchRecord]:
    """One match per result on consecutive days."""
    return [
        make_match(result, day=i, match_id=f"m{i}", **kwargs)
        for i, result in enumerate(results)
    ]


def match_payload(match: MatchRecord) -> dict:
    """JSON body for a match, as the API expects it."""
    return {
        "id": match.id,
        "date": match.date.isoformat(),
        "result": match.result.value,
        "goals_for": match.goals_for,
        "assists": match.assists,
        "goal_differential": match.goal_differential,
        "tournament": match.tournament,
        "teammates": [{"name": p.name, "goals": p.goals, "assists": p.assists} for p in match.teammates],
        "opponents": [{"name": p.name, "goals": p.goals, "assists": p.assists} for p in match.opponents],
    }


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create fresh test database session with isolated in-memory database."""
    from pitchlog.models import Base

    # StaticPool keeps one connection so every session (including the ones
    # TestClient requests open) sees the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def analytics_cache():
    """Fresh analytics cache per test."""
    from pitchlog.services.analytics.cache import AnalyticsCache

    return AnalyticsCache(max_entries=16)


@pytest.fixture
def test_client(db_session, analytics_cache):
    """
    Create FastAPI TestClient with a fresh database for each test.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/campaign")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from pitchlog.main import app
    from pitchlog.core.database import get_db
    from pitchlog.api.deps import get_analytics_cache

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analytics_cache] = lambda: analytics_cache

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
