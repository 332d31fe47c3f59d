"""
HTTP endpoint integration tests for the pitchlog API.

These tests verify that FastAPI endpoints:
- Return correct HTTP status codes
- Validate request/response schemas
- Handle errors gracefully

Uses FastAPI TestClient for in-memory HTTP testing.
"""
import pytest
from fastapi.testclient import TestClient

from conftest import make_match, make_matches, match_payload


def _body(matches, **extra):
    return {"matches": [match_payload(m) for m in matches], **extra}


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sample_matches():
    """A small season with teammates, opponents and two tournaments."""
    return [
        make_match("WIN", day=0, goals=2, assists=1, goal_differential=2, tournament="Liga",
                   teammates=["Ana", "Player"], opponents=[("Rival", 1, 0)]),
        make_match("WIN", day=1, goals=1, tournament="Liga", teammates=["Ana"], opponents=["Rival"]),
        make_match("LOSS", day=2, tournament="Copa", teammates=["Bea"], opponents=[("Rival", 2, 1)]),
        make_match("DRAW", day=370, assists=1, teammates=["ana"], opponents=["Other"]),
    ]


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

class TestRootAndHealthEndpoints:
    """Test root and health check endpoints."""

    def test_root_endpoint(self, test_client: TestClient):
        """Test root endpoint returns API information."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "running"
        assert "endpoints" in data

    def test_health_endpoint(self, test_client: TestClient):
        """Test basic health check endpoint."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_api_health_endpoint(self, test_client: TestClient):
        """Test detailed health check reports the database."""
        response = test_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["components"]["database"]["status"] == "connected"

    def test_correlation_id_echoed(self, test_client: TestClient):
        """A client correlation id comes back in the response headers."""
        response = test_client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"


# =============================================================================
# STATS ENDPOINTS
# =============================================================================

class TestStatsEndpoints:
    """Test record, streak, morale, goal and achievement endpoints."""

    def test_records(self, test_client: TestClient):
        """Records come back with value and count."""
        matches = make_matches(["WIN", "WIN", "LOSS", "WIN", "WIN", "DRAW"])

        response = test_client.post("/api/stats/records", json=_body(matches))

        assert response.status_code == 200
        assert response.json()["longest_win_streak"] == {"value": 2, "count": 2}

    def test_records_empty(self, test_client: TestClient):
        """An empty list gives all-zero records."""
        response = test_client.post("/api/stats/records", json={"matches": []})

        assert response.status_code == 200
        assert all(record == {"value": 0, "count": 0} for record in response.json().values())

    def test_current_streaks(self, test_client: TestClient):
        """The running result streak is reported."""
        response = test_client.post("/api/stats/streaks/current", json=_body(make_matches(["LOSS", "WIN", "WIN"])))

        assert response.status_code == 200
        assert response.json()["result_streak"] == {"result": "WIN", "count": 2}

    def test_morale(self, test_client: TestClient):
        """Morale carries level, score, trend and summary."""
        response = test_client.post("/api/stats/morale", json=_body([make_match("WIN", goals=1)]))

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 50.0
        assert data["level"] == "Solid"
        assert data["trend"] == "new"
        assert data["recent_summary"]["record"] == "1-0-0"

    def test_morale_empty_is_null(self, test_client: TestClient):
        """No matches, no morale."""
        response = test_client.post("/api/stats/morale", json={"matches": []})

        assert response.status_code == 200
        assert response.json() is None

    def test_morale_invalid_window(self, test_client: TestClient):
        """Window must be at least 1."""
        response = test_client.post("/api/stats/morale", json={"matches": [], "window": 0})

        assert response.status_code == 422

    def test_goal_progress(self, test_client: TestClient, sample_matches):
        """Goal metric over an inclusive date range."""
        body = _body(sample_matches, metric="goals", goal_type="accumulate",
                     start_date="2024-01-01", end_date="2024-01-02")

        response = test_client.post("/api/stats/goal-progress", json=body)

        assert response.status_code == 200
        assert response.json() == {"metric": "goals", "goal_type": "accumulate", "value": 3.0}

    def test_achievement(self, test_client: TestClient):
        """Achievement conditions evaluate over the recent window."""
        body = _body(make_matches(["LOSS", "LOSS", "WIN"]),
                     condition={"metric": "break_win_after_loss_streak", "value": 2, "window": 3})

        response = test_client.post("/api/stats/achievements/evaluate", json=body)

        assert response.status_code == 200
        assert response.json()["achieved"] is True

    def test_slices_and_filters(self, test_client: TestClient, sample_matches):
        """Available slices are listed and filters narrow the list."""
        response = test_client.post("/api/stats/slices", json=_body(sample_matches))

        assert response.json() == {"years": [2025, 2024], "tournaments": ["Copa", "Liga"]}

        filtered = test_client.post(
            "/api/stats/records",
            json=_body(sample_matches, filters={"tournament": "Liga"}),
        )
        assert filtered.json()["longest_win_streak"] == {"value": 2, "count": 1}

    def test_summary_table(self, test_client: TestClient, sample_matches):
        """The table lists years newest first and tagged tournaments only."""
        response = test_client.post("/api/stats/table", json=_body(sample_matches))

        assert response.status_code == 200
        data = response.json()
        assert [row["label"] for row in data["by_year"]] == ["2025", "2024"]
        assert data["by_year"][1]["points"] == 6
        assert data["by_year"][1]["record"] == {"wins": 2, "draws": 0, "losses": 1}
        assert [row["label"] for row in data["by_tournament"]] == ["Copa", "Liga"]
        assert data["by_tournament"][1]["effectiveness"] == pytest.approx(1.0)

    def test_negative_goals_rejected(self, test_client: TestClient):
        """Goal counts must be non-negative."""
        payload = match_payload(make_match("WIN"))
        payload["goals_for"] = -1

        response = test_client.post("/api/stats/records", json={"matches": [payload]})

        assert response.status_code == 422

    def test_unknown_result_rejected(self, test_client: TestClient):
        """Results are WIN, DRAW or LOSS."""
        payload = match_payload(make_match("WIN"))
        payload["result"] = "ABANDONED"

        response = test_client.post("/api/stats/records", json={"matches": [payload]})

        assert response.status_code == 422

    def test_repeated_requests_hit_the_cache(self, test_client: TestClient, analytics_cache):
        """The same match list is computed once."""
        body = _body(make_matches(["WIN", "DRAW"]))

        first = test_client.post("/api/stats/records", json=body)
        second = test_client.post("/api/stats/records", json=body)

        assert first.json() == second.json()
        assert analytics_cache.stats()["hits"] == 1


# =============================================================================
# DUEL ENDPOINTS
# =============================================================================

class TestDuelEndpoints:
    """Test impact tables, leaderboard and head-to-head."""

    def test_duel_tables(self, test_client: TestClient, sample_matches):
        """Teammates exclude the tracked player and group name variants."""
        response = test_client.post("/api/duels", json=_body(sample_matches, tracked_player_name="Player"))

        assert response.status_code == 200
        data = response.json()
        teammate_names = [row["name"] for row in data["teammates"]]
        assert "Player" not in teammate_names
        assert teammate_names.count("Ana") == 1
        assert data["teammates"][0]["name"] == "Ana"
        assert data["teammates"][0]["matches_played"] == 3
        assert {row["name"] for row in data["opponents"]} == {"Rival", "Other"}

    def test_duel_tables_single_match(self, test_client: TestClient):
        """With one match every row is new and scores raw / 6."""
        match = make_match("WIN", goals=1, teammates=["Ana"])

        response = test_client.post("/api/duels", json=_body([match]))

        row = response.json()["teammates"][0]
        assert row["rank_change"] == "new"
        assert row["impact_score"] == pytest.approx(4.5 / 6)

    def test_player_scoreboard(self, test_client: TestClient, sample_matches):
        """Leaderboard rows carry points and effectiveness."""
        response = test_client.post("/api/duels/players", json=_body(sample_matches, tracked_player_name="Player"))

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == len(data["players"])
        assert data["players"][0]["name"] == "Ana"
        assert data["players"][0]["points"] == 7
        rival = next(row for row in data["players"] if row["name"] == "Rival")
        assert (rival["wins"], rival["losses"]) == (1, 2)

    def test_player_profile(self, test_client: TestClient, sample_matches):
        """Head-to-head profile splits roles."""
        response = test_client.post("/api/duels/players/rival", json=_body(sample_matches))

        assert response.status_code == 200
        data = response.json()
        assert data["as_teammate"] is None
        assert data["as_opponent"]["matches_played"] == 3
        assert data["as_opponent"]["record"] == {"wins": 2, "draws": 0, "losses": 1}


# =============================================================================
# CAMPAIGN ENDPOINTS
# =============================================================================

class TestCampaignEndpoints:
    """Test the persisted campaign routes."""

    def _post_results(self, client, results):
        responses = []
        for i, result in enumerate(results):
            match = make_match(result, day=i, match_id=f"m{i}")
            responses.append(client.post("/api/campaign/matches", json=match_payload(match)))
        return responses

    def test_initial_state(self, test_client: TestClient):
        """A new profile starts at campaign 1, group stage."""
        response = test_client.get("/api/campaign")

        assert response.status_code == 200
        data = response.json()
        assert data["progress"]["campaign_number"] == 1
        assert data["progress"]["current_stage"] == "group"
        assert data["progress"]["start_date"] is None
        assert data["history"] == []

    def test_group_qualification(self, test_client: TestClient):
        """W W L qualifies for the round of 16."""
        responses = self._post_results(test_client, ["WIN", "WIN", "LOSS"])

        assert all(r.status_code == 200 for r in responses)
        last = responses[-1].json()
        assert last["event"] == "qualified"
        assert last["progress"]["current_stage"] == "round_of_16"
        assert last["archived"] is None

    def test_group_elimination(self, test_client: TestClient):
        """Three draws archive the campaign."""
        responses = self._post_results(test_client, ["DRAW", "DRAW", "DRAW"])

        last = responses[-1].json()
        assert last["event"] == "eliminated"
        assert last["archived"]["final_stage"] == "eliminated_group"
        assert last["progress"]["campaign_number"] == 2

        history = test_client.get("/api/campaign").json()["history"]
        assert len(history) == 1
        assert history[0]["start_date"] == "2024-01-01"

    def test_title_and_clear(self, test_client: TestClient):
        """A FINAL win freezes the campaign until it is cleared."""
        self._post_results(test_client, ["WIN", "WIN", "LOSS", "WIN", "WIN", "WIN", "WIN"])

        state = test_client.get("/api/campaign").json()
        assert state["progress"]["champion_of_campaign"] == 1
        assert [h["final_stage"] for h in state["history"]] == ["final"]

        ignored = test_client.post(
            "/api/campaign/matches",
            json=match_payload(make_match("LOSS", day=30, match_id="late")),
        )
        assert ignored.json()["event"] == "ignored"

        cleared = test_client.post("/api/campaign/clear-champion")
        assert cleared.status_code == 200
        assert cleared.json()["progress"]["campaign_number"] == 2
        assert cleared.json()["progress"]["champion_of_campaign"] is None

    def test_clear_without_title_is_conflict(self, test_client: TestClient):
        """Clearing a campaign that was not won answers 409."""
        self._post_results(test_client, ["WIN"])

        response = test_client.post("/api/campaign/clear-champion")

        assert response.status_code == 409

    def test_rebuild(self, test_client: TestClient):
        """Rebuild replays the list and replaces stored state."""
        self._post_results(test_client, ["DRAW", "DRAW", "DRAW"])

        response = test_client.post(
            "/api/campaign/rebuild",
            json=_body(make_matches(["WIN", "WIN", "WIN", "LOSS"])),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["progress"]["campaign_number"] == 2
        assert [h["final_stage"] for h in data["history"]] == ["round_of_16"]

    def test_profiles_are_separate(self, test_client: TestClient):
        """The profile_id query parameter selects the campaign."""
        test_client.post(
            "/api/campaign/matches?profile_id=alice",
            json=match_payload(make_match("WIN")),
        )

        alice = test_client.get("/api/campaign?profile_id=alice").json()
        default = test_client.get("/api/campaign").json()

        assert alice["progress"]["group_stage"]["points"] == 3
        assert default["progress"]["group_stage"]["points"] == 0

    def test_invalid_match_payload(self, test_client: TestClient):
        """Missing required fields answer 422."""
        response = test_client.post("/api/campaign/matches", json={"id": "x"})

        assert response.status_code == 422
