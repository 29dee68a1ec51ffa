import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["teams"] == 94
    assert body["aliases"] > body["teams"]


def test_status_reports_calibration(client):
    body = client.get("/api/status").json()
    assert body["resolver"]["min_confidence"] == 0.8
    assert body["resolver"]["min_fuzzy_gap"] == 0.2
    assert body["parser"]["default_american_odds"] == -110
    assert body["leagues"] == ["nba", "nhl", "nfl"]


def test_list_teams(client):
    body = client.get("/api/teams", params={"league": "NBA"}).json()
    assert body["league"] == "nba"
    assert body["count"] == 30
    assert all(team["league"] == "nba" for team in body["teams"])


def test_list_all_teams(client):
    assert client.get("/api/teams").json()["count"] == 94


def test_unknown_league_is_rejected(client):
    response = client.get("/api/teams", params={"league": "xfl"})
    assert response.status_code == 400
    assert "xfl" in response.json()["detail"]


def test_resolve_team(client):
    body = client.get("/api/teams/resolve", params={"q": "Lakers"}).json()
    assert body["success"] is True
    assert body["team"]["name"] == "Lakers"
    assert body["match_kind"] == "alias"


def test_resolve_ambiguous_team(client):
    response = client.get("/api/teams/resolve", params={"q": "LA"})
    assert response.status_code == 200
    assert response.json()["reason"] == "ambiguous-match"


def test_resolve_with_league(client):
    body = client.get("/api/teams/resolve", params={"q": "ATL", "league": "nfl"}).json()
    assert body["team"]["name"] == "Falcons"


def test_parse_matchup(client):
    response = client.post(
        "/api/matchups/parse",
        json={"text": "Chiefs -3.5 vs Bills, I'm taking Chiefs, home game, odds -110"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["parsed"]["pick_team"]["name"] == "Chiefs"
    assert body["parsed"]["spread"] == -3.5
    assert body["parsed"]["venue"] == "home"
    assert body["parsed"]["american_odds"] == -110
    assert body["validation"] == {"valid": True, "errors": []}


def test_parse_failure_is_not_an_error(client):
    body = client.post("/api/matchups/parse", json={"text": "XYZ vs ABC"}).json()
    assert body["success"] is False
    assert body["failure"] == "missing-league"
    assert body["clarification_needed"] == ["league"]
    assert body["validation"] is None


def test_parse_requires_text(client):
    assert client.post("/api/matchups/parse", json={}).status_code == 422
