"""
Tests for the pet match API.
"""

import pytest
from fastapi.testclient import TestClient

from pet_match.api.app import app
from pet_match.api.dependencies import get_handler
from pet_match.handlers import MatchHandler
from pet_match.services import MatchAssembler


@pytest.fixture
def client(catalog, profiles, oracle, score_store, clock):
    """Create a test client backed by in-memory stores and a fake oracle."""
    oracle.answers = {"Rex": "80", "Milo": "30", "Luna": "90"}
    assembler = MatchAssembler.create(
        catalog_store=catalog,
        profile_store=profiles,
        oracle=oracle,
        score_store=score_store,
        concurrency=2,
        timeout=1.0,
        clock=clock,
    )
    handler = MatchHandler(assembler=assembler, oracle=oracle)
    app.dependency_overrides[get_handler] = lambda: handler
    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(assembler.close)
    app.dependency_overrides.clear()


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Pet Match API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["oracle_healthy"] is None

    response = client.get("/health", params={"check_oracle": True})
    assert response.json()["oracle_healthy"] is True


def test_get_matches(client):
    """Test ranked list endpoint."""
    response = client.get("/users/u1/matches")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["neutral"] is False
    assert [p["id"] for p in data["pets"]] == ["luna", "rex", "milo"]
    assert data["pets"][0]["match_score"] == 90.0


def test_get_matches_with_filters(client):
    """Test species, size and score filters."""
    response = client.get("/users/u1/matches", params={"species": "cat"})
    assert [p["id"] for p in response.json()["pets"]] == ["milo"]

    response = client.get("/users/u1/matches", params=[("size", "large"), ("size", "small")])
    assert [p["id"] for p in response.json()["pets"]] == ["rex", "milo"]

    response = client.get("/users/u1/matches", params={"min_score": 85})
    assert [p["id"] for p in response.json()["pets"]] == ["luna"]

    response = client.get("/users/u1/matches", params={"species": "dragon"})
    assert response.status_code == 422


def test_get_matches_unknown_user(client):
    """Test that a missing profile is a 404."""
    response = client.get("/users/ghost/matches")
    assert response.status_code == 404


def test_get_matches_without_preferences(client):
    """Test neutral ranking for users without preferences."""
    response = client.get("/users/no-prefs/matches")
    assert response.status_code == 200
    data = response.json()
    assert data["neutral"] is True
    assert {p["match_score"] for p in data["pets"]} == {50.0}


def test_refresh_matches(client, oracle):
    """Test refresh reuses valid cached scores."""
    client.get("/users/u1/matches")
    response = client.post("/users/u1/matches/refresh")
    assert response.status_code == 200
    assert response.json()["total"] == 3
    assert len(oracle.calls) == 3


def test_get_pet_score(client):
    """Test single-pet score endpoint."""
    response = client.get("/users/u1/matches/rex", params={"wait": True})
    assert response.status_code == 200
    data = response.json()
    assert data["pending"] is False
    assert data["score"] == 80.0


def test_get_pet_score_pending(client):
    """Test that an unknown score is reported as pending."""
    response = client.get("/users/u1/matches/luna")
    assert response.status_code == 200
    assert response.json() == {"user_id": "u1", "pet_id": "luna", "pending": True, "score": None}


def test_get_pet_score_unknown_pet(client):
    """Test that an unknown pet is a 404."""
    response = client.get("/users/u1/matches/nobody", params={"wait": True})
    assert response.status_code == 404


def test_get_pet_score_follows_preference_edit(client, profiles, preferences_doc, oracle, clock):
    """Test that a preference edit is never answered with the old score."""
    client.get("/users/u1/matches")
    profiles.set_preferences("u1", preferences_doc, updated_at=clock.advance(100))
    clock.advance(1)
    oracle.answers["Rex"] = "20"

    response = client.get("/users/u1/matches/rex")
    assert response.json()["pending"] is True

    response = client.get("/users/u1/matches/rex", params={"wait": True})
    assert response.json()["score"] == 20.0


def test_profile_and_catalog_changed(client):
    """Test change notifications."""
    client.get("/users/u1/matches")

    response = client.post("/users/u1/profile/changed")
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = client.post("/catalog/changed")
    assert response.status_code == 200

    response = client.get("/users/u1/matches")
    assert response.json()["total"] == 3


def test_clear_scores(client):
    """Test clearing a user's cached scores."""
    client.get("/users/u1/matches")
    response = client.delete("/users/u1/scores")
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 3


def test_get_stats(client):
    """Test stats endpoint."""
    client.get("/users/u1/matches")
    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total_entries"] == 3
    assert data["oracle_model"] == "fake-judge"
    assert data["batch_concurrency"] == 2
    assert data["metrics"]["oracle_calls"] == 3
