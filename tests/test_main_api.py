# tests/test_main_api.py
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Import the FastAPI app instance from main
from main import app
from config.settings import ScoringSettings
from services.quiz_scoring.service import CentralizedScoringService
from src.services.storage import InMemoryScoreStore

SOLO_TECH = {
    "workCollaborationPreference": "solo-only",
    "riskComfortLevel": 5,
    "techSkillsRating": 5,
    "selfMotivationLevel": 5,
}


@pytest.fixture
def client():
    """Runs the app lifespan against the in-memory store."""
    settings = ScoringSettings(store_backend="memory", log_level="WARNING")
    with patch("main.get_settings", return_value=settings):
        with TestClient(app) as test_client:
            yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_wires_scoring_service(client):
    service = client.app.state.scoring_service
    assert isinstance(service, CentralizedScoringService)
    assert isinstance(service._store, InMemoryScoreStore)
    assert len(service.catalog) == 26


def test_score_then_read_back(client):
    url = "/api/v1/quiz-attempts/main-api-1/business-model-scores"
    created = client.post(url, json=SOLO_TECH)
    assert created.status_code == 200

    fetched = client.get(url)
    assert fetched.status_code == 200
    assert fetched.json() == created.json()


def test_cors_headers_present(client):
    response = client.get("/health", headers={"Origin": "http://quiz.example"})
    assert response.headers.get("access-control-allow-origin") in ("*", "http://quiz.example")
