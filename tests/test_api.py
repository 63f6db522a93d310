from fastapi.testclient import TestClient
import pytest

from conftest import ScriptedBackend, data_uri, final_turn
from phish_content_analyzer.api import app as app_module


@pytest.fixture
def client_for(monkeypatch, make_service):
    def _client(backend):
        calls = []

        def fake_create_service(**kwargs):
            calls.append(kwargs)
            return make_service(backend), {"provider": "test"}

        monkeypatch.setattr(app_module, "create_service", fake_create_service)
        return TestClient(app_module.create_app()), calls

    return _client


def test_health(client_for):
    client, _ = client_for(ScriptedBackend())
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_returns_camel_case_verdict(client_for):
    backend = ScriptedBackend(
        final_turn(
            isPhishing=True,
            indicators=["Lookalike domain"],
            safetyScore=0.2,
            explanation="Sender imitates a bank.",
            threatLevel="Dangerous",
            riskFactors=["Credential theft"],
        )
    )
    client, calls = client_for(backend)
    response = client.post(
        "/analyze",
        json={"text": "Verify your account", "emailDataUri": data_uri("Subject: hi", "message/rfc822"), "model": " "},
    )
    assert response.status_code == 200
    assert response.json() == {
        "isPhishing": True,
        "indicators": ["Lookalike domain"],
        "safetyScore": 0.2,
        "explanation": "Sender imitates a bank.",
        "threatLevel": "Dangerous",
        "riskFactors": ["Credential theft"],
    }
    assert calls == [{"model_override": None}]


def test_analyze_empty_request(client_for):
    client, _ = client_for(ScriptedBackend())
    response = client.post("/analyze", json={})
    assert response.status_code == 200
    assert response.json()["threatLevel"] == "Safe"
    assert response.json()["explanation"] == "No content provided for analysis."


def test_analyze_rejects_malformed_payload(client_for):
    backend = ScriptedBackend()
    client, _ = client_for(backend)
    response = client.post("/analyze", json={"text": "hi", "imageDataUri": "not-a-data-uri"})
    assert response.status_code == 422
    assert "data URI" in response.json()["detail"]
    assert backend.calls == []
