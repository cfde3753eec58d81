"""Tests for the HTTP trigger endpoint."""

import pytest
from fastapi.testclient import TestClient

from antnews.config import Config, ConfigModel
from antnews.pipeline import OrchestrationResult
from antnews.server import create_app


@pytest.fixture
def runs():
    return []


@pytest.fixture
def client(runs):
    async def runner() -> OrchestrationResult:
        runs.append(1)
        return OrchestrationResult(success=True, articles_added=2, errors=["Failed to scrape article 3: Timeout"])

    app = create_app(Config.from_model(ConfigModel()), runner=runner)
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_token_is_rejected(client, runs, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    response = client.post("/trigger-fetch")

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized"}
    assert runs == []


def test_wrong_token_is_rejected(client, runs, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    response = client.post("/trigger-fetch", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert runs == []


def test_no_configured_secret_rejects_everything(client, runs, monkeypatch):
    monkeypatch.delenv("CRON_SECRET", raising=False)

    response = client.post("/trigger-fetch", headers={"Authorization": "Bearer "})

    assert response.status_code == 401
    assert runs == []


def test_authorized_call_returns_degraded_result(client, runs, monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    response = client.post("/trigger-fetch", headers={"Authorization": "Bearer s3cret"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["articles_added"] == 2
    assert body["errors"] == ["Failed to scrape article 3: Timeout"]
    assert runs == [1]


def test_runner_exception_is_500(monkeypatch):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    async def runner():
        raise RuntimeError("boom")

    app = create_app(Config.from_model(ConfigModel()), runner=runner)
    response = TestClient(app).post("/trigger-fetch", headers={"Authorization": "Bearer s3cret"})

    assert response.status_code == 500
