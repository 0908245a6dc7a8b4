"""Unit tests for the container workload."""

import pytest
from fastapi.testclient import TestClient

from backend.main import APP_NAME, app


@pytest.fixture
def client():
    return TestClient(app)


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": APP_NAME}


def test_info_reports_region(client, monkeypatch):
    monkeypatch.setenv("AWS_REGION", "ap-northeast-1")
    response = client.get("/api/info")
    assert response.status_code == 200
    body = response.json()
    assert body["service"] == APP_NAME
    assert body["region"] == "ap-northeast-1"
    assert body["hostname"]


def test_info_without_region(client, monkeypatch):
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    response = client.get("/api/info")
    assert response.json()["region"] is None


def test_unknown_path(client):
    assert client.get("/missing").status_code == 404


def test_info_ignores_default_region(client, monkeypatch):
    """Only the task-provided AWS_REGION is reported."""
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    response = client.get("/api/info")
    assert response.json()["region"] is None
