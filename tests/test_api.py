"""Tests for API endpoints."""

import logging
from collections.abc import Callable
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlsplit

import pytest
from conftest import FakeAsanaClient
from fastapi.testclient import TestClient

from asana_chat.config import Config
from asana_chat.factory import create_app
from asana_chat.oauth.manager import OAuthTokenManager
from asana_chat.oauth.token_store import InMemoryTokenStore


@pytest.fixture
def test_client(
    config: Config,
    token_store: InMemoryTokenStore,
    client_factory: Callable[[str], FakeAsanaClient],
    monkeypatch: pytest.MonkeyPatch,
) -> TestClient:
    """Create test client with injected config, token store and Asana client."""
    monkeypatch.setattr("asana_chat.factory._config", config)
    monkeypatch.setattr("asana_chat.factory._token_store", token_store)
    monkeypatch.setattr("asana_chat.factory._client_factory", client_factory)

    app = create_app()

    return TestClient(app)


def test_health(test_client: TestClient) -> None:
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chat_lists_tasks(test_client: TestClient) -> None:
    """Test POST /api/chat returns the dispatcher reply."""
    response = test_client.post(
        "/api/chat", json={"message": "get project tasks in Launch in pending", "user_id": "u1"}
    )

    assert response.status_code == 200
    reply = response.json()["reply"]
    assert reply.startswith('Found 2 pending tasks in project "Launch":')
    assert "- A (Pending)" in reply


def test_chat_without_token(test_client: TestClient) -> None:
    """Test unknown users (default user id) are asked to connect."""
    response = test_client.post("/api/chat", json={"message": "connect asana"})

    assert response.status_code == 200
    assert response.json()["reply"] == (
        'Please connect your Asana account by typing "connect Asana".'
    )


def test_chat_requires_message(test_client: TestClient) -> None:
    response = test_client.post("/api/chat", json={"user_id": "u1"})

    assert response.status_code == 422


def test_connect_redirects_to_asana(test_client: TestClient) -> None:
    response = test_client.get("/api/asana/connect?user_id=u5", follow_redirects=False)

    assert response.status_code == 307
    location = response.headers["location"]
    assert location.startswith("https://app.asana.com/-/oauth_authorize?")
    assert parse_qs(urlsplit(location).query)["state"] == ["u5"]


def test_callback_success(test_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    handle = AsyncMock(return_value=True)
    monkeypatch.setattr(OAuthTokenManager, "handle_callback", handle)

    response = test_client.get("/api/asana/callback?code=abc&state=u5")

    assert response.status_code == 200
    assert response.json() == {"status": "connected", "user_id": "u5"}
    handle.assert_awaited_once_with("abc", "u5")


def test_callback_failure(
    test_client: TestClient, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(OAuthTokenManager, "handle_callback", AsyncMock(return_value=False))

    with caplog.at_level(logging.ERROR, logger="asana_chat.api.oauth"):
        response = test_client.get("/api/asana/callback?code=bad&state=u5")

    assert response.status_code == 400
    assert "OAuth callback failed for user u5" in caplog.text


def test_callback_requires_code_and_state(test_client: TestClient) -> None:
    response = test_client.get("/api/asana/callback?state=u5")

    assert response.status_code == 422
