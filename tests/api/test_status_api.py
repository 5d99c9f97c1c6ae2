from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from search_api_typesense.api.models.status import SettingsInfo
from search_api_typesense.core.factory import create_app
from search_api_typesense.services.backend import TypesenseBackend, get_typesense_backend


@pytest.fixture
def mock_backend():
    backend = MagicMock(spec=TypesenseBackend)
    backend.is_available.return_value = True
    backend.view_settings.return_value = [
        SettingsInfo(label="Typesense collection 1: name", info="books"),
        SettingsInfo(label="Typesense server health", info="OK", status="ok"),
        SettingsInfo(label="Typesense server metrics", items=["System memory used bytes: 1.5 KB"]),
    ]
    return backend


@pytest.fixture
def client(mock_backend, monkeypatch):
    # The startup hook talks to the configured server
    monkeypatch.setattr("search_api_typesense.services.backend._backend", mock_backend)
    mock_backend.connect.return_value = False

    app = create_app()
    app.dependency_overrides[get_typesense_backend] = lambda: mock_backend

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_health(client, mock_backend):
    response = client.get("/api/v1/typesense/health")

    assert response.status_code == 200
    assert response.json()["available"] is True


def test_status(client):
    response = client.get("/api/v1/typesense/status")

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is True
    assert data["info"][0] == {"label": "Typesense collection 1: name", "info": "books", "items": [], "status": None}
    assert data["info"][2]["items"] == ["System memory used bytes: 1.5 KB"]
    assert isinstance(data["timestamp"], int)


def test_status_when_unavailable(client, mock_backend):
    mock_backend.is_available.return_value = False
    mock_backend.view_settings.return_value = [
        SettingsInfo(label="Typesense server", info="Not configured", status="error")
    ]

    response = client.get("/api/v1/typesense/status")

    assert response.status_code == 200
    assert response.json()["available"] is False


def test_startup_connects_backend(client, mock_backend):
    mock_backend.connect.assert_called_once()
    mock_backend.sync_indexes_and_collections.assert_not_called()
