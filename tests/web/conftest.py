"""Fixtures for HTTP tests against the FastAPI app."""

import pytest
from fastapi.testclient import TestClient

from soundmap.app import App
from soundmap.web.server import create_fastapi_app


@pytest.fixture
def client(core, config):
    with TestClient(create_fastapi_app(App(config, core=core), config)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account; the client keeps its session cookie."""

    def _register(username: str = "alice", password: str = "password1"):
        response = client.post(
            "/register", data={"email": f"{username}@x.com", "username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        return response

    return _register
