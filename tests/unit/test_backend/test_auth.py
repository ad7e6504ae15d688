"""
Unit tests for API authentication.
"""

import base64
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from backend.auth import AUTH_REQUIRED_MESSAGE, AuthenticatedUser, require_user
from backend.dependencies import get_config
from jeeves.core.config import Config


USERS = [
    {"username": "admin", "password": "secret", "role": "admin"},
    {"username": "viewer", "password": "look", "role": "viewer"},
]


@pytest.fixture
def config(tmp_path):
    config = Config(tmp_path / "config", load_env=False)
    config.set("users", USERS, section="authentication")
    return config


@pytest.fixture
def auth_app(config):
    """Minimal app exposing the auth dependency."""
    app = FastAPI()

    @app.get("/me")
    async def me(user: AuthenticatedUser = Depends(require_user)):
        return {"username": user.username, "role": user.role}

    app.dependency_overrides[get_config] = lambda: config
    return app


@pytest.fixture
def client(auth_app):
    return TestClient(auth_app)


class TestRequireUser:
    def test_basic_auth_header(self, client):
        response = client.get("/me", auth=("admin", "secret"))
        assert response.status_code == 200
        assert response.json() == {"username": "admin", "role": "admin"}

    def test_query_parameters(self, client):
        response = client.get("/me", params={"username": "viewer", "password": "look"})
        assert response.status_code == 200
        assert response.json()["role"] == "viewer"

    def test_query_parameters_take_precedence(self, client):
        response = client.get(
            "/me",
            params={"username": "viewer", "password": "look"},
            auth=("admin", "secret"),
        )
        assert response.json()["username"] == "viewer"

    def test_password_with_colon(self, client, config):
        config.set("users", [{"username": "x", "password": "a:b", "role": "user"}],
                   section="authentication")
        token = base64.b64encode(b"x:a:b").decode()
        response = client.get("/me", headers={"Authorization": f"Basic {token}"})
        assert response.status_code == 200

    def test_missing_credentials(self, client):
        response = client.get("/me")
        assert response.status_code == 401
        assert response.json()["detail"] == AUTH_REQUIRED_MESSAGE
        assert response.json()["detail"].startswith("Authentication required")

    def test_username_without_password(self, client):
        response = client.get("/me", params={"username": "admin"})
        assert response.status_code == 401
        assert response.json()["detail"] == AUTH_REQUIRED_MESSAGE

    def test_wrong_password(self, client):
        response = client.get("/me", auth=("admin", "nope"))
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_no_users_configured(self, client, config):
        config.set("users", [], section="authentication")
        response = client.get("/me", auth=("admin", "secret"))
        assert response.status_code == 500

    def test_missing_credentials_checked_before_configuration(self, client, config):
        config.set("users", [], section="authentication")
        response = client.get("/me")
        assert response.status_code == 401


class TestAppointmentsRequireAuth:
    def test_routes_reject_anonymous(self, config):
        from backend.main import app
        from backend.dependencies import get_calendar_agent
        from jeeves.agents import CalendarAgent
        from jeeves.core.store import InMemoryCalendarStore

        app.dependency_overrides[get_config] = lambda: config
        app.dependency_overrides[get_calendar_agent] = lambda: CalendarAgent(
            InMemoryCalendarStore(), config
        )
        try:
            client = TestClient(app)
            assert client.get("/api/appointments").status_code == 401
            assert client.post("/api/appointments/parse", json={"input": "x"}).status_code == 401
            assert client.delete("/api/appointments/abc").status_code == 401
        finally:
            app.dependency_overrides.clear()
