"""
Unit tests for the appointments API routes.
Runs the FastAPI app with the config and calendar agent overridden, so no
files outside tmp_path are touched and the lifespan (bot startup) is not run.
"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch
from zoneinfo import ZoneInfo

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from fastapi.testclient import TestClient

from backend.main import app
from backend.dependencies import get_calendar_agent, get_config
from jeeves.agents import CalendarAgent
from jeeves.core.config import Config
from jeeves.core.store import InMemoryCalendarStore, StoreError


AUTH = ("admin", "secret")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def config(tmp_path):
    config = Config(tmp_path / "config", load_env=False)
    config.set("users", [{"username": "admin", "password": "secret", "role": "admin"}],
               section="authentication")
    return config


@pytest.fixture
def store():
    return InMemoryCalendarStore()


@pytest.fixture
def client(config, store):
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_calendar_agent] = lambda: CalendarAgent(store, config)
    yield TestClient(app)
    app.dependency_overrides.clear()


def parse(client, text):
    return client.post("/api/appointments/parse", json={"input": text}, auth=AUTH)


# =============================================================================
# Service info
# =============================================================================

class TestServiceInfo:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "JeevesBot API"
        assert response.json()["endpoints"]["appointments"] == "/api/appointments"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["telegram"] == "disabled"


# =============================================================================
# Appointments
# =============================================================================

class TestCreateAppointment:
    def test_create(self, client, store):
        response = client.post("/api/appointments", auth=AUTH, json={
            "date": "21-11-2025",
            "time": "14:30",
            "contactName": "Peter van der Meer",
            "category": "Ghostin 06",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["appointment"]["contactName"] == "Peter van der Meer"
        assert store.count() == 1

    def test_non_canonical_fields_normalized(self, client):
        response = client.post("/api/appointments", auth=AUTH, json={
            "date": "24.12.25", "time": "9.30", "contactName": "Jane", "category": "Call",
        })

        assert response.status_code == 201
        appointment = response.json()["data"]["appointment"]
        assert (appointment["date"], appointment["time"]) == ("24-12-2025", "09:30")

    def test_invalid_date_rejected(self, client, store):
        response = client.post("/api/appointments", auth=AUTH, json={
            "date": "31-02-2025", "time": "10:00", "contactName": "Jane", "category": "Call",
        })

        assert response.status_code == 400
        assert "does not exist in the calendar" in response.json()["detail"]
        assert store.count() == 0

    def test_missing_field_is_validation_error(self, client):
        response = client.post("/api/appointments", auth=AUTH, json={
            "date": "21-11-2025", "time": "10:00", "category": "Call",
        })
        assert response.status_code == 422

    def test_store_failure_is_server_error(self, client, config):
        failing_store = InMemoryCalendarStore()
        failing_store._save = MagicMock(side_effect=StoreError("disk full"))
        app.dependency_overrides[get_calendar_agent] = lambda: CalendarAgent(failing_store, config)

        response = client.post("/api/appointments", auth=AUTH, json={
            "date": "21-11-2025", "time": "10:00", "contactName": "Jane", "category": "Call",
        })

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to add appointment. Please try again."


class TestListAppointments:
    def test_list_chronological_with_total(self, client):
        for day, name in [("01-12-2025", "Later"), ("21-11-2025", "Sooner")]:
            client.post("/api/appointments", auth=AUTH, json={
                "date": day, "time": "09:00", "contactName": name, "category": "Call",
            })

        response = client.get("/api/appointments", auth=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [a["contactName"] for a in body["appointments"]] == ["Sooner", "Later"]
        assert set(body["appointments"][0]) == {
            "id", "date", "time", "contactName", "category", "createdAt",
        }

    def test_empty_list(self, client):
        response = client.get("/api/appointments", auth=AUTH)
        assert response.json() == {"appointments": [], "total": 0}

    def test_upcoming(self, client):
        today = datetime.now(ZoneInfo("Europe/Amsterdam")).date()
        for offset, name in [(0, "Today"), (30, "Next month")]:
            day = (today + timedelta(days=offset)).strftime("%d-%m-%Y")
            client.post("/api/appointments", auth=AUTH, json={
                "date": day, "time": "12:00", "contactName": name, "category": "Call",
            })

        response = client.get("/api/appointments/upcoming", params={"days": 7}, auth=AUTH)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [a["contactName"] for a in data["appointments"]] == ["Today"]
        assert data["date_range"]["start"] == today.strftime("%d-%m-%Y")

    def test_upcoming_days_validated(self, client):
        response = client.get("/api/appointments/upcoming", params={"days": 0}, auth=AUTH)
        assert response.status_code == 422


class TestDeleteAppointment:
    def test_delete_by_id(self, client, store):
        created = client.post("/api/appointments", auth=AUTH, json={
            "date": "21-11-2025", "time": "10:00", "contactName": "Jane", "category": "Call",
        }).json()["data"]["appointment"]

        response = client.delete(f"/api/appointments/{created['id']}", auth=AUTH)

        assert response.status_code == 200
        assert response.json()["data"]["deleted_appointment"]["id"] == created["id"]
        assert store.count() == 0

    def test_unknown_id(self, client):
        response = client.delete("/api/appointments/does-not-exist", auth=AUTH)
        assert response.status_code == 404
        assert response.json()["detail"] == "Appointment not found"


class TestParseAppointment:
    def test_parse_does_not_store(self, client, store):
        response = parse(client, "24.12.25. 9.30. A. B")

        assert response.status_code == 200
        assert response.json()["data"]["appointment"] == {
            "date": "24-12-2025", "time": "09:30", "contactName": "A", "category": "B",
        }
        assert store.count() == 0

    def test_parse_error(self, client):
        response = parse(client, "21-11-2025. 14:30. Peter")

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Expected 4 parts separated by dots "
            "(DATE. TIME. Contact Name. Category), but received 3."
        )


# =============================================================================
# Telegram webhook
# =============================================================================

class TestTelegramWebhook:
    def test_not_running(self, client):
        response = client.post("/telegram/webhook", json={"update_id": 1})
        assert response.status_code == 503

    def test_update_forwarded(self, client):
        telegram_app = MagicMock()
        telegram_app.process_update = AsyncMock()
        app.state.telegram_app = telegram_app
        try:
            with patch("backend.routers.telegram.Update.de_json", return_value="update") as de_json:
                response = client.post("/telegram/webhook", json={"update_id": 1})
        finally:
            app.state.telegram_app = None

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        de_json.assert_called_once_with({"update_id": 1}, telegram_app.bot)
        telegram_app.process_update.assert_awaited_once_with("update")
