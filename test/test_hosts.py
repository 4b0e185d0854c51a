from fastapi.testclient import TestClient

from app import app

client = TestClient(app)

# =========================================================
# TEST: POST /hosts
# =========================================================
def test_register_host():
    payload = {"name": "jane", "email": "jane@example.com", "timezone": "Europe/Berlin"}

    response = client.post("/hosts", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "jane"
    assert data["timezone"] == "Europe/Berlin"
    assert data["default_meeting_duration"] == 30
    assert data["google_calendar_connected"] is False
    assert "google_access_token" not in data

def test_register_host_with_calendar_token():
    payload = {"name": "jane", "email": "jane@example.com", "google_access_token": "token"}

    response = client.post("/hosts", json=payload)
    assert response.status_code == 200
    assert response.json()["google_calendar_connected"] is True

def test_register_duplicate_host():
    payload = {"name": "jane", "email": "jane@example.com"}
    client.post("/hosts", json=payload)

    response = client.post("/hosts", json=payload)
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"

def test_register_host_unknown_timezone():
    payload = {"name": "jane", "email": "jane@example.com", "timezone": "Mars/Olympus"}

    response = client.post("/hosts", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"

# =========================================================
# TEST: GET /hosts/{username}
# =========================================================
def test_get_host():
    client.post("/hosts", json={"name": "jane", "email": "jane@example.com"})

    response = client.get("/hosts/jane")
    assert response.status_code == 200
    assert response.json()["email"] == "jane@example.com"

def test_get_host_not_found():
    response = client.get("/hosts/nobody")
    assert response.status_code == 404
    assert response.json()["success"] is False
