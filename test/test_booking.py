from datetime import date, datetime, timedelta

import httplib2
import pytest
from fastapi.testclient import TestClient
from google.auth.exceptions import RefreshError

import config
from app import app
from scheduling import gmail, google_calendar
from scheduling.enrichment import send_booking_notifications
from scheduling.errors import CollaboratorFailure

client = TestClient(app)

def upcoming_monday(weeks_ahead=1):
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) % 7 + 7 * weeks_ahead)

def iso(day, hh_mm):
    return f"{day.isoformat()}T{hh_mm}:00"

def booking_payload(day, start="10:00", end="10:30", **overrides):
    payload = {
        "guest_name": "Ann Guest",
        "guest_email": "ann@example.com",
        "start": iso(day, start),
        "end": iso(day, end),
    }
    payload.update(overrides)
    return payload

@pytest.fixture
def monday():
    return upcoming_monday()

@pytest.fixture(autouse=True)
def jane():
    response = client.post("/hosts", json={"name": "jane", "email": "jane@example.com", "avatar": "https://example.com/jane.png"})
    assert response.status_code == 200

@pytest.fixture
def sent_emails(monkeypatch):
    sent = []
    monkeypatch.setattr(gmail, "send_notification", lambda to, subject, body: sent.append((to, subject, body)))
    return sent

# =========================================================
# TEST: POST /booking/book/{username}
# =========================================================
def test_create_booking(monday):
    response = client.post("/booking/book/jane", json=booking_payload(monday))
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["booking"]["guest_name"] == "Ann Guest"
    assert data["booking"]["start"].startswith(iso(monday, "10:00"))
    # no Google token for the host, booking is kept anyway
    assert data["calendar"]["success"] is False

def test_touching_booking_succeeds_and_overlap_conflicts(monday):
    assert client.post("/booking/book/jane", json=booking_payload(monday, "10:00", "10:30")).status_code == 200

    touching = client.post("/booking/book/jane", json=booking_payload(monday, "10:30", "11:00"))
    assert touching.status_code == 200

    overlapping = client.post("/booking/book/jane", json=booking_payload(monday, "10:15", "10:45"))
    assert overlapping.status_code == 409
    assert overlapping.json()["code"] == "CONFLICT"

    assert len(client.get("/booking/host/jane/bookings").json()) == 2

@pytest.mark.parametrize("missing", ["guest_name", "guest_email", "start", "end"])
def test_create_booking_missing_field(monday, missing):
    payload = booking_payload(monday)
    del payload[missing]

    response = client.post("/booking/book/jane", json=payload)
    assert response.status_code == 400
    assert response.json()["message"] == "Missing fields"

def test_create_booking_unknown_host(monday):
    response = client.post("/booking/book/nobody", json=booking_payload(monday))
    assert response.status_code == 404

def test_create_booking_end_before_start(monday):
    response = client.post("/booking/book/jane", json=booking_payload(monday, "11:00", "10:00"))
    assert response.status_code == 400

def test_calendar_event_is_attached(monday, monkeypatch):
    calls = []

    def fake_event(**kwargs):
        calls.append(kwargs)
        return {"event_id": "evt-1", "meet_link": "https://meet.google.com/abc-defg-hij", "event_url": "https://calendar/evt-1"}

    monkeypatch.setattr(google_calendar, "create_calendar_event", fake_event)

    response = client.post("/booking/book/jane", json=booking_payload(monday))
    data = response.json()

    assert data["calendar"] == {"success": True, "event_url": "https://calendar/evt-1"}
    assert data["booking"]["calendar_event_id"] == "evt-1"
    assert data["booking"]["meet_link"] == "https://meet.google.com/abc-defg-hij"
    assert calls[0]["summary"] == "Meeting with Ann Guest"
    assert calls[0]["host_email"] == "jane@example.com"

def test_calendar_failure_keeps_booking(monday, monkeypatch):
    def failing_event(**kwargs):
        raise CollaboratorFailure("Calendar event creation failed: 500")

    monkeypatch.setattr(google_calendar, "create_calendar_event", failing_event)

    response = client.post("/booking/book/jane", json=booking_payload(monday))
    assert response.status_code == 200
    assert response.json()["calendar"] == {"success": False, "error": "Calendar event creation failed: 500"}
    assert len(client.get("/booking/host/jane/bookings").json()) == 1

def test_notifications_go_to_host_and_guest(monday, sent_emails):
    client.post("/booking/book/jane", json=booking_payload(monday))

    assert [(to, subject) for to, subject, _ in sent_emails] == [
        ("jane@example.com", "New Booking Received"),
        ("ann@example.com", "Booking Confirmed"),
    ]
    assert "Ann Guest" in sent_emails[0][2]

def test_email_failure_keeps_booking(monday, monkeypatch):
    def failing_send(to, subject, body):
        raise CollaboratorFailure("Email sending failed")

    monkeypatch.setattr(gmail, "send_notification", failing_send)

    response = client.post("/booking/book/jane", json=booking_payload(monday))
    assert response.status_code == 200
    assert len(client.get("/booking/host/jane/bookings").json()) == 1

def test_expired_calendar_token_keeps_booking(monday, monkeypatch):
    client.post("/hosts", json={"name": "kim", "email": "kim@example.com", "google_access_token": "expired"})

    def refresh_fails(access_token):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")

    monkeypatch.setattr(google_calendar, "_authorize", refresh_fails)

    response = client.post("/booking/book/kim", json=booking_payload(monday))
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["calendar"]["success"] is False
    assert data["calendar"]["error"].startswith("Calendar event creation failed")
    assert len(client.get("/booking/host/kim/bookings").json()) == 1

def test_unexpected_calendar_error_keeps_booking(monday, monkeypatch):
    def broken_event(**kwargs):
        raise RuntimeError("socket closed")

    monkeypatch.setattr(google_calendar, "create_calendar_event", broken_event)

    response = client.post("/booking/book/jane", json=booking_payload(monday))
    assert response.status_code == 200
    assert response.json()["calendar"]["success"] is False
    assert len(client.get("/booking/host/jane/bookings").json()) == 1

def test_blank_guest_name_is_rejected(monday):
    response = client.post("/booking/book/jane", json=booking_payload(monday, guest_name="   "))
    assert response.status_code == 400
    assert response.json()["message"] == "Missing fields"
    assert client.get("/booking/host/jane/bookings").json() == []

def test_unreachable_mail_server_is_a_collaborator_failure(monkeypatch):
    monkeypatch.setattr(config, "SERVICE_ACCOUNT_FILE", "service-account.json")
    monkeypatch.setattr(config, "GMAIL_SENDER", "bookings@example.com")
    attempts = []

    def unreachable():
        attempts.append(1)
        raise httplib2.ServerNotFoundError("Unable to find the server at gmail.googleapis.com")

    monkeypatch.setattr(gmail, "_authorize", unreachable)

    with pytest.raises(CollaboratorFailure):
        gmail.send_notification("ann@example.com", "Booking Confirmed", "See you")

    # one failing email does not stop the next one
    send_booking_notifications("jane", "jane@example.com", "Ann Guest", "ann@example.com", "Monday 10:00")
    assert len(attempts) == 3

def test_unexpected_email_error_still_sends_guest_email(monkeypatch):
    sent = []

    def flaky_send(to, subject, body):
        if to == "jane@example.com":
            raise RuntimeError("connection reset")
        sent.append(to)

    monkeypatch.setattr(gmail, "send_notification", flaky_send)

    send_booking_notifications("jane", "jane@example.com", "Ann Guest", "ann@example.com", "Monday 10:00")
    assert sent == ["ann@example.com"]

# =========================================================
# TEST: GET /booking/offers/{username}
# =========================================================
def publish_monday_afternoon():
    client.post("/availability/jane/bulk", json={
        "days": ["Monday"],
        "time_ranges": [{"start": "14:00", "end": "15:00"}],
        "interval": 30,
        "slot_type": "Consultation",
    })

def test_offers_exclude_booked_window(monday):
    publish_monday_afternoon()
    client.post("/booking/book/jane", json=booking_payload(monday, "14:00", "14:30"))

    response = client.get("/booking/offers/jane", params={"date": monday.isoformat()})
    assert response.status_code == 200
    assert [(o["start"], o["end"]) for o in response.json()["offers"]] == [("14:30", "15:00")]

    following = client.get("/booking/offers/jane", params={"date": (monday + timedelta(days=7)).isoformat()})
    assert [(o["start"], o["end"]) for o in following.json()["offers"]] == [("14:00", "14:30"), ("14:30", "15:00")]

def test_offers_only_on_matching_weekday(monday):
    publish_monday_afternoon()

    response = client.get("/booking/offers/jane", params={"date": (monday + timedelta(days=1)).isoformat()})
    assert response.json()["offers"] == []

def test_offers_in_the_past_are_not_offered(monday):
    publish_monday_afternoon()

    response = client.get("/booking/offers/jane", params={"date": (monday - timedelta(days=14)).isoformat()})
    assert response.json()["offers"] == []

def test_offers_slot_type_filter(monday):
    publish_monday_afternoon()

    response = client.get("/booking/offers/jane", params={"date": monday.isoformat(), "slot_type": "Interview"})
    assert response.json()["offers"] == []

def test_offers_require_date():
    response = client.get("/booking/offers/jane")
    assert response.status_code == 400

# =========================================================
# TEST: public host views
# =========================================================
def test_public_host_availability():
    publish_monday_afternoon()

    response = client.get("/booking/availability/jane")
    assert response.status_code == 200

    data = response.json()
    assert data["host"] == {"name": "jane", "avatar": "https://example.com/jane.png", "timezone": "UTC"}
    assert len(data["slots"]) == 2
    assert "email" not in data["host"]

def test_public_host_availability_unknown_host():
    response = client.get("/booking/availability/nobody")
    assert response.status_code == 404

def test_host_slot_types():
    publish_monday_afternoon()

    response = client.get("/booking/slot-types/jane")
    assert response.json()["slot_types"] == [
        {"slot_type": "Consultation", "name": "consultation", "duration": 30, "slot_count": 2},
    ]

def test_host_bookings_are_listed_in_order(monday):
    client.post("/booking/book/jane", json=booking_payload(monday, "15:00", "15:30"))
    client.post("/booking/book/jane", json=booking_payload(monday, "09:00", "09:30"))

    bookings = client.get("/booking/host/jane/bookings").json()

    assert [datetime.fromisoformat(b["start"]).hour for b in bookings] == [9, 15]

def test_upcoming_host_bookings(monday):
    client.post("/booking/book/jane", json=booking_payload(monday, "15:00", "15:30"))
    client.post("/booking/book/jane", json=booking_payload(monday, "09:00", "09:30"))
    client.post("/booking/book/jane", json=booking_payload(monday - timedelta(days=14), "09:00", "09:30"))

    response = client.get("/booking/host/jane/bookings/upcoming")
    assert response.status_code == 200

    bookings = response.json()
    assert [datetime.fromisoformat(b["start"]).date() for b in bookings] == [monday, monday]
    assert [datetime.fromisoformat(b["start"]).hour for b in bookings] == [9, 15]
    assert len(client.get("/booking/host/jane/bookings").json()) == 3

def test_upcoming_host_bookings_unknown_host():
    response = client.get("/booking/host/nobody/bookings/upcoming")
    assert response.status_code == 404
