import logging
from datetime import datetime, timezone
from uuid import uuid4

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from scheduling.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]

DEFAULT_MEET_LINK = "https://meet.google.com/"


def _authorize(access_token: str):
    credentials = Credentials(token=access_token, scopes=SCOPES)
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def _plan_event(host_email: str, guest_email: str, start: datetime, end: datetime, summary: str,
                description: str = "") -> dict:
    return {
        "summary": summary,
        "description": description,
        "start": {"dateTime": start.astimezone(timezone.utc).isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": end.astimezone(timezone.utc).isoformat(), "timeZone": "UTC"},
        "attendees": [{"email": host_email}, {"email": guest_email}],
        "conferenceData": {
            "createRequest": {"requestId": f"meet-{uuid4().hex}", "conferenceSolutionKey": {"type": "hangoutsMeet"}}
        },
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 24 * 60},
                {"method": "popup", "minutes": 10},
            ],
        },
    }


def create_calendar_event(host_email: str, guest_email: str, start: datetime, end: datetime, summary: str,
                          access_token: str = None, description: str = "") -> dict:
    """
    Creates the meeting in the host's primary Google calendar with a Meet conference.

    Args:
        host_email: attendee address of the host.
        guest_email: attendee address of the guest.
        start: aware start of the meeting.
        end: aware end of the meeting.
        summary: event title.
        access_token: the host's Google OAuth access token.

    Returns:
        dict: ``event_id``, ``meet_link`` and ``event_url``.

    Raises:
        CollaboratorFailure: calendar not connected or the API call failed.
    """
    if not access_token:
        raise CollaboratorFailure("Google Calendar not connected for host")

    event = _plan_event(host_email, guest_email, start, end, summary, description)
    try:
        service = _authorize(access_token)
        created = service.events().insert(
            calendarId="primary",
            body=event,
            conferenceDataVersion=1,
            sendUpdates="all",
        ).execute()
    except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
        # expired tokens surface as RefreshError, network trouble as transport errors
        logger.error("Calendar event creation failed: %s", e)
        raise CollaboratorFailure(f"Calendar event creation failed: {e}")

    entry_points = created.get("conferenceData", {}).get("entryPoints", [])
    meet_link = next((ep.get("uri") for ep in entry_points if ep.get("entryPointType") == "video"), None)
    logger.info("Calendar event created: %s", created.get("id"))
    return {
        "event_id": created.get("id"),
        "meet_link": meet_link or DEFAULT_MEET_LINK,
        "event_url": created.get("htmlLink"),
    }
