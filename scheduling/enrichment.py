"""
Side effects that run after a booking is committed.

None of them can undo or block the booking: failures are logged and reported
next to the booking instead.
"""
import logging

from sqlalchemy.orm import Session

from helper import from_utc_naive
from models import BookingDB, HostDB
from scheduling import gmail, google_calendar
from scheduling.errors import CollaboratorFailure

logger = logging.getLogger(__name__)


def attach_calendar_event(db: Session, host: HostDB, booking: BookingDB) -> dict:
    """
    Creates the calendar event for a committed booking and stores its id and Meet link.

    Returns:
        dict: ``{"success": True, "event_url": ...}`` or ``{"success": False, "error": ...}``.
    """
    try:
        event = google_calendar.create_calendar_event(
            host_email=host.email,
            guest_email=booking.guest_email,
            start=from_utc_naive(booking.start),
            end=from_utc_naive(booking.end),
            summary=f"Meeting with {booking.guest_name}",
            access_token=host.google_access_token,
        )
    except CollaboratorFailure as e:
        logger.warning("Booking %s kept without calendar event: %s", booking.id, e.message)
        return {"success": False, "error": e.message}
    except Exception as e:
        logger.exception("Calendar event for booking %s failed unexpectedly", booking.id)
        return {"success": False, "error": f"Calendar event creation failed: {e}"}

    try:
        booking.calendar_event_id = event["event_id"]
        booking.meet_link = event["meet_link"]
        db.commit()
        db.refresh(booking)
    except Exception as e:
        db.rollback()
        logger.error("Could not store calendar event on booking %s: %s", booking.id, e)
        return {"success": False, "error": str(e)}
    return {"success": True, "event_url": event.get("event_url")}


def send_booking_notifications(host_name: str, host_email: str, guest_name: str, guest_email: str,
                               start_text: str, meet_link: str = None):
    """Emails host and guest. Fire-and-forget: each failure is logged and skipped."""
    link = meet_link or "not available"
    messages = [
        (host_email, "New Booking Received",
         f"You have a new booking with {guest_name} ({guest_email}) at {start_text}. Meet link: {link}"),
        (guest_email, "Booking Confirmed",
         f"Your meeting with {host_name} is confirmed for {start_text}. Meet link: {link}"),
    ]
    for to, subject, body in messages:
        try:
            gmail.send_notification(to, subject, body)
        except CollaboratorFailure as e:
            logger.error("Notification '%s' to %s failed: %s", subject, to, e.message)
        except Exception:
            logger.exception("Notification '%s' to %s failed", subject, to)
