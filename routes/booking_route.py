import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from database import get_db
from helper import from_utc_naive
from models import Availability, Booking, BookingCreate, PublicHost
from routes.websocket import broadcast_booking_event
from scheduling.arbiter import BookingArbiter, bookings_between, list_bookings, upcoming_bookings
from scheduling.enrichment import attach_calendar_event, send_booking_notifications
from scheduling.errors import SchedulingError
from scheduling.hosts import get_host
from scheduling.inventory import AvailabilityInventory
from scheduling.resolver import offerable_slots

logger = logging.getLogger(__name__)

booking_router = APIRouter(
    prefix="/booking",
    tags=["Booking"]
)

def _serialize(booking):
    return jsonable_encoder(Booking.model_validate(booking))

@booking_router.get("/availability/{username}", tags=["Booking"])
def get_host_availability(username: str, db: Session = Depends(get_db)):
    """
    Public view of a host: profile and published slots.
    """
    host = get_host(db, username)
    slots = AvailabilityInventory(db).list_all(host.id)
    return {
        "host": jsonable_encoder(PublicHost.model_validate(host)),
        "slots": [jsonable_encoder(Availability.model_validate(slot)) for slot in slots],
    }

@booking_router.get("/slot-types/{username}", tags=["Booking"])
def get_host_slot_types(username: str, db: Session = Depends(get_db)):
    host = get_host(db, username)
    return {
        "host": jsonable_encoder(PublicHost.model_validate(host)),
        "slot_types": AvailabilityInventory(db).slot_types(host.id),
    }

@booking_router.get("/offers/{username}", tags=["Booking"])
def get_offers_for_date(username: str, day: date = Query(..., alias="date"), slot_type: Optional[str] = Query(None),
                        db: Session = Depends(get_db)):
    """
    Retrieves the slots a guest can still book on a date.

    Args:
        day (date): The calendar date, YYYY-MM-DD, passed as ``date``.
        slot_type (str, optional): Only offer slots of this type.

    Returns:
        dict: The date and its offerable slots in the host's timezone.
    """
    host = get_host(db, username)
    tz = ZoneInfo(host.timezone or "UTC")
    day_start = datetime.combine(day, datetime.min.time(), tzinfo=tz)
    bookings = bookings_between(db, host.id, day_start, day_start + timedelta(days=1))
    offers = offerable_slots(
        AvailabilityInventory(db).list_all(host.id),
        day,
        bookings,
        tz=tz,
        now=datetime.now(timezone.utc),
        slot_type=slot_type,
    )
    return {"date": day.isoformat(), "timezone": host.timezone, "offers": jsonable_encoder(offers)}

@booking_router.get("/host/{username}/bookings", tags=["Booking"])
def get_host_bookings(username: str, db: Session = Depends(get_db)):
    host = get_host(db, username)
    return [_serialize(booking) for booking in list_bookings(db, host.id)]

@booking_router.get("/host/{username}/bookings/upcoming", tags=["Booking"])
def get_upcoming_host_bookings(username: str, db: Session = Depends(get_db)):
    """
    Host dashboard feed: bookings that have not ended yet, earliest first.
    """
    host = get_host(db, username)
    return [_serialize(booking) for booking in upcoming_bookings(db, host.id)]

@booking_router.post("/book/{username}", tags=["Booking"])
def create_booking(username: str, request: BookingCreate, background_tasks: BackgroundTasks,
                   db: Session = Depends(get_db)):
    """
    Books a time with the host.

    The booking is committed first. Calendar event creation and emails follow and
    never undo it; a calendar failure is reported in ``calendar``.

    Args:
        request (BookingCreate): guest name, guest email, start and end.

    Returns:
        dict: success flag, the booking and the calendar enrichment status.
    """
    try:
        host = get_host(db, username)
        booking = BookingArbiter(db).try_book(
            host.id, request.guest_name, request.guest_email, request.start, request.end
        )
    except SchedulingError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Booking for host %s failed", username)
        raise HTTPException(status_code=500, detail=str(e))

    calendar = attach_calendar_event(db, host, booking)
    clean_booking = _serialize(booking)

    local_start = from_utc_naive(booking.start).astimezone(ZoneInfo(host.timezone or "UTC"))
    background_tasks.add_task(
        send_booking_notifications,
        host.name,
        host.email,
        booking.guest_name,
        booking.guest_email,
        local_start.strftime("%A, %d %B %Y %H:%M %Z"),
        booking.meet_link,
    )
    background_tasks.add_task(broadcast_booking_event, "BOOKING_CREATED", clean_booking)

    return {
        "success": True,
        "booking": clean_booking,
        "calendar": calendar,
    }
