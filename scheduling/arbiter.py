import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from helper import localize, to_utc_naive
from models import BookingDB, HostDB
from scheduling.errors import ConflictError, NotFoundError, ValidationError
from scheduling.locks import KeyedLocks, booking_locks

logger = logging.getLogger(__name__)


class BookingArbiter:
    """
    Single point where bookings are committed.

    The overlap check and the insert run inside one critical section per host:
    an in-process lock keyed by host id, plus ``SELECT ... FOR UPDATE`` on the
    host row where the database supports it. The check always reads live
    bookings, never a list the guest was shown earlier.
    """

    def __init__(self, db: Session, locks: KeyedLocks = None):
        self.db = db
        self.locks = locks or booking_locks

    def try_book(self, host_id: int, guest_name: Optional[str], guest_email: Optional[str],
                 start: Optional[datetime], end: Optional[datetime]) -> BookingDB:
        """
        Commits a booking of ``[start, end)`` for the host, or refuses it.

        Naive ``start``/``end`` are taken to be in the host's timezone.

        Raises:
            ValidationError: a required field is missing, or start is not before end.
            NotFoundError: the host does not exist.
            ConflictError: the interval overlaps an existing booking. Touching
                endpoints are not an overlap.
        """
        guest_name = (guest_name or "").strip()
        if not guest_name or not guest_email or not start or not end:
            raise ValidationError("Missing fields")

        with self.locks.hold(host_id):
            try:
                host = self.db.query(HostDB).filter(HostDB.id == host_id).with_for_update().first()
                if not host:
                    raise NotFoundError("Host not found")

                tz = ZoneInfo(host.timezone or "UTC")
                start_utc = to_utc_naive(localize(start, tz))
                end_utc = to_utc_naive(localize(end, tz))
                if start_utc >= end_utc:
                    raise ValidationError("Start must be before end")

                overlap = self.db.query(BookingDB).filter(
                    BookingDB.host_id == host_id,
                    BookingDB.start < end_utc,
                    BookingDB.end > start_utc,
                ).first()
                if overlap:
                    logger.info("Rejected booking for host %s: %s - %s overlaps booking %s",
                                host_id, start_utc, end_utc, overlap.id)
                    raise ConflictError("Time slot already booked")

                booking = BookingDB(
                    host_id=host_id,
                    guest_name=guest_name,
                    guest_email=str(guest_email),
                    start=start_utc,
                    end=end_utc,
                )
                self.db.add(booking)
                self.db.commit()
                self.db.refresh(booking)
            except Exception:
                self.db.rollback()
                raise

        logger.info("Booked %s - %s UTC for host %s (booking %s)", start_utc, end_utc, host_id, booking.id)
        return booking


def list_bookings(db: Session, host_id: int):
    return db.query(BookingDB).filter(BookingDB.host_id == host_id).order_by(BookingDB.start.asc()).all()


def upcoming_bookings(db: Session, host_id: int, now: datetime = None):
    """Bookings of the host that have not ended by ``now`` (default: current time), earliest first."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = to_utc_naive(now)
    return db.query(BookingDB).filter(
        BookingDB.host_id == host_id,
        BookingDB.end >= now,
    ).order_by(BookingDB.start.asc()).all()


def bookings_between(db: Session, host_id: int, start: datetime, end: datetime):
    """Bookings of the host overlapping ``[start, end)``; aware bounds are converted to UTC."""
    if start.tzinfo is not None:
        start = to_utc_naive(start)
    if end.tzinfo is not None:
        end = to_utc_naive(end)
    return db.query(BookingDB).filter(
        BookingDB.host_id == host_id,
        BookingDB.start < end,
        BookingDB.end > start,
    ).order_by(BookingDB.start.asc()).all()
