from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, List, Optional

from helper import at_local, from_utc_naive, intervals_overlap, weekday_name
from models import Offer


def offerable_slots(slots: Iterable, on_date: date, bookings: Iterable, *, tz: tzinfo = timezone.utc,
                    now: Optional[datetime] = None, slot_type: Optional[str] = None) -> List[Offer]:
    """
    Works out which published slots a guest can still book on ``on_date``.

    Slots are kept when their weekday matches the date (and their type matches
    ``slot_type``, if given), then placed on the date in the host's zone ``tz``.
    Candidates that overlap any booking, or that do not start strictly after
    ``now``, are dropped. Source order is preserved.

    Reads only; calling it repeatedly with the same inputs gives the same offers.

    Args:
        slots: published slots with ``day``, ``start``, ``end``, ``slot_type`` and ``slot_id``.
        on_date: the calendar date being viewed.
        bookings: existing bookings of the host, ``start``/``end`` as naive UTC or aware datetimes.
        tz: the host's timezone.
        now: evaluation instant, defaults to the current time.
        slot_type: optional slot type filter.

    Returns:
        list[Offer]: the offerable slots for the date.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    day = weekday_name(on_date)
    taken = [(from_utc_naive(b.start), from_utc_naive(b.end)) for b in bookings]

    offers = []
    for slot in slots:
        if slot.day != day:
            continue
        if slot_type is not None and slot.slot_type != slot_type:
            continue

        start_at = at_local(on_date, slot.start, tz)
        end_at = at_local(on_date, slot.end, tz)
        if any(intervals_overlap(start_at, end_at, b_start, b_end) for b_start, b_end in taken):
            continue
        if start_at <= now:
            continue

        offers.append(Offer(
            slot_id=slot.slot_id,
            slot_type=slot.slot_type,
            day=slot.day,
            start=slot.start,
            end=slot.end,
            start_at=start_at,
            end_at=end_at,
        ))
    return offers
