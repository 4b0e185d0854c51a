import re
from datetime import date, datetime, time, timezone, tzinfo

TIME_FORMAT = "%H:%M"
_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# Same order as date.weekday(); fixed names, not locale dependent
_WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_time(value: str) -> time:
    """
    Parses a 24h wall-clock string like "09:30".

    Raises:
        ValueError: if the value is not in HH:MM form.
    """
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    return datetime.strptime(value, TIME_FORMAT).time()


def to_minutes(value: str) -> int:
    t = parse_time(value)
    return t.hour * 60 + t.minute


def from_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def weekday_name(day: date) -> str:
    return _WEEKDAY_NAMES[day.weekday()]


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """
    Half-open overlap of [a_start, a_end) and [b_start, b_end).

    Touching intervals (a_end == b_start) do not overlap.
    """
    return a_start < b_end and a_end > b_start


def at_local(day: date, wall_clock: str, tz: tzinfo) -> datetime:
    # Built directly in the host's zone, never via UTC, so the calendar day cannot drift
    return datetime.combine(day, parse_time(wall_clock), tzinfo=tz)


def localize(value: datetime, tz: tzinfo) -> datetime:
    """Attaches *tz* to naive datetimes, leaves aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def to_utc_naive(value: datetime) -> datetime:
    # Database columns hold naive UTC
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
