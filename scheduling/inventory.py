import logging
from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import DEFAULT_SLOT_TYPE
from helper import intervals_overlap, parse_time, to_minutes
from models import AvailabilityDB, HostDB
from scheduling import generator
from scheduling.errors import ConflictError, ValidationError
from scheduling.locks import KeyedLocks, inventory_locks
from scheduling.slot_id import default_slot_id_factory, slugify

logger = logging.getLogger(__name__)

# (day, start, end, duration)
NewSlot = Tuple[str, str, str, int]


class AvailabilityInventory:
    """
    A host's published weekly slots.

    Every operation is scoped to one host id. Mutations commit before returning;
    ``bulk_replace`` deletes and inserts inside one transaction and is serialized
    per (host, slot type), so concurrent re-publishes of the same type never
    interleave.
    """

    def __init__(self, db: Session, id_factory: Callable[[str, str, str, str], str] = None,
                 locks: KeyedLocks = None):
        self.db = db
        self.id_factory = id_factory or default_slot_id_factory
        self.locks = locks or inventory_locks

    def _query(self, host_id: int):
        return self.db.query(AvailabilityDB).filter(AvailabilityDB.host_id == host_id)

    def list_all(self, host_id: int) -> List[AvailabilityDB]:
        return self._query(host_id).order_by(AvailabilityDB.id.asc()).all()

    def list_grouped(self, host_id: int) -> Dict[str, List[AvailabilityDB]]:
        grouped: Dict[str, List[AvailabilityDB]] = OrderedDict()
        for slot in self.list_all(host_id):
            grouped.setdefault(slot.slot_type, []).append(slot)
        return grouped

    def slot_types(self, host_id: int) -> List[dict]:
        return [
            {
                "slot_type": slot_type,
                "name": slots[0].name or slugify(slot_type),
                "duration": slots[0].duration,
                "slot_count": len(slots),
            }
            for slot_type, slots in self.list_grouped(host_id).items()
        ]

    def create_bulk(self, host_id: int, days: Sequence[str], time_ranges: Sequence[Tuple[str, str]],
                    interval: int, slot_type: str) -> List[AvailabilityDB]:
        """
        Expands ``days x time_ranges`` into ``interval``-minute slots and replaces
        every existing slot of ``slot_type`` with them.

        Raises:
            ValidationError: empty days, time ranges or slot type, a non-positive
                interval, a malformed or inverted range, or overlapping ranges.
        """
        slot_type = (slot_type or "").strip()
        if not days:
            raise ValidationError("At least one day is required")
        if not time_ranges:
            raise ValidationError("At least one time range is required")
        if not interval or interval <= 0:
            raise ValidationError("Interval must be a positive number of minutes")
        if not slot_type:
            raise ValidationError("Slot type is required")

        ranges = [_checked_range(start, end) for start, end in time_ranges]
        ordered = sorted(ranges, key=lambda r: to_minutes(r[0]))
        for (a_start, a_end), (b_start, b_end) in zip(ordered, ordered[1:]):
            if intervals_overlap(to_minutes(a_start), to_minutes(a_end), to_minutes(b_start), to_minutes(b_end)):
                raise ValidationError(f"Time ranges {a_start}-{a_end} and {b_start}-{b_end} overlap")

        unique_days = list(OrderedDict.fromkeys(days))
        new_slots = [
            (day, start, end, interval)
            for day, start, end in generator.expand(unique_days, ranges, interval)
        ]
        return self.bulk_replace(host_id, slot_type, new_slots)

    def bulk_replace(self, host_id: int, slot_type: str, new_slots: Iterable[NewSlot]) -> List[AvailabilityDB]:
        if not slot_type or not slot_type.strip():
            raise ValidationError("Slot type is required")
        name = slugify(slot_type)
        with self.locks.hold((host_id, slot_type)):
            try:
                # Row lock on the host serializes replacements across processes too
                self.db.query(HostDB).filter(HostDB.id == host_id).with_for_update().first()
                removed = self._query(host_id).filter(AvailabilityDB.slot_type == slot_type).delete(
                    synchronize_session=False
                )
                created = []
                for day, start, end, duration in new_slots:
                    slot = AvailabilityDB(
                        host_id=host_id,
                        day=day,
                        start=start,
                        end=end,
                        slot_type=slot_type,
                        name=name,
                        slot_id=self.id_factory(slot_type, day, start, end),
                        duration=duration,
                    )
                    self.db.add(slot)
                    created.append(slot)
                self.db.commit()
                for slot in created:
                    self.db.refresh(slot)
            except IntegrityError:
                self.db.rollback()
                raise ConflictError(f"Duplicate slots generated for slot type '{slot_type}'")
            except Exception:
                self.db.rollback()
                raise

        logger.info("Replaced %s slot(s) of type '%s' for host %s with %s new slot(s)",
                    removed, slot_type, host_id, len(created))
        return created

    def insert_single(self, host_id: int, day: str, start: str, end: str,
                      slot_type: Optional[str] = None) -> AvailabilityDB:
        """
        Upserts a single slot keyed by (host, day, start, end). Re-submitting the
        same window only changes its slot type.
        """
        if not day or not start or not end:
            raise ValidationError("Missing fields")
        start, end = _checked_range(start, end)
        slot_type = (slot_type or "").strip() or DEFAULT_SLOT_TYPE

        slot = self._query(host_id).filter(
            AvailabilityDB.day == day,
            AvailabilityDB.start == start,
            AvailabilityDB.end == end,
        ).first()
        if slot:
            slot.slot_type = slot_type
            slot.name = slugify(slot_type)
        else:
            slot = AvailabilityDB(
                host_id=host_id,
                day=day,
                start=start,
                end=end,
                slot_type=slot_type,
                name=slugify(slot_type),
                slot_id=self.id_factory(slot_type, day, start, end),
                duration=to_minutes(end) - to_minutes(start),
            )
            self.db.add(slot)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"A '{slot_type}' slot already starts at {start} on {day}")
        self.db.refresh(slot)
        return slot

    def delete_by_day(self, host_id: int, day: str) -> int:
        return self._delete(self._query(host_id).filter(AvailabilityDB.day == day))

    def delete_by_slot_id(self, host_id: int, slot_id: str) -> int:
        return self._delete(self._query(host_id).filter(AvailabilityDB.slot_id == slot_id))

    def delete_by_type(self, host_id: int, slot_type: str) -> int:
        return self._delete(self._query(host_id).filter(AvailabilityDB.slot_type == slot_type))

    def _delete(self, query) -> int:
        count = query.delete(synchronize_session=False)
        self.db.commit()
        return count


def _checked_range(start: str, end: str) -> Tuple[str, str]:
    try:
        begin, finish = parse_time(start), parse_time(end)
    except ValueError as e:
        raise ValidationError(str(e))
    if begin >= finish:
        raise ValidationError(f"Start {start} must be before end {end}")
    return start, end
