from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from database import get_db
from models import Availability, AvailabilitySlot, BulkAvailability, Weekday
from scheduling.errors import SchedulingError
from scheduling.hosts import get_host
from scheduling.inventory import AvailabilityInventory

availability_router = APIRouter(
    prefix="/availability",
    tags=["Availability"]
)

def _serialize(slot):
    return jsonable_encoder(Availability.model_validate(slot))

@availability_router.get("/{username}", tags=["Availability"])
def get_availability(username: str, db: Session = Depends(get_db)):
    host = get_host(db, username)
    slots = AvailabilityInventory(db).list_all(host.id)
    return [_serialize(slot) for slot in slots]

@availability_router.get("/{username}/grouped", tags=["Availability"])
def get_grouped_availability(username: str, db: Session = Depends(get_db)):
    """
    Retrieves the host's slots grouped by slot type.

    Returns:
        dict: slot type -> list of slots, in the order they were created.
    """
    host = get_host(db, username)
    grouped = AvailabilityInventory(db).list_grouped(host.id)
    return {slot_type: [_serialize(slot) for slot in slots] for slot_type, slots in grouped.items()}

@availability_router.post("/{username}", tags=["Availability"])
def create_or_update_slot(username: str, slot: AvailabilitySlot, db: Session = Depends(get_db)):

    try:
        host = get_host(db, username)
        saved = AvailabilityInventory(db).insert_single(host.id, slot.day.value, slot.start, slot.end, slot.slot_type)
        return {"success": True, "slot": _serialize(saved)}
    except SchedulingError:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@availability_router.post("/{username}/bulk", tags=["Availability"])
def create_bulk_slots(username: str, bulk: BulkAvailability, db: Session = Depends(get_db)):
    """
    Publishes a recurring pattern for one slot type.

    Every existing slot of the same slot type is replaced, so sending the same
    pattern twice leaves the same slots.

    Args:
        bulk (BulkAvailability): days, time ranges, interval in minutes and slot type.

    Returns:
        dict: success flag, number of created slots and the slots.
    """
    try:
        host = get_host(db, username)
        slots = AvailabilityInventory(db).create_bulk(
            host.id,
            [day.value for day in bulk.days],
            [(r.start, r.end) for r in bulk.time_ranges],
            bulk.interval,
            bulk.slot_type,
        )
        return {
            "success": True,
            "created_count": len(slots),
            "slots": [_serialize(slot) for slot in slots],
        }
    except SchedulingError:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@availability_router.delete("/{username}/day/{day}", tags=["Availability"])
def delete_day(username: str, day: Weekday, db: Session = Depends(get_db)):
    host = get_host(db, username)
    deleted = AvailabilityInventory(db).delete_by_day(host.id, day.value)
    return {"success": True, "deleted_count": deleted}

@availability_router.delete("/{username}/slot/{slot_id}", tags=["Availability"])
def delete_slot(username: str, slot_id: str, db: Session = Depends(get_db)):
    host = get_host(db, username)
    deleted = AvailabilityInventory(db).delete_by_slot_id(host.id, slot_id)
    return {"success": True, "deleted_count": deleted}

@availability_router.delete("/{username}/type/{slot_type}", tags=["Availability"])
def delete_slot_type(username: str, slot_type: str, db: Session = Depends(get_db)):
    host = get_host(db, username)
    deleted = AvailabilityInventory(db).delete_by_type(host.id, slot_type)
    return {"success": True, "deleted_count": deleted}
