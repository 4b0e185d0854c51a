from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

class BookingCreate(BaseModel):
    # Optional so that missing fields surface as a booking validation error
    guest_name: Optional[str] = None
    guest_email: Optional[EmailStr] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    class Config:
        extra = "forbid"

class Booking(BaseModel):
    id: int
    guest_name: str
    guest_email: str
    start: datetime
    end: datetime
    calendar_event_id: Optional[str] = None
    meet_link: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("start", "end", "created_at")
    @classmethod
    def mark_utc(cls, value):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

class Offer(BaseModel):
    slot_id: str
    slot_type: str
    day: str
    start: str
    end: str
    start_at: datetime
    end_at: datetime
