from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from config import DEFAULT_SLOT_TYPE
from helper import parse_time
from models.Weekday import Weekday

class TimeRange(BaseModel):
    start: str
    end: str

    class Config:
        extra = "forbid"

    @field_validator("start", "end")
    @classmethod
    def wall_clock(cls, value: str) -> str:
        parse_time(value)
        return value

    @model_validator(mode="after")
    def start_before_end(self):
        if parse_time(self.start) >= parse_time(self.end):
            raise ValueError("start must be before end")
        return self

class AvailabilitySlot(TimeRange):
    day: Weekday
    slot_type: str = DEFAULT_SLOT_TYPE

class BulkAvailability(BaseModel):
    days: List[Weekday] = Field(min_length=1)
    time_ranges: List[TimeRange] = Field(min_length=1)
    interval: int = Field(gt=0)
    slot_type: str = Field(min_length=1)

    class Config:
        extra = "forbid"

    @field_validator("slot_type")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("slot_type must not be blank")
        return value

class Availability(BaseModel):
    day: str
    start: str
    end: str
    slot_type: str
    name: Optional[str] = None
    slot_id: str
    duration: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SlotType(BaseModel):
    slot_type: str
    name: str
    duration: Optional[int] = None
    slot_count: int
