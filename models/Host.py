from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, EmailStr, Field, field_validator

class HostCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    avatar: Optional[str] = None
    timezone: str = "UTC"
    default_meeting_duration: int = Field(default=30, gt=0)
    google_access_token: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

class Host(BaseModel):
    id: int
    name: str
    email: EmailStr
    avatar: Optional[str] = None
    timezone: str
    default_meeting_duration: int
    google_calendar_connected: bool

    class Config:
        from_attributes = True

class PublicHost(BaseModel):
    name: str
    avatar: Optional[str] = None
    timezone: str

    class Config:
        from_attributes = True
