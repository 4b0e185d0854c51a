from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from models.Base import Base

class HostDB(Base):
    __tablename__ = "hosts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    avatar = Column(String)
    timezone = Column(String, default="UTC", nullable=False)
    default_meeting_duration = Column(Integer, default=30)
    google_access_token = Column(String)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    slots = relationship("AvailabilityDB", back_populates="host", cascade="all, delete-orphan")
    bookings = relationship("BookingDB", back_populates="host", cascade="all, delete-orphan")

    @property
    def google_calendar_connected(self) -> bool:
        return bool(self.google_access_token)
