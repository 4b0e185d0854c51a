from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from models.Base import Base

class BookingDB(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_host_range", "host_id", "start", "end"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    host_id = Column(Integer, ForeignKey("hosts.id"), nullable=False)
    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False)
    # UTC, stored naive
    start = Column(DateTime, nullable=False)
    end = Column(DateTime, nullable=False)
    calendar_event_id = Column(String)
    meet_link = Column(String)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    host = relationship("HostDB", back_populates="bookings")
