from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from models.Base import Base

class AvailabilityDB(Base):
    __tablename__ = "availability"
    __table_args__ = (
        UniqueConstraint("host_id", "slot_type", "day", "start", name="uq_availability_type_day_start"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    host_id = Column(Integer, ForeignKey("hosts.id"), index=True, nullable=False)
    day = Column(String, nullable=False)
    start = Column(String(5), nullable=False)
    end = Column(String(5), nullable=False)
    slot_type = Column(String, nullable=False, default="General Meeting")
    name = Column(String, index=True)
    slot_id = Column(String, unique=True, nullable=False)
    duration = Column(Integer, default=30)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    host = relationship("HostDB", back_populates="slots")
