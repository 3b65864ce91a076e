import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, TIMESTAMP, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from roombook.database import Base
from roombook.utils.clock import as_utc


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint('"endTime" > "startTime"', name="ck_bookings_end_after_start"),
        Index("ix_bookings_auditory_end", "auditoryId", "endTime"),
    )

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    deviceId   = Column(String(36), ForeignKey("devices.id", ondelete="RESTRICT"), nullable=False, index=True)
    auditoryId = Column(String(36), ForeignKey("auditories.id", ondelete="RESTRICT"), nullable=False)
    startTime  = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False, index=True)
    endTime    = Column(TIMESTAMP(timezone=True), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    device   = relationship("Device", back_populates="bookings")
    auditory = relationship("Auditory", back_populates="bookings")

    def is_active(self, now: datetime) -> bool:
        """A booking is active while its end time is still ahead of `now`."""
        return as_utc(self.endTime) > now

    def __repr__(self):
        return f"<Booking id={self.id} auditoryId={self.auditoryId} endTime={self.endTime}>"
