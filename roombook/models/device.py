import uuid
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from roombook.database import Base


class Device(Base):
    __tablename__ = "devices"

    id   = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    bookings = relationship("Booking", back_populates="device", passive_deletes="all")

    def __repr__(self):
        return f"<Device id={self.id} name={self.name}>"
