import uuid
from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship
from roombook.database import Base


class Auditory(Base):
    """A bookable room. Capacity is informational only."""
    __tablename__ = "auditories"
    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_auditories_capacity_non_negative"),
    )

    id       = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name     = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    bookings = relationship("Booking", back_populates="auditory", passive_deletes="all")

    def __repr__(self):
        return f"<Auditory id={self.id} name={self.name} capacity={self.capacity}>"
