import logging
from sqlalchemy.orm import Session

from roombook.models.auditory import Auditory
from roombook.models.booking import Booking
from roombook.schemas.auditory import AuditoryCreateRequest, AuditoryUpdateRequest
from roombook.utils.exceptions import NotFoundException, ReferencedEntityException

logger = logging.getLogger(__name__)


def serialize_auditory(a: Auditory) -> dict:
    return {"id": a.id, "name": a.name, "capacity": a.capacity}


class AuditoryService:

    def _get_or_404(self, db: Session, auditory_id: str) -> Auditory:
        a = db.get(Auditory, auditory_id)
        if not a:
            raise NotFoundException("Auditory")
        return a

    def list_auditories(self, db: Session) -> list[dict]:
        return [serialize_auditory(a) for a in db.query(Auditory).order_by(Auditory.name).all()]

    def get_auditory(self, db: Session, auditory_id: str) -> dict:
        return serialize_auditory(self._get_or_404(db, auditory_id))

    def create_auditory(self, db: Session, data: AuditoryCreateRequest) -> dict:
        a = Auditory(name=data.name, capacity=data.capacity)
        db.add(a)
        db.commit()
        db.refresh(a)
        logger.info(f"Created auditory {a.id} '{a.name}' (capacity {a.capacity})")
        return serialize_auditory(a)

    def update_auditory(self, db: Session, auditory_id: str, data: AuditoryUpdateRequest) -> dict:
        a = self._get_or_404(db, auditory_id)

        if data.name is not None:     a.name     = data.name
        if data.capacity is not None: a.capacity = data.capacity

        db.commit()
        db.refresh(a)
        logger.info(f"Updated auditory {a.id}")
        return serialize_auditory(a)

    def delete_auditory(self, db: Session, auditory_id: str) -> None:
        a = self._get_or_404(db, auditory_id)
        in_use = db.query(Booking).filter(Booking.auditoryId == auditory_id).count()
        if in_use:
            raise ReferencedEntityException("Auditory", in_use)
        db.delete(a)
        db.commit()
        logger.info(f"Deleted auditory {auditory_id}")


auditory_service = AuditoryService()
