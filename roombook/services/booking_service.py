import logging
from sqlalchemy.orm import Session, joinedload

from roombook.models.booking import Booking
from roombook.models.device import Device
from roombook.schemas.booking import BookingCreateRequest, BookingUpdateRequest
from roombook.services.auditory_service import serialize_auditory
from roombook.services.availability import find_active_booking, reserve_auditory
from roombook.services.device_service import serialize_device
from roombook.utils.clock import isoformat, utcnow
from roombook.utils.exceptions import (
    InvalidIntervalException, NotFoundException, RoomBusyException,
)

logger = logging.getLogger(__name__)


def _serialize(b: Booking) -> dict:
    return {
        "id":         b.id,
        "deviceId":   b.deviceId,
        "auditoryId": b.auditoryId,
        "startTime":  isoformat(b.startTime),
        "endTime":    isoformat(b.endTime),
        "device":     serialize_device(b.device),
        "auditory":   serialize_auditory(b.auditory),
    }


def _expanded(db: Session):
    return db.query(Booking).options(joinedload(Booking.device), joinedload(Booking.auditory))


class BookingService:
    """
    Booking lifecycle. Each operation samples "now" once, and the conflict
    check plus the write that depends on it run inside reserve_auditory().
    """

    def _get_or_404(self, db: Session, booking_id: str) -> Booking:
        b = _expanded(db).filter(Booking.id == booking_id).first()
        if not b:
            raise NotFoundException("Booking")
        return b

    def _require_device(self, db: Session, device_id: str) -> None:
        if not db.get(Device, device_id):
            raise NotFoundException("Device")

    def list_bookings(self, db: Session) -> list[dict]:
        items = _expanded(db).order_by(Booking.startTime.desc()).all()
        return [_serialize(b) for b in items]

    def get_booking(self, db: Session, booking_id: str) -> dict:
        return _serialize(self._get_or_404(db, booking_id))

    def create_booking(self, db: Session, data: BookingCreateRequest) -> dict:
        now = utcnow()
        if data.endTime <= now:
            raise InvalidIntervalException()

        with reserve_auditory(db, data.auditoryId) as auditory:
            if not auditory:
                raise NotFoundException("Auditory")
            self._require_device(db, data.deviceId)

            active = find_active_booking(db, data.auditoryId, now)
            if active:
                logger.info(f"Auditory {data.auditoryId} busy until {isoformat(active.endTime)}, "
                            f"rejecting new booking")
                raise RoomBusyException(active.endTime)

            b = Booking(
                deviceId=data.deviceId,
                auditoryId=data.auditoryId,
                startTime=now,
                endTime=data.endTime,
            )
            db.add(b)
            db.commit()

        db.refresh(b)
        logger.info(f"Created booking {b.id} for auditory {b.auditoryId} until {isoformat(b.endTime)}")
        return _serialize(b)

    def update_booking(self, db: Session, booking_id: str, data: BookingUpdateRequest) -> dict:
        now = utcnow()
        b = self._get_or_404(db, booking_id)
        changes = data.changes()

        if "endTime" in changes and changes["endTime"] <= now:
            raise InvalidIntervalException()
        if "deviceId" in changes:
            self._require_device(db, changes["deviceId"])

        if "auditoryId" in changes or "endTime" in changes:
            target = changes.get("auditoryId", b.auditoryId)
            with reserve_auditory(db, target) as auditory:
                if not auditory:
                    raise NotFoundException("Auditory")
                active = find_active_booking(db, target, now, exclude_booking_id=b.id)
                if active:
                    logger.info(f"Auditory {target} busy until {isoformat(active.endTime)}, "
                                f"rejecting update of booking {b.id}")
                    raise RoomBusyException(active.endTime)
                self._apply(b, changes)
                db.commit()
        else:
            self._apply(b, changes)
            db.commit()

        db.refresh(b)
        logger.info(f"Updated booking {b.id}: {sorted(changes)}")
        return _serialize(b)

    def delete_booking(self, db: Session, booking_id: str) -> None:
        b = db.get(Booking, booking_id)
        if not b:
            raise NotFoundException("Booking")
        db.delete(b)
        db.commit()
        logger.info(f"Deleted booking {booking_id}")

    @staticmethod
    def _apply(b: Booking, changes: dict) -> None:
        for field, value in changes.items():
            setattr(b, field, value)


booking_service = BookingService()
