import logging
from sqlalchemy.orm import Session

from roombook.models.booking import Booking
from roombook.models.device import Device
from roombook.schemas.device import DeviceCreateRequest, DeviceUpdateRequest
from roombook.utils.exceptions import NotFoundException, ReferencedEntityException

logger = logging.getLogger(__name__)


def serialize_device(d: Device) -> dict:
    return {"id": d.id, "name": d.name}


class DeviceService:

    def _get_or_404(self, db: Session, device_id: str) -> Device:
        d = db.get(Device, device_id)
        if not d:
            raise NotFoundException("Device")
        return d

    def list_devices(self, db: Session) -> list[dict]:
        return [serialize_device(d) for d in db.query(Device).order_by(Device.name).all()]

    def get_device(self, db: Session, device_id: str) -> dict:
        return serialize_device(self._get_or_404(db, device_id))

    def create_device(self, db: Session, data: DeviceCreateRequest) -> dict:
        d = Device(name=data.name)
        db.add(d)
        db.commit()
        db.refresh(d)
        logger.info(f"Created device {d.id} '{d.name}'")
        return serialize_device(d)

    def update_device(self, db: Session, device_id: str, data: DeviceUpdateRequest) -> dict:
        d = self._get_or_404(db, device_id)
        d.name = data.name
        db.commit()
        db.refresh(d)
        logger.info(f"Updated device {d.id}")
        return serialize_device(d)

    def delete_device(self, db: Session, device_id: str) -> None:
        d = self._get_or_404(db, device_id)
        in_use = db.query(Booking).filter(Booking.deviceId == device_id).count()
        if in_use:
            raise ReferencedEntityException("Device", in_use)
        db.delete(d)
        db.commit()
        logger.info(f"Deleted device {device_id}")


device_service = DeviceService()
