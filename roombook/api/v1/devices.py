from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roombook.database import get_db
from roombook.schemas.common import problem_responses
from roombook.schemas.device import DeviceCreateRequest, DeviceUpdateRequest
from roombook.services.device_service import device_service

router = APIRouter(prefix="/devices")


@router.get("", summary="List devices")
def list_devices(db: Session = Depends(get_db)):
    return device_service.list_devices(db)


@router.get("/{device_id}", summary="Get device by ID", responses=problem_responses(404))
def get_device(device_id: str, db: Session = Depends(get_db)):
    return device_service.get_device(db, device_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create device",
             responses=problem_responses(400))
def create_device(body: DeviceCreateRequest, db: Session = Depends(get_db)):
    return device_service.create_device(db, body)


@router.put("/{device_id}", summary="Rename device", responses=problem_responses(400, 404))
def update_device(device_id: str, body: DeviceUpdateRequest, db: Session = Depends(get_db)):
    return device_service.update_device(db, device_id, body)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete device",
               responses=problem_responses(404, 409))
def delete_device(device_id: str, db: Session = Depends(get_db)):
    device_service.delete_device(db, device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
