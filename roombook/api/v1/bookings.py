from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roombook.database import get_db
from roombook.schemas.booking import BookingCreateRequest, BookingUpdateRequest
from roombook.schemas.common import problem_responses
from roombook.services.booking_service import booking_service

router = APIRouter(prefix="/bookings")


@router.get("", summary="List bookings, newest first")
def list_bookings(db: Session = Depends(get_db)):
    return booking_service.list_bookings(db)


@router.get("/{booking_id}", summary="Get booking detail", responses=problem_responses(404))
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Book an auditory until endTime",
             responses=problem_responses(400, 404, 409))
def create_booking(body: BookingCreateRequest, db: Session = Depends(get_db)):
    return booking_service.create_booking(db, body)


@router.put("/{booking_id}", summary="Change device, auditory or end time",
            responses=problem_responses(400, 404, 409))
def update_booking(booking_id: str, body: BookingUpdateRequest, db: Session = Depends(get_db)):
    return booking_service.update_booking(db, booking_id, body)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete booking",
               responses=problem_responses(404))
def delete_booking(booking_id: str, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
