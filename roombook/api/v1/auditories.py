from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from roombook.database import get_db
from roombook.schemas.auditory import AuditoryCreateRequest, AuditoryUpdateRequest
from roombook.schemas.common import problem_responses
from roombook.services.auditory_service import auditory_service

router = APIRouter(prefix="/auditories")


@router.get("", summary="List auditories")
def list_auditories(db: Session = Depends(get_db)):
    return auditory_service.list_auditories(db)


@router.get("/{auditory_id}", summary="Get auditory by ID", responses=problem_responses(404))
def get_auditory(auditory_id: str, db: Session = Depends(get_db)):
    return auditory_service.get_auditory(db, auditory_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create auditory",
             responses=problem_responses(400))
def create_auditory(body: AuditoryCreateRequest, db: Session = Depends(get_db)):
    return auditory_service.create_auditory(db, body)


@router.put("/{auditory_id}", summary="Update auditory (partial)",
            responses=problem_responses(400, 404))
def update_auditory(auditory_id: str, body: AuditoryUpdateRequest, db: Session = Depends(get_db)):
    return auditory_service.update_auditory(db, auditory_id, body)


@router.delete("/{auditory_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete auditory",
               responses=problem_responses(404, 409))
def delete_auditory(auditory_id: str, db: Session = Depends(get_db)):
    auditory_service.delete_auditory(db, auditory_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
