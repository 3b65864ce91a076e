from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from roombook.database import check_db_connection

router = APIRouter()


@router.get("/health", summary="Liveness and database reachability")
def health():
    if check_db_connection():
        return {"ok": True}
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"ok": False})
