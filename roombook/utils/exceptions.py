from datetime import datetime
from fastapi import HTTPException, status

from roombook.utils.clock import isoformat


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES — Machine-readable constants, also the tail of the problem "type"
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR      = "VALIDATION_ERROR"
    INVALID_INTERVAL      = "INVALID_INTERVAL"
    NOT_FOUND             = "NOT_FOUND"
    ROOM_BUSY             = "ROOM_BUSY"
    REFERENCED_ENTITY     = "REFERENCED_ENTITY"
    INTEGRITY_ERROR       = "INTEGRITY_ERROR"
    RATE_LIMITED          = "RATE_LIMITED"
    SERVICE_UNAVAILABLE   = "SERVICE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    `detail` is the human-readable problem detail; `error_code` selects the
    problem type. Extra members are copied into the problem document.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        extra: dict | None = None,
        headers: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.error_code = error_code
        self.extra = extra or {}


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class ValidationException(AppException):
    def __init__(self, message: str = "Request validation failed", errors_text: str | None = None):
        extra = {"errorsText": errors_text} if errors_text else None
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.VALIDATION_ERROR, extra)


class InvalidIntervalException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "End time must be in the future",
            ErrorCode.INVALID_INTERVAL,
        )


class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", ErrorCode.NOT_FOUND)


class RoomBusyException(AppException):
    def __init__(self, busy_until: datetime):
        until = isoformat(busy_until)
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"Auditory is busy until {until}",
            ErrorCode.ROOM_BUSY,
            {"busyUntil": until},
        )


class ReferencedEntityException(AppException):
    def __init__(self, resource: str, booking_count: int):
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"{resource} is referenced by {booking_count} booking(s) and cannot be deleted",
            ErrorCode.REFERENCED_ENTITY,
        )


class RateLimitedException(AppException):
    def __init__(self, retry_after: int):
        super().__init__(
            status.HTTP_429_TOO_MANY_REQUESTS,
            f"Rate limit exceeded, retry in {retry_after} second(s)",
            ErrorCode.RATE_LIMITED,
            headers={"Retry-After": str(retry_after)},
        )


class UnavailableException(AppException):
    def __init__(self, message: str = "A required service is unavailable"):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, message, ErrorCode.SERVICE_UNAVAILABLE)
