from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from roombook.utils.clock import as_utc


def _to_utc(v: datetime) -> datetime:
    try:
        return as_utc(v)
    except OverflowError:
        raise ValueError("Time is out of the supported range")


class BookingCreateRequest(BaseModel):
    deviceId:   str = Field(min_length=1)
    auditoryId: str = Field(min_length=1)
    endTime:    datetime

    # Whether endTime is still ahead is a service decision, made against one
    # sampled "now" together with the conflict check.
    @field_validator("endTime")
    @classmethod
    def normalize_end(cls, v):
        return _to_utc(v)


class BookingUpdateRequest(BaseModel):
    """Partial update: only the fields present (and not null) are applied."""
    deviceId:   Optional[str]      = Field(None, min_length=1)
    auditoryId: Optional[str]      = Field(None, min_length=1)
    endTime:    Optional[datetime] = None

    @field_validator("endTime")
    @classmethod
    def normalize_end(cls, v):
        return _to_utc(v) if v is not None else v

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
