from pydantic import BaseModel, Field, field_validator
from typing import Optional

# Upper bound of the INTEGER column
MAX_CAPACITY = 2_147_483_647


class AuditoryCreateRequest(BaseModel):
    name:     str = Field(min_length=1, max_length=255)
    capacity: int = Field(ge=0, le=MAX_CAPACITY)

    @field_validator("name")
    @classmethod
    def check_not_empty(cls, v):
        if not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip()


class AuditoryUpdateRequest(BaseModel):
    name:     Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=0, le=MAX_CAPACITY)

    @field_validator("name")
    @classmethod
    def check_not_empty(cls, v):
        if v is not None and not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip() if v is not None else v
