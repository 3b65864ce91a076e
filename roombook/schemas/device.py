from pydantic import BaseModel, Field, field_validator


class DeviceCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def check_not_empty(cls, v):
        if not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip()


class DeviceUpdateRequest(DeviceCreateRequest):
    pass
