"""Meter Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from parcelhub.schemas.meter_reading import MeterReadingResponse


class MeterCreate(BaseModel):
    """Schema for creating a meter on a parcel."""

    meter_type: str
    parcel_id: int

    @field_validator("meter_type")
    @classmethod
    def normalize_meter_type(cls, v: str) -> str:
        """Strip and lowercase the type so 'Water' and 'water ' collide."""
        v = v.strip().lower()
        if not v:
            raise ValueError("meter_type cannot be empty")
        return v


class MeterResponse(BaseModel):
    """Schema for meter response."""

    id: int
    meter_type: str
    parcel_id: int
    current_consumption: float
    current_month: int | None
    prev_month: int | None
    current_year: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class MeterWithReadingsResponse(MeterResponse):
    """Meter plus its reading history; ``readings`` is only sent when requested."""

    readings: list[MeterReadingResponse] | None = None
