"""MeterReading Pydantic schemas for request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class MeterReadingCreate(BaseModel):
    """Schema for recording a meter reading."""

    meter_id: int
    reading_date: date
    reading: float = Field(ge=0)


class MeterReadingResponse(BaseModel):
    """Schema for meter reading response."""

    id: int
    meter_id: int
    reading_date: date
    reading: float
    created_at: datetime

    model_config = {"from_attributes": True}
