"""Parcel Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel


class ParcelCreate(BaseModel):
    """Schema for creating a new parcel."""

    name: str
    address: str | None = None


class ParcelResponse(BaseModel):
    """Schema for parcel response."""

    id: int
    name: str
    address: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
