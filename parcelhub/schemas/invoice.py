"""Invoice Pydantic schemas for request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from parcelhub.models.enums import InvoiceStatus


class InvoiceCreate(BaseModel):
    """Schema for issuing an invoice to a parcel."""

    parcel_id: int
    amount: int = Field(gt=0)
    description: str | None = None
    due_date: date | None = None


class InvoiceResponse(BaseModel):
    """Schema for invoice response."""

    id: int
    parcel_id: int
    amount: int
    description: str | None
    due_date: date | None
    status: InvoiceStatus
    created_at: datetime

    model_config = {"from_attributes": True}
