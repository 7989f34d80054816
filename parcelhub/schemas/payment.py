"""Payment Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from parcelhub.models.enums import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for paying an invoice, through Webpay or manually.

    ``method`` is ignored by the Webpay flow, which always records
    ``webpay``.
    """

    invoice_id: int
    amount: int = Field(gt=0)
    method: PaymentMethod = PaymentMethod.CASH
    note: str | None = Field(default=None, max_length=255)


class StartTrxResponse(BaseModel):
    """Token and redirect URL returned by Webpay when a transaction starts."""

    token: str
    url: str


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: int
    invoice_id: int
    user_id: int
    amount: int
    method: PaymentMethod
    status: PaymentStatus
    note: str | None
    buy_order: str | None
    authorization_code: str | None
    response_code: int | None
    card_number: str | None
    created_at: datetime
    paid_at: datetime | None

    model_config = {"from_attributes": True}
