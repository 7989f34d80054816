"""Payment database model."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from parcelhub.core.database import Base
from parcelhub.models.enums import PaymentMethod, PaymentStatus


class Payment(Base):
    """Monetary transaction against an invoice.

    Webpay payments start as ``pending`` and move to ``committed`` or
    ``failed`` when the gateway callback arrives. Manual payments are
    created directly as ``manual``.
    """

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    amount: Mapped[int]
    method: Mapped[PaymentMethod] = mapped_column(String(20))
    status: Mapped[PaymentStatus] = mapped_column(String(20), index=True)
    note: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Webpay transaction data
    buy_order: Mapped[str | None] = mapped_column(String(26), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(61), nullable=True)
    token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    authorization_code: Mapped[str | None] = mapped_column(String(6), nullable=True)
    response_code: Mapped[int | None] = mapped_column(nullable=True)
    card_number: Mapped[str | None] = mapped_column(String(19), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    paid_at: Mapped[datetime | None] = mapped_column(nullable=True)
