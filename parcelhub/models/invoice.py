"""Invoice database model."""

from datetime import UTC, date, datetime

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from parcelhub.core.database import Base
from parcelhub.models.enums import InvoiceStatus


class Invoice(Base):
    """Charge issued to a parcel."""

    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    parcel_id: Mapped[int] = mapped_column(ForeignKey("parcels.id"), index=True)
    amount: Mapped[int]  # CLP, no decimals
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    due_date: Mapped[date | None] = mapped_column(nullable=True)
    status: Mapped[InvoiceStatus] = mapped_column(String(20), default=InvoiceStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
