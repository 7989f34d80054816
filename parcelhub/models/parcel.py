"""Parcel database model."""

from datetime import UTC, datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from parcelhub.core.database import Base


class Parcel(Base):
    """Real-estate unit that meters and invoices belong to.

    Owners live in the ``parcel_owners`` association table and are fetched
    with ``parcel_service.find_parcel_owners``.
    """

    __tablename__ = "parcels"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
