"""Meter database model."""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from parcelhub.core.database import Base


class Meter(Base):
    """Utility meter installed on a parcel.

    A parcel has at most one meter of each type.
    """

    __tablename__ = "meters"
    __table_args__ = (
        UniqueConstraint("meter_type", "parcel_id", name="uq_meter_type_parcel"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_type: Mapped[str] = mapped_column(String(255))
    parcel_id: Mapped[int] = mapped_column(ForeignKey("parcels.id"), index=True)

    # Running consumption figures, refreshed on every new reading
    current_consumption: Mapped[float] = mapped_column(default=0.0)
    current_month: Mapped[int | None] = mapped_column(nullable=True)
    prev_month: Mapped[int | None] = mapped_column(nullable=True)
    current_year: Mapped[int | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
