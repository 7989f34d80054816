"""MeterReading database model - append-only history."""

from datetime import UTC, date, datetime

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from parcelhub.core.database import Base


class MeterReading(Base):
    """Meter reading history entry."""

    __tablename__ = "meter_readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_id: Mapped[int] = mapped_column(ForeignKey("meters.id"), index=True)
    reading_date: Mapped[date] = mapped_column(index=True)  # Usually the first day of the month
    reading: Mapped[float]
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
