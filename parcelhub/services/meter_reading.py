"""MeterReading service - append-only reading history."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from parcelhub.models.meter import Meter
from parcelhub.models.meter_reading import MeterReading
from parcelhub.schemas.meter_reading import MeterReadingCreate
from parcelhub.services.meter import get_meter

logger = logging.getLogger(__name__)


def get_latest_reading(db: Session, meter_id: int) -> MeterReading | None:
    """Get the most recent reading for a meter."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.meter_id == meter_id)
        .order_by(MeterReading.reading_date.desc(), MeterReading.id.desc())
        .first()
    )


def apply_reading_to_meter(
    meter: Meter,
    reading: MeterReadingCreate,
    previous: MeterReading | None,
) -> None:
    """
    Refresh the meter's running figures from a new reading.

    Consumption is the difference with the previous reading; the first
    reading of a meter has no consumption. The month the meter was last
    read moves into ``prev_month``.
    """
    if previous is None:
        meter.current_consumption = 0.0
    else:
        meter.current_consumption = reading.reading - previous.reading
    meter.prev_month = meter.current_month
    meter.current_month = reading.reading_date.month
    meter.current_year = reading.reading_date.year


def create_reading(db: Session, reading_data: MeterReadingCreate) -> MeterReading:
    """Record a meter reading.

    Readings are appended in date order and never decrease, since meters
    count cumulatively.
    """
    meter = get_meter(db, reading_data.meter_id)
    previous = get_latest_reading(db, meter.id)

    if previous is not None:
        if reading_data.reading_date <= previous.reading_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=(
                    f"Reading date must be after the last reading "
                    f"({previous.reading_date.isoformat()})"
                ),
            )
        if reading_data.reading < previous.reading:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Reading cannot be lower than the last reading ({previous.reading})",
            )

    db_reading = MeterReading(
        meter_id=meter.id,
        reading_date=reading_data.reading_date,
        reading=reading_data.reading,
    )
    db.add(db_reading)
    apply_reading_to_meter(meter, reading_data, previous)
    db.commit()
    db.refresh(db_reading)
    logger.info(
        "Recorded reading %s for meter %s on %s",
        reading_data.reading,
        meter.id,
        reading_data.reading_date.isoformat(),
    )
    return db_reading


def get_readings_for_meter(db: Session, meter_id: int) -> list[MeterReading]:
    """Get the full reading history for a meter, oldest first."""
    return (
        db.query(MeterReading)
        .filter(MeterReading.meter_id == meter_id)
        .order_by(MeterReading.reading_date, MeterReading.id)
        .all()
    )
