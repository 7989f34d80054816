"""Meter service for business logic."""

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from parcelhub.models.meter import Meter
from parcelhub.schemas.meter import MeterCreate
from parcelhub.services.parcel import get_parcel


def _duplicate_meter_error(meter_data: MeterCreate) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=(
            f"Parcel {meter_data.parcel_id} already has a "
            f"'{meter_data.meter_type}' meter"
        ),
    )


def create_meter(db: Session, meter_data: MeterCreate) -> Meter:
    """Create a meter, rejecting a second meter of the same type on a parcel."""
    get_parcel(db, meter_data.parcel_id)

    existing = (
        db.query(Meter)
        .filter(
            Meter.parcel_id == meter_data.parcel_id,
            Meter.meter_type == meter_data.meter_type,
        )
        .first()
    )
    if existing:
        raise _duplicate_meter_error(meter_data)

    db_meter = Meter(meter_type=meter_data.meter_type, parcel_id=meter_data.parcel_id)
    db.add(db_meter)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent insert of the same pair
        db.rollback()
        raise _duplicate_meter_error(meter_data) from exc
    db.refresh(db_meter)
    return db_meter


def get_meter(db: Session, meter_id: int) -> Meter:
    """Get a meter by ID."""
    meter = db.query(Meter).filter(Meter.id == meter_id).first()
    if not meter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meter not found",
        )
    return meter


def get_meters_for_parcel(db: Session, parcel_id: int) -> list[Meter]:
    """Get all meters for a parcel."""
    return db.query(Meter).filter(Meter.parcel_id == parcel_id).order_by(Meter.id).all()
