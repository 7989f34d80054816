"""Meter and meter reading routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.schemas.meter import MeterCreate, MeterResponse, MeterWithReadingsResponse
from parcelhub.schemas.meter_reading import MeterReadingCreate, MeterReadingResponse
from parcelhub.services import meter as meter_service
from parcelhub.services import meter_reading as reading_service
from parcelhub.services import parcel as parcel_service

router = APIRouter(tags=["meters"])


@router.post("/meters", response_model=MeterResponse, status_code=status.HTTP_201_CREATED)
def create_meter(
    meter_data: MeterCreate,
    _: Principal = Depends(route_guard("meters.create")),
    db: Session = Depends(get_db),
):
    """Create a meter. A parcel holds at most one meter per type."""
    return meter_service.create_meter(db, meter_data)


@router.get(
    "/meters/{meter_id}",
    response_model=MeterWithReadingsResponse,
    response_model_exclude_unset=True,
)
def get_meter(
    meter_id: int,
    with_readings: bool = Query(False, description="Include the reading history"),
    principal: Principal = Depends(route_guard("meters.get")),
    db: Session = Depends(get_db),
):
    """Get a meter, optionally with its readings."""
    meter = meter_service.get_meter(db, meter_id)
    parcel_service.ensure_can_view_parcel(db, principal, meter.parcel_id)

    response = MeterWithReadingsResponse(**MeterResponse.model_validate(meter).model_dump())
    if with_readings:
        response.readings = [
            MeterReadingResponse.model_validate(r)
            for r in reading_service.get_readings_for_meter(db, meter.id)
        ]
    return response


@router.post(
    "/readings",
    response_model=MeterReadingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reading(
    reading_data: MeterReadingCreate,
    _: Principal = Depends(route_guard("readings.create")),
    db: Session = Depends(get_db),
):
    """Record a meter reading. Readings cannot be edited afterwards."""
    return reading_service.create_reading(db, reading_data)


@router.get("/meters/{meter_id}/readings", response_model=list[MeterReadingResponse])
def list_meter_readings(
    meter_id: int,
    principal: Principal = Depends(route_guard("readings.list_for_meter")),
    db: Session = Depends(get_db),
):
    """Get the reading history of a meter, oldest first."""
    meter = meter_service.get_meter(db, meter_id)
    parcel_service.ensure_can_view_parcel(db, principal, meter.parcel_id)
    return reading_service.get_readings_for_meter(db, meter.id)
