"""Parcel routes, including owner management and parcel-scoped listings."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.schemas.invoice import InvoiceResponse
from parcelhub.schemas.meter import MeterResponse
from parcelhub.schemas.parcel import ParcelCreate, ParcelResponse
from parcelhub.schemas.user import UserResponse
from parcelhub.services import invoice as invoice_service
from parcelhub.services import meter as meter_service
from parcelhub.services import parcel as parcel_service

router = APIRouter(prefix="/parcels", tags=["parcels"])


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
def create_parcel(
    parcel_data: ParcelCreate,
    _: Principal = Depends(route_guard("parcels.create")),
    db: Session = Depends(get_db),
):
    """Create a new parcel."""
    return parcel_service.create_parcel(db, parcel_data)


@router.get("", response_model=list[ParcelResponse])
def list_parcels(
    skip: int = 0,
    limit: int = 100,
    _: Principal = Depends(route_guard("parcels.list")),
    db: Session = Depends(get_db),
):
    """List all parcels."""
    return parcel_service.get_parcels(db, skip, limit)


@router.get("/{parcel_id}", response_model=ParcelResponse)
def get_parcel(
    parcel_id: int,
    principal: Principal = Depends(route_guard("parcels.get")),
    db: Session = Depends(get_db),
):
    """Get a parcel by ID."""
    return parcel_service.ensure_can_view_parcel(db, principal, parcel_id)


@router.get("/{parcel_id}/owners", response_model=list[UserResponse])
def list_parcel_owners(
    parcel_id: int,
    _: Principal = Depends(route_guard("parcels.owners")),
    db: Session = Depends(get_db),
):
    """List the owners of a parcel."""
    parcel_service.get_parcel(db, parcel_id)
    return parcel_service.find_parcel_owners(db, parcel_id)


@router.post("/{parcel_id}/owners/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def add_parcel_owner(
    parcel_id: int,
    user_id: int,
    _: Principal = Depends(route_guard("parcels.add_owner")),
    db: Session = Depends(get_db),
) -> None:
    """Register a user as owner of a parcel."""
    parcel_service.add_parcel_owner(db, parcel_id, user_id)


@router.delete("/{parcel_id}/owners/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_parcel_owner(
    parcel_id: int,
    user_id: int,
    _: Principal = Depends(route_guard("parcels.remove_owner")),
    db: Session = Depends(get_db),
) -> None:
    """Remove a user from the owners of a parcel."""
    parcel_service.remove_parcel_owner(db, parcel_id, user_id)


@router.get("/{parcel_id}/meters", response_model=list[MeterResponse])
def list_parcel_meters(
    parcel_id: int,
    principal: Principal = Depends(route_guard("meters.list_for_parcel")),
    db: Session = Depends(get_db),
):
    """List the meters of a parcel."""
    parcel_service.ensure_can_view_parcel(db, principal, parcel_id)
    return meter_service.get_meters_for_parcel(db, parcel_id)


@router.get("/{parcel_id}/invoices", response_model=list[InvoiceResponse])
def list_parcel_invoices(
    parcel_id: int,
    principal: Principal = Depends(route_guard("invoices.list_for_parcel")),
    db: Session = Depends(get_db),
):
    """List the invoices of a parcel."""
    parcel_service.ensure_can_view_parcel(db, principal, parcel_id)
    return invoice_service.get_invoices_for_parcel(db, parcel_id)
