"""Invoice routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.schemas.invoice import InvoiceCreate, InvoiceResponse
from parcelhub.services import invoice as invoice_service
from parcelhub.services import parcel as parcel_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: InvoiceCreate,
    _: Principal = Depends(route_guard("invoices.create")),
    db: Session = Depends(get_db),
):
    """Issue an invoice to a parcel."""
    return invoice_service.create_invoice(db, invoice_data)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: int,
    principal: Principal = Depends(route_guard("invoices.get")),
    db: Session = Depends(get_db),
):
    """Get an invoice by ID."""
    invoice = invoice_service.get_invoice(db, invoice_id)
    parcel_service.ensure_can_view_parcel(db, principal, invoice.parcel_id)
    return invoice
