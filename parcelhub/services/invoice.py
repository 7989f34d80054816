"""Invoice service for business logic."""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from parcelhub.models.invoice import Invoice
from parcelhub.schemas.invoice import InvoiceCreate
from parcelhub.services.parcel import get_parcel


def create_invoice(db: Session, invoice_data: InvoiceCreate) -> Invoice:
    """Issue an invoice to a parcel."""
    get_parcel(db, invoice_data.parcel_id)

    db_invoice = Invoice(
        parcel_id=invoice_data.parcel_id,
        amount=invoice_data.amount,
        description=invoice_data.description,
        due_date=invoice_data.due_date,
    )
    db.add(db_invoice)
    db.commit()
    db.refresh(db_invoice)
    return db_invoice


def find_invoice_by_id(db: Session, invoice_id: int) -> Invoice | None:
    """Get an invoice by ID, or None."""
    return db.query(Invoice).filter(Invoice.id == invoice_id).first()


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    """Get an invoice by ID, raising 404 if it does not exist."""
    invoice = find_invoice_by_id(db, invoice_id)
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invoice not found",
        )
    return invoice


def get_invoices_for_parcel(db: Session, parcel_id: int) -> list[Invoice]:
    """Get all invoices issued to a parcel."""
    return db.query(Invoice).filter(Invoice.parcel_id == parcel_id).order_by(Invoice.id).all()
