"""Payment routes: Webpay transactions, manual payments and lookups."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.core.policies import can_view_payment
from parcelhub.schemas.payment import PaymentCreate, PaymentResponse, StartTrxResponse
from parcelhub.services import invoice as invoice_service
from parcelhub.services import parcel as parcel_service
from parcelhub.services import payment as payment_service
from parcelhub.services.webpay import WebpayClient, get_webpay_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

ACCESS_DENIED_DETAIL = "Access denied: You do not have permission to view these payments."


def _access_denied() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=ACCESS_DENIED_DETAIL)


@router.post("/webpay/start-trx", response_model=StartTrxResponse)
def start_transaction(
    payment_data: PaymentCreate,
    principal: Principal = Depends(route_guard("payments.start_transaction")),
    db: Session = Depends(get_db),
    gateway: WebpayClient = Depends(get_webpay_client),
):
    """Start a Webpay transaction; the payer is redirected to the returned URL."""
    return payment_service.start_webpay_payment(db, payment_data, principal.id, gateway)


@router.get("/webpay/commit-trx", response_model=PaymentResponse)
def commit_transaction(
    token_ws: str = Query(..., description="Transaction token sent back by Webpay"),
    _: None = Depends(route_guard("payments.commit_transaction")),
    db: Session = Depends(get_db),
    gateway: WebpayClient = Depends(get_webpay_client),
):
    """
    Commit a Webpay transaction.

    Public callback: only Transbank should call it, never the frontend.
    """
    return payment_service.commit_webpay_payment(db, token_ws, gateway)


@router.post("/manual", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_manual_payment(
    payment_data: PaymentCreate,
    principal: Principal = Depends(route_guard("payments.create_manual")),
    db: Session = Depends(get_db),
):
    """Register a cash or bank-transfer payment."""
    return payment_service.create_manual_payment(db, payment_data, principal.id)


@router.get("", response_model=list[PaymentResponse])
def get_all_payments(
    _: Principal = Depends(route_guard("payments.list")),
    db: Session = Depends(get_db),
):
    """List every payment."""
    return payment_service.find_all_payments(db)


@router.get("/{payment_id}", response_model=PaymentResponse | None)
def get_payment_by_id(
    payment_id: int,
    _: Principal = Depends(route_guard("payments.get")),
    db: Session = Depends(get_db),
):
    """Get a payment by ID, or null if it does not exist."""
    return payment_service.find_payment_by_id(db, payment_id)


@router.get("/user/{user_id}", response_model=list[PaymentResponse])
def get_payments_by_user(
    user_id: int,
    principal: Principal = Depends(route_guard("payments.list_by_user")),
    db: Session = Depends(get_db),
):
    """List a user's payments. Owners may only list their own."""
    if not can_view_payment(principal, [user_id]):
        logger.warning("User %s denied payments of user %s", principal.id, user_id)
        raise _access_denied()
    return payment_service.find_payments_by_user(db, user_id)


@router.get("/invoice/{invoice_id}", response_model=list[PaymentResponse])
def get_payments_by_invoice(
    invoice_id: int,
    principal: Principal = Depends(route_guard("payments.list_by_invoice")),
    db: Session = Depends(get_db),
):
    """
    List the payments of an invoice.

    Admins see any invoice; owners only invoices of parcels they own. A
    parcel with no owners registered is not restricted.
    """
    invoice = invoice_service.find_invoice_by_id(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")

    parcel = parcel_service.find_parcel_by_id(db, invoice.parcel_id)
    if not parcel:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parcel not found")

    owner_ids = [owner.id for owner in parcel_service.find_parcel_owners(db, parcel.id)]
    logger.debug("Parcel %s owners: %s", parcel.id, owner_ids)

    if owner_ids and not can_view_payment(principal, owner_ids):
        logger.warning("User %s denied payments of invoice %s", principal.id, invoice_id)
        raise _access_denied()

    return payment_service.find_payments_by_invoice(db, invoice_id)
