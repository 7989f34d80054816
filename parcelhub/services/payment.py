"""Payment service - Webpay transaction lifecycle and manual payments."""

import logging
import uuid
from datetime import UTC, datetime

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from parcelhub.core.config import settings
from parcelhub.core.exceptions import WebpayError
from parcelhub.models.enums import InvoiceStatus, PaymentMethod, PaymentStatus
from parcelhub.models.invoice import Invoice
from parcelhub.models.payment import Payment
from parcelhub.schemas.payment import PaymentCreate, StartTrxResponse
from parcelhub.services.invoice import get_invoice
from parcelhub.services.webpay import WebpayClient

logger = logging.getLogger(__name__)

# Statuses that count towards settling an invoice
SETTLED_STATUSES = (PaymentStatus.COMMITTED, PaymentStatus.MANUAL)


def generate_buy_order(payment_id: int) -> str:
    """Build a Webpay buy order (max 26 chars) unique to the payment."""
    return f"P{payment_id}-{uuid.uuid4().hex[:12]}"[:26]


def get_settled_amount(db: Session, invoice_id: int) -> int:
    """Sum of committed and manual payments for an invoice."""
    stmt = select(func.coalesce(func.sum(Payment.amount), 0)).where(
        Payment.invoice_id == invoice_id,
        Payment.status.in_([s.value for s in SETTLED_STATUSES]),
    )
    return int(db.scalar(stmt) or 0)


def get_outstanding_amount(db: Session, invoice: Invoice) -> int:
    """Amount still owed on an invoice."""
    return max(invoice.amount - get_settled_amount(db, invoice.id), 0)


def _get_open_invoice(db: Session, invoice_id: int, amount: int) -> Invoice:
    """Get an invoice that can still receive a payment of ``amount``."""
    invoice = get_invoice(db, invoice_id)
    if invoice.status == InvoiceStatus.PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invoice is already paid",
        )
    outstanding = get_outstanding_amount(db, invoice)
    if amount > outstanding:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Amount exceeds the outstanding balance of {outstanding}",
        )
    return invoice


def settle_invoice(db: Session, invoice: Invoice) -> None:
    """Mark the invoice paid once its settled payments cover the amount.

    Expects pending changes to be flushed so the new payment is counted.
    """
    if invoice.status == InvoiceStatus.PAID:
        return
    if get_settled_amount(db, invoice.id) >= invoice.amount:
        invoice.status = InvoiceStatus.PAID
        logger.info("Invoice %s fully paid", invoice.id)


def start_webpay_payment(
    db: Session,
    payment_data: PaymentCreate,
    user_id: int,
    gateway: WebpayClient,
) -> StartTrxResponse:
    """
    Start a Webpay transaction for an invoice.

    A pending payment is stored with the buy order and the token Webpay
    hands back; the payer is then redirected to the returned URL. Nothing is
    stored if the gateway call fails.
    """
    invoice = _get_open_invoice(db, payment_data.invoice_id, payment_data.amount)

    payment = Payment(
        invoice_id=invoice.id,
        user_id=user_id,
        amount=payment_data.amount,
        method=PaymentMethod.WEBPAY,
        status=PaymentStatus.PENDING,
        note=payment_data.note,
    )
    db.add(payment)
    db.flush()  # Get payment.id for the buy order

    payment.buy_order = generate_buy_order(payment.id)
    payment.session_id = f"user-{user_id}"

    try:
        transaction = gateway.create_transaction(
            buy_order=payment.buy_order,
            session_id=payment.session_id,
            amount=payment.amount,
            return_url=settings.WEBPAY_RETURN_URL,
        )
    except WebpayError:
        db.rollback()
        raise

    payment.token = transaction.token
    db.commit()
    logger.info(
        "Payment %s pending for invoice %s (buy order %s)",
        payment.id,
        invoice.id,
        payment.buy_order,
    )
    return StartTrxResponse(token=transaction.token, url=transaction.url)


def commit_webpay_payment(db: Session, token: str, gateway: WebpayClient) -> Payment:
    """
    Commit the Webpay transaction identified by ``token``.

    Approved transactions whose amount matches and still fits the invoice's
    outstanding balance move the payment to ``committed``; anything else
    moves it to ``failed``. A payment that is
    no longer pending is returned unchanged, so repeated callbacks are
    harmless. Gateway errors leave the payment pending and propagate.
    """
    payment = db.query(Payment).filter(Payment.token == token).first()
    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found",
        )
    if payment.status != PaymentStatus.PENDING:
        logger.info("Payment %s already %s, skipping commit", payment.id, payment.status)
        return payment

    result = gateway.commit_transaction(token)

    payment.response_code = result.response_code
    payment.authorization_code = result.authorization_code
    payment.card_number = result.card_number

    invoice = get_invoice(db, payment.invoice_id)
    outstanding = get_outstanding_amount(db, invoice)

    if result.approved and result.amount == payment.amount and payment.amount <= outstanding:
        payment.status = PaymentStatus.COMMITTED
        payment.paid_at = datetime.now(UTC)
        db.flush()
        settle_invoice(db, invoice)
        logger.info("Payment %s committed", payment.id)
    elif result.approved and result.amount == payment.amount:
        payment.status = PaymentStatus.FAILED
        logger.error(
            "Payment %s approved by Webpay but exceeds outstanding balance %s of invoice %s;"
            " needs a manual refund",
            payment.id,
            outstanding,
            invoice.id,
        )
    else:
        payment.status = PaymentStatus.FAILED
        logger.warning(
            "Payment %s failed: status=%s response_code=%s amount=%s",
            payment.id,
            result.status,
            result.response_code,
            result.amount,
        )

    db.commit()
    db.refresh(payment)
    return payment


def create_manual_payment(db: Session, payment_data: PaymentCreate, user_id: int) -> Payment:
    """Register a payment made outside Webpay (cash or bank transfer)."""
    if payment_data.method == PaymentMethod.WEBPAY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webpay payments must go through the Webpay transaction flow",
        )
    invoice = _get_open_invoice(db, payment_data.invoice_id, payment_data.amount)

    payment = Payment(
        invoice_id=invoice.id,
        user_id=user_id,
        amount=payment_data.amount,
        method=payment_data.method,
        status=PaymentStatus.MANUAL,
        note=payment_data.note,
        paid_at=datetime.now(UTC),
    )
    db.add(payment)
    db.flush()
    settle_invoice(db, invoice)
    db.commit()
    db.refresh(payment)
    logger.info(
        "Manual %s payment %s registered by user %s for invoice %s",
        payment_data.method.value,
        payment.id,
        user_id,
        invoice.id,
    )
    return payment


def find_all_payments(db: Session) -> list[Payment]:
    """Get every payment."""
    return db.query(Payment).order_by(Payment.id).all()


def find_payment_by_id(db: Session, payment_id: int) -> Payment | None:
    """Get a payment by ID, or None."""
    return db.query(Payment).filter(Payment.id == payment_id).first()


def find_payments_by_user(db: Session, user_id: int) -> list[Payment]:
    """Get the payments made or registered by a user."""
    return db.query(Payment).filter(Payment.user_id == user_id).order_by(Payment.id).all()


def find_payments_by_invoice(db: Session, invoice_id: int) -> list[Payment]:
    """Get the payments made against an invoice."""
    return (
        db.query(Payment).filter(Payment.invoice_id == invoice_id).order_by(Payment.id).all()
    )
