"""Enum definitions for roles and payment state."""

from enum import Enum


class Role(str, Enum):
    """User role used by the route authorization table."""

    ADMIN = "admin"
    PARCEL_OWNER = "parcel_owner"
    RESIDENT = "resident"


class PaymentStatus(str, Enum):
    """Payment lifecycle state."""

    PENDING = "pending"  # Webpay transaction started, awaiting commit
    COMMITTED = "committed"  # Webpay authorized the transaction
    FAILED = "failed"  # Webpay commit rejected
    MANUAL = "manual"  # Registered by an admin outside the gateway


class PaymentMethod(str, Enum):
    """How the payment was made."""

    WEBPAY = "webpay"
    CASH = "cash"
    TRANSFER = "transfer"


class InvoiceStatus(str, Enum):
    """Invoice settlement state."""

    PENDING = "pending"
    PAID = "paid"
