"""Database models."""

from parcelhub.models.associations import parcel_owners
from parcelhub.models.invoice import Invoice
from parcelhub.models.meter import Meter
from parcelhub.models.meter_reading import MeterReading
from parcelhub.models.parcel import Parcel
from parcelhub.models.payment import Payment
from parcelhub.models.user import User

__all__ = ["Invoice", "Meter", "MeterReading", "Parcel", "Payment", "User", "parcel_owners"]
