"""Association tables for many-to-many relationships."""

from sqlalchemy import Column, ForeignKey, Table

from parcelhub.core.database import Base

# Many-to-many: Parcel <-> owner User
parcel_owners = Table(
    "parcel_owners",
    Base.metadata,
    Column("parcel_id", ForeignKey("parcels.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)
