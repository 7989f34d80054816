"""Seed script to populate the database with sample data."""

from datetime import date

from parcelhub import models  # noqa: F401
from parcelhub.core.database import Base, SessionLocal, engine
from parcelhub.models.enums import Role
from parcelhub.models.invoice import Invoice
from parcelhub.models.meter import Meter
from parcelhub.models.parcel import Parcel
from parcelhub.models.user import User
from parcelhub.schemas.meter_reading import MeterReadingCreate
from parcelhub.services.auth import get_password_hash
from parcelhub.services.meter_reading import create_reading
from parcelhub.services.parcel import add_parcel_owner


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(Parcel).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        admin = User(
            rut="11111111-1",
            name="Administración",
            email="admin@parcelhub.cl",
            hashed_password=get_password_hash("admin123"),
            role=Role.ADMIN,
        )
        owner = User(
            rut="12345678-5",
            name="María González",
            email="maria@parcelhub.cl",
            hashed_password=get_password_hash("owner123"),
            role=Role.PARCEL_OWNER,
        )
        db.add_all([admin, owner])
        db.flush()

        parcel = Parcel(name="Parcela 7", address="Camino El Arrayán km 4")
        db.add(parcel)
        db.commit()
        add_parcel_owner(db, parcel.id, owner.id)
        print(f"Created parcel: {parcel.name} (ID: {parcel.id}) owned by {owner.name}")

        water = Meter(meter_type="water", parcel_id=parcel.id)
        electricity = Meter(meter_type="electricity", parcel_id=parcel.id)
        db.add_all([water, electricity])
        db.commit()
        print("Created 2 meters: water, electricity")

        for month, (water_value, kwh_value) in enumerate(
            [(120.0, 3400.0), (131.5, 3610.0), (140.25, 3795.0)], start=1
        ):
            reading_date = date(2026, month, 1)
            create_reading(
                db,
                MeterReadingCreate(
                    meter_id=water.id, reading_date=reading_date, reading=water_value
                ),
            )
            create_reading(
                db,
                MeterReadingCreate(
                    meter_id=electricity.id, reading_date=reading_date, reading=kwh_value
                ),
            )
        print("Created 3 months of readings")

        invoice = Invoice(
            parcel_id=parcel.id,
            amount=45990,
            description="Gastos comunes marzo",
            due_date=date(2026, 4, 5),
        )
        db.add(invoice)
        db.commit()
        print(f"Created invoice {invoice.id} for {invoice.amount} CLP")

        print("Seed complete. Log in with RUT 11111111-1 / admin123 or 12345678-5 / owner123")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
