"""Tests for meters and the append-only reading history."""

from datetime import date

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from parcelhub.models.meter import Meter
from parcelhub.models.parcel import Parcel
from parcelhub.schemas.meter import MeterCreate
from parcelhub.schemas.meter_reading import MeterReadingCreate
from parcelhub.services import meter as meter_service
from parcelhub.services import meter_reading as reading_service


@pytest.fixture
def water_meter(test_db, parcel):
    """A water meter on ``parcel``."""
    return meter_service.create_meter(test_db, MeterCreate(meter_type="water", parcel_id=parcel.id))


class TestMeterService:
    """Tests for meter creation."""

    def test_create_meter(self, test_db, parcel) -> None:
        meter = meter_service.create_meter(
            test_db, MeterCreate(meter_type="Electricity ", parcel_id=parcel.id)
        )
        assert meter.id is not None
        assert meter.meter_type == "electricity"
        assert meter.current_consumption == 0.0

    def test_duplicate_type_on_parcel_rejected(self, test_db, parcel, water_meter) -> None:
        with pytest.raises(HTTPException) as exc_info:
            meter_service.create_meter(test_db, MeterCreate(meter_type="WATER", parcel_id=parcel.id))
        assert exc_info.value.status_code == 400
        assert test_db.query(Meter).count() == 1

    def test_same_type_on_other_parcel_allowed(self, test_db, parcel, water_meter) -> None:
        other = Parcel(name="Parcela 13")
        test_db.add(other)
        test_db.commit()

        meter = meter_service.create_meter(
            test_db, MeterCreate(meter_type="water", parcel_id=other.id)
        )
        assert meter.parcel_id == other.id

    def test_unique_constraint_backs_the_check(self, test_db, parcel, water_meter) -> None:
        """Bypassing the service still cannot store a duplicate pair."""
        test_db.add(Meter(meter_type="water", parcel_id=parcel.id))
        with pytest.raises(IntegrityError):
            test_db.commit()
        test_db.rollback()

    def test_unknown_parcel(self, test_db) -> None:
        with pytest.raises(HTTPException) as exc_info:
            meter_service.create_meter(test_db, MeterCreate(meter_type="water", parcel_id=999))
        assert exc_info.value.status_code == 404

    def test_empty_meter_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            MeterCreate(meter_type="   ", parcel_id=1)


class TestReadings:
    """Tests for recording readings."""

    def test_first_reading_has_no_consumption(self, test_db, water_meter) -> None:
        reading_service.create_reading(
            test_db,
            MeterReadingCreate(meter_id=water_meter.id, reading_date=date(2026, 1, 1), reading=100),
        )
        test_db.refresh(water_meter)
        assert water_meter.current_consumption == 0.0
        assert water_meter.current_month == 1
        assert water_meter.prev_month is None
        assert water_meter.current_year == 2026

    def test_consumption_is_difference(self, test_db, water_meter) -> None:
        for day, value in [(date(2025, 12, 1), 100.0), (date(2026, 1, 1), 142.5)]:
            reading_service.create_reading(
                test_db,
                MeterReadingCreate(meter_id=water_meter.id, reading_date=day, reading=value),
            )
        test_db.refresh(water_meter)
        assert water_meter.current_consumption == pytest.approx(42.5)
        assert water_meter.current_month == 1
        assert water_meter.prev_month == 12
        assert water_meter.current_year == 2026

    def test_out_of_order_reading_rejected(self, test_db, water_meter) -> None:
        reading_service.create_reading(
            test_db,
            MeterReadingCreate(meter_id=water_meter.id, reading_date=date(2026, 2, 1), reading=10),
        )
        with pytest.raises(HTTPException) as exc_info:
            reading_service.create_reading(
                test_db,
                MeterReadingCreate(
                    meter_id=water_meter.id, reading_date=date(2026, 1, 1), reading=20
                ),
            )
        assert exc_info.value.status_code == 400

    def test_decreasing_reading_rejected(self, test_db, water_meter) -> None:
        reading_service.create_reading(
            test_db,
            MeterReadingCreate(meter_id=water_meter.id, reading_date=date(2026, 1, 1), reading=50),
        )
        with pytest.raises(HTTPException) as exc_info:
            reading_service.create_reading(
                test_db,
                MeterReadingCreate(
                    meter_id=water_meter.id, reading_date=date(2026, 2, 1), reading=40
                ),
            )
        assert exc_info.value.status_code == 400

    def test_unknown_meter(self, test_db) -> None:
        with pytest.raises(HTTPException) as exc_info:
            reading_service.create_reading(
                test_db, MeterReadingCreate(meter_id=999, reading_date=date(2026, 1, 1), reading=1)
            )
        assert exc_info.value.status_code == 404


class TestMeterRoutes:
    """Tests for the meter and reading endpoints."""

    def test_admin_creates_meter(self, client: TestClient, admin_headers, parcel) -> None:
        response = client.post(
            "/meters", json={"meter_type": "gas", "parcel_id": parcel.id}, headers=admin_headers
        )
        assert response.status_code == 201
        assert response.json()["meter_type"] == "gas"

    def test_duplicate_meter_is_400(
        self, client: TestClient, admin_headers, parcel, water_meter
    ) -> None:
        response = client.post(
            "/meters", json={"meter_type": "water", "parcel_id": parcel.id}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_owner_cannot_create_meter(self, client: TestClient, owner_headers, parcel) -> None:
        response = client.post(
            "/meters", json={"meter_type": "gas", "parcel_id": parcel.id}, headers=owner_headers
        )
        assert response.status_code == 403

    def test_readings_only_when_requested(
        self, client: TestClient, admin_headers, owner_headers, water_meter
    ) -> None:
        client.post(
            "/readings",
            json={"meter_id": water_meter.id, "reading_date": "2026-01-01", "reading": 12.5},
            headers=admin_headers,
        )

        plain = client.get(f"/meters/{water_meter.id}", headers=owner_headers)
        assert plain.status_code == 200
        assert "readings" not in plain.json()
        assert plain.json()["current_month"] == 1

        detailed = client.get(
            f"/meters/{water_meter.id}", params={"with_readings": True}, headers=owner_headers
        )
        assert detailed.status_code == 200
        readings = detailed.json()["readings"]
        assert len(readings) == 1
        assert readings[0]["reading"] == 12.5
        assert readings[0]["reading_date"] == "2026-01-01"

    def test_requested_readings_empty_list(
        self, client: TestClient, owner_headers, water_meter
    ) -> None:
        response = client.get(
            f"/meters/{water_meter.id}", params={"with_readings": True}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["readings"] == []
        assert response.json()["current_month"] is None

    def test_stranger_cannot_see_meter(
        self, client: TestClient, other_headers, water_meter
    ) -> None:
        response = client.get(f"/meters/{water_meter.id}", headers=other_headers)
        assert response.status_code == 401

    def test_list_readings_and_parcel_meters(
        self, client: TestClient, admin_headers, owner_headers, parcel, water_meter
    ) -> None:
        for day, value in [("2026-01-01", 1.0), ("2026-02-01", 3.0)]:
            response = client.post(
                "/readings",
                json={"meter_id": water_meter.id, "reading_date": day, "reading": value},
                headers=admin_headers,
            )
            assert response.status_code == 201

        readings = client.get(f"/meters/{water_meter.id}/readings", headers=owner_headers)
        assert [r["reading"] for r in readings.json()] == [1.0, 3.0]

        meters = client.get(f"/parcels/{parcel.id}/meters", headers=owner_headers)
        assert meters.status_code == 200
        assert meters.json()[0]["current_consumption"] == 2.0

    def test_no_update_or_delete_for_readings(
        self, client: TestClient, admin_headers, water_meter
    ) -> None:
        created = client.post(
            "/readings",
            json={"meter_id": water_meter.id, "reading_date": "2026-01-01", "reading": 1.0},
            headers=admin_headers,
        ).json()
        assert client.patch(f"/readings/{created['id']}", headers=admin_headers).status_code == 404
        assert client.delete(f"/readings/{created['id']}", headers=admin_headers).status_code == 404
