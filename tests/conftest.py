"""Shared fixtures: in-memory database, users, tokens and a fake Webpay gateway."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parcelhub import models  # noqa: F401
from parcelhub.core.database import Base, get_db
from parcelhub.main import app
from parcelhub.models.enums import Role
from parcelhub.models.invoice import Invoice
from parcelhub.models.parcel import Parcel
from parcelhub.models.user import User
from parcelhub.services.auth import create_user_token, get_password_hash
from parcelhub.services.parcel import add_parcel_owner
from parcelhub.services.webpay import WebpayCommitResult, WebpayTransaction, get_webpay_client


class FakeWebpay:
    """Stand-in for WebpayClient that records calls and returns canned results."""

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.committed: list[str] = []
        self.commit_status = "AUTHORIZED"
        self.commit_response_code = 0
        self.commit_amount: int | None = None  # None: echo the created amount
        self.error: Exception | None = None

    def create_transaction(self, *, buy_order, session_id, amount, return_url):
        if self.error:
            raise self.error
        self.created.append(
            {
                "buy_order": buy_order,
                "session_id": session_id,
                "amount": amount,
                "return_url": return_url,
            }
        )
        token = f"tok-{len(self.created)}"
        return WebpayTransaction(token=token, url="https://webpay.test/init")

    def commit_transaction(self, token):
        if self.error:
            raise self.error
        self.committed.append(token)
        created = self.created[int(token.split("-")[1]) - 1]
        return WebpayCommitResult(
            status=self.commit_status,
            response_code=self.commit_response_code,
            amount=self.commit_amount if self.commit_amount is not None else created["amount"],
            buy_order=created["buy_order"],
            session_id=created["session_id"],
            authorization_code="1213",
            card_number="6623",
            payment_type_code="VD",
            installments_number=0,
        )


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def fake_webpay():
    """A fake Webpay gateway."""
    return FakeWebpay()


@pytest.fixture
def client(test_db, fake_webpay):
    """Create a test client with database and gateway overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_webpay_client] = lambda: fake_webpay
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, rut: str, name: str, role: Role) -> User:
    user = User(
        rut=rut,
        name=name,
        email=f"{rut}@example.com",
        hashed_password=get_password_hash("testpassword123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(test_db):
    """An administrator."""
    return _make_user(test_db, "11111111-1", "Admin", Role.ADMIN)


@pytest.fixture
def owner_user(test_db):
    """A parcel owner who owns ``parcel``."""
    return _make_user(test_db, "22222222-2", "Owner", Role.PARCEL_OWNER)


@pytest.fixture
def other_owner(test_db):
    """A parcel owner who owns nothing in the fixtures."""
    return _make_user(test_db, "33333333-3", "Other Owner", Role.PARCEL_OWNER)


@pytest.fixture
def resident_user(test_db):
    """A user with a role that has no access to payments."""
    return _make_user(test_db, "44444444-4", "Resident", Role.RESIDENT)


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def owner_headers(owner_user):
    return auth_headers(owner_user)


@pytest.fixture
def other_headers(other_owner):
    return auth_headers(other_owner)


@pytest.fixture
def parcel(test_db, owner_user):
    """A parcel owned by ``owner_user``."""
    db_parcel = Parcel(name="Parcela 12", address="Camino Los Robles km 3")
    test_db.add(db_parcel)
    test_db.commit()
    test_db.refresh(db_parcel)
    add_parcel_owner(test_db, db_parcel.id, owner_user.id)
    return db_parcel


@pytest.fixture
def invoice(test_db, parcel):
    """A pending invoice of 30000 CLP on ``parcel``."""
    db_invoice = Invoice(parcel_id=parcel.id, amount=30000, description="Agua enero")
    test_db.add(db_invoice)
    test_db.commit()
    test_db.refresh(db_invoice)
    return db_invoice


@pytest.fixture
def headers_for():
    """Build bearer headers for any user."""
    return auth_headers
