"""
Test configuration and fixtures.

Tests run against an in-memory SQLite database (one shared connection via
StaticPool). Tables are created and dropped around every test, outbound
email is patched, and file storage points at a per-test temp directory.
"""

import os
from datetime import date, datetime, timedelta, timezone
from typing import Generator
from unittest.mock import patch

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["EMAIL_SERVICE"] = "console"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from motorent.config import settings
from motorent.database import Base, SessionLocal, engine, get_db
from motorent.models import (
    AdminUser, AdminRole, AuthAccount, DocumentVerification, DocumentType, DocumentStatus,
    Motorcycle, Availability, Reservation, ReservationStatus, Transaction, TransactionType,
    TransactionStatus, User,
)
from motorent.utils.security import create_access_token, hash_password

PASSWORD = "Password1"


@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    root = tmp_path / "storage"
    monkeypatch.setattr(settings, "STORAGE_ROOT", str(root))
    return root


@pytest.fixture(autouse=True)
def sent_emails():
    """Every outbound email lands on this mock instead of a provider."""
    with patch("motorent.services.email_service.send_email") as mock_send:
        mock_send.return_value = {"success": True, "mode": "test"}
        yield mock_send


@pytest.fixture
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    from motorent.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


# ─── Factories ────────────────────────────────────────────────────────────────
def create_customer(
    db: Session, email: str = "juan@example.com", name: str = "Juan Dela Cruz",
    username: str | None = "juan", verified: bool = True, with_account: bool = True,
) -> User:
    user = User(name=name, email=email, username=username, phone="09171234567")
    db.add(user)
    db.flush()
    if with_account:
        db.add(AuthAccount(
            id=user.id,
            email=email,
            password_hash=hash_password(PASSWORD),
            email_confirmed_at=datetime.now(timezone.utc) if verified else None,
            user_metadata={"name": name, "username": username},
        ))
    db.commit()
    return user


def create_admin(db: Session, email: str = "admin@example.com", role: AdminRole = AdminRole.ADMIN) -> AdminUser:
    admin = AdminUser(email=email, name="Shop Admin", role=role)
    db.add(admin)
    db.add(AuthAccount(
        email=email,
        password_hash=hash_password(PASSWORD),
        email_confirmed_at=datetime.now(timezone.utc),
        user_metadata={"name": "Shop Admin"},
    ))
    db.commit()
    return admin


def create_motorcycle(db: Session, name: str = "Honda Click 125i", price: float = 500.0, **kwargs) -> Motorcycle:
    bike = Motorcycle(name=name, brand="Honda", type="Scooter", price_per_day=price, features=[], **kwargs)
    db.add(bike)
    db.commit()
    return bike


def create_reservation(
    db: Session, user: User, bike: Motorcycle,
    status: ReservationStatus = ReservationStatus.PENDING, days_ahead: int = 3, length: int = 2,
) -> Reservation:
    start = date.today() + timedelta(days=days_ahead)
    r = Reservation(
        user_id=user.id,
        motorcycle_id=bike.id,
        start_date=start,
        end_date=start + timedelta(days=length),
        total_price=bike.price_per_day * length * 1.2,
        status=status,
        customer_name=user.name,
        customer_email=user.email,
        payment_method="cash",
    )
    db.add(r)
    db.flush()
    db.add(Transaction(
        user_id=user.id,
        reservation_id=r.id,
        type=TransactionType.PAYMENT,
        amount=r.total_price,
        status=TransactionStatus.PENDING,
    ))
    db.commit()
    return r


def create_document(
    db: Session, user: User, document_type: DocumentType = DocumentType.DRIVER_LICENSE,
    status: DocumentStatus = DocumentStatus.PENDING,
) -> DocumentVerification:
    doc = DocumentVerification(
        user_id=user.id,
        document_type=document_type,
        document_url=f"{user.id}/{document_type.value}-1700000000000-license.jpg",
        status=status,
    )
    db.add(doc)
    db.commit()
    return doc


def bearer(subject_id: str, role: str = "user") -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject_id, role)}"}


# ─── Common fixtures ──────────────────────────────────────────────────────────
@pytest.fixture
def customer(db) -> User:
    return create_customer(db)


@pytest.fixture
def admin(db) -> AdminUser:
    return create_admin(db)


@pytest.fixture
def motorcycle(db) -> Motorcycle:
    return create_motorcycle(db)


@pytest.fixture
def customer_headers(customer) -> dict:
    return bearer(customer.id)


@pytest.fixture
def admin_headers(admin) -> dict:
    return bearer(admin.id, admin.role.value)
