"""
Shared fixtures: an in-memory SQLite database, a TestClient wired to it and
a builder for booking-export workbooks.
"""

import io
import os
from datetime import datetime

# Settings are read on import, so the environment has to be in place first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tickmypax import models  # noqa: F401
from tickmypax.database import Base, get_db
from tickmypax.main import app
from tickmypax.models.passenger_record import PassengerRecord
from tickmypax.models.user import User, UserRole
from tickmypax.utils.dependencies import get_current_user

HEADER = [
    "Booking", "Tour Date", "Tour Type", "Seats", "Surname", "First Name",
    "Pax", "Email", "Unique Ref", "Other Ref", "Phone", "Notes",
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def guide_user():
    """Principal returned by the overridden auth dependency"""
    return User(
        id="guide-1",
        email="anna@tickmypax.com",
        user_name="Anna",
        hashed_password="not-used",
        role=UserRole.GUIDE.value,
        is_active=True,
    )


@pytest.fixture
def anonymous_client(session_factory):
    """TestClient on the test database with real authentication"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client, guide_user):
    """TestClient already signed in as guide_user"""
    app.dependency_overrides[get_current_user] = lambda: guide_user
    return anonymous_client


@pytest.fixture
def add_record(db):
    """Insert an active passenger record and return it"""

    def _add(**overrides):
        values = dict(
            tour_date=datetime(2025, 4, 15, 9, 30),
            tour_type="Dublin",
            surname="Murphy",
            first_name="Sean",
            pax=2,
            unique_reference=None,
            checked_in=False,
            checked_in_by=None,
        )
        values.update(overrides)
        values.setdefault("original_pax", values["pax"])
        record = PassengerRecord(**values)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _add


def booking_row(tour_date="15.04.2025 09:30:00", tour_type="Dublin", surname="Murphy",
                first_name="Sean", pax=2, unique_ref=None, email=None, phone=None,
                seats=None, notes=None):
    """One data row laid out like the booking export (columns A-L)"""
    return [
        None, tour_date, tour_type, seats, surname, first_name,
        pax, email, unique_ref, None, phone, notes,
    ]


def workbook_bytes(rows, header=HEADER) -> bytes:
    wb = Workbook()
    ws = wb.active
    if header is not None:
        ws.append(header)
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
