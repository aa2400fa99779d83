import itertools
import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# In-memory SQLite so app import doesn't need a running Postgres
os.environ.setdefault("DATABASE_URL", "sqlite://")

from apps.api.main import app  # noqa: E402
from apps.core.db import Base, get_db  # noqa: E402
from apps.vendors.models import Vendor  # noqa: E402

# Pune, used as the default search origin in tests
ORIGIN = (18.5204, 73.8567)
KM_PER_DEGREE_LAT = 6371.0 * 3.141592653589793 / 180.0


def lat_offset(km: float) -> float:
    """Latitude delta that is ``km`` kilometers due north of ORIGIN."""
    return ORIGIN[0] + km / KM_PER_DEGREE_LAT


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def add_vendor(db_session):
    """Insert a verified vendor; keyword arguments override column values."""
    counter = itertools.count(1)

    def _add(**fields) -> Vendor:
        n = next(counter)
        values = {
            "full_name": f"Owner {n}",
            "email": f"vendor{n}@example.com",
            "business_name": f"Vendor {n}",
            "vendor_type": "venue",
            "is_verified": True,
            "priority": 0,
            "details": {},
            "created_at": datetime(2024, 1, 1) + timedelta(days=n),
        }
        values.update(fields)
        vendor = Vendor(**values)
        db_session.add(vendor)
        db_session.commit()
        db_session.refresh(vendor)
        return vendor

    return _add


def record(**fields):
    """Plain vendor record as the store returns it."""
    base = {
        "id": fields.pop("id", 1),
        "businessName": "Vendor",
        "vendorType": "venue",
        "isVerified": True,
        "priority": 0,
        "details": {},
        "createdAt": "2024-01-01T00:00:00",
    }
    base.update(fields)
    return base
