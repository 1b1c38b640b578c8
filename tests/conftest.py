# tests/conftest.py
"""Shared fixtures: in-memory SQLite, a TestClient wired to it, driver factory."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="rideboard-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.models.driver import Driver  # noqa
from app.schemas.driver import DriverRegister
from app.services.code_map import CodeMap
from app.services.driver_service import register_driver


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
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def code_map():
    return CodeMap(settings.LOCATION_CODES)


@pytest.fixture
def make_driver(db):
    def _make(phone="9999999999", password="secret123", name="Ravi", vehicle_type="Auto",
              vehicle_number="UP78 AB 1234"):
        data = DriverRegister(
            name=name,
            phone=phone,
            password=password,
            vehicleType=vehicle_type,
            vehicleNumber=vehicle_number,
        )
        return register_driver(db, data)
    return _make


@pytest.fixture
def client(engine):
    from app.main import app

    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
