"""
Shared fixtures: an in-memory SQLite database rebuilt for every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from powercell.core.database import Base, engine, SessionLocal, get_db
from powercell.main import app
from powercell.models import Product, ServiceJob, ServiceStatus, ExchangeRecord, ExchangeStatus
from powercell.schemas.cart import CartPayload


@pytest.fixture
def db():
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """API client sharing the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(db):
    def _make(**overrides):
        data = {
            "brand": "Exide",
            "model": "EPIQ65",
            "category": "Car",
            "capacity_ah": "65",
            "price": 100.0,
            "stock": 5,
            "min_stock": 2,
        }
        data.update(overrides)
        product = Product(**data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_exchange(db):
    def _make(**overrides):
        data = {
            "customer_name": "Ravi Kumar",
            "customer_phone": "9876543210",
            "battery_brand": "Amaron",
            "valuation_amount": 500.0,
            "status": ExchangeStatus.PENDING,
        }
        data.update(overrides)
        record = ExchangeRecord(**data)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _make


@pytest.fixture
def make_service(db):
    def _make(**overrides):
        data = {
            "customer_name": "Ravi Kumar",
            "contact_number": "9876543210",
            "vehicle_details": "Maruti Swift",
            "status": ServiceStatus.COMPLETED,
            "service_charge": 350.0,
        }
        data.update(overrides)
        job = ServiceJob(**data)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job
    return _make


@pytest.fixture
def make_cart():
    def _make(items, total_amount, **extra):
        return CartPayload(
            customer_name=extra.pop("customer_name", "Ravi Kumar"),
            items=items,
            total_amount=total_amount,
            **extra
        )
    return _make
