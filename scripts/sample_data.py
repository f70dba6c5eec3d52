#!/usr/bin/env python3
"""
Sample data population script for PowerCell.
Creates sample batteries, a service job and an exchange credit for demonstration.
"""
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from powercell.core.database import get_db_context, init_db
from powercell.models.inventory import Product
from powercell.models.services import ServiceJob, ServiceStatus
from powercell.models.exchanges import ExchangeRecord, ExchangeStatus


SAMPLE_PRODUCTS = [
    {"brand": "Exide", "model": "FEP0-EPIQ65D26R", "capacity_ah": "65", "category": "Car",
     "stock": 24, "min_stock": 10, "price": 8500},
    {"brand": "Amaron", "model": "AAM-PR-00055B24L", "capacity_ah": "45", "category": "Car",
     "stock": 18, "min_stock": 15, "price": 6200},
    {"brand": "Luminous", "model": "ILTT 18048", "capacity_ah": "150", "category": "Inverter",
     "stock": 12, "min_stock": 8, "price": 14500},
    {"brand": "Exide", "model": "XPLORE XLTZ5", "capacity_ah": "5", "category": "Bike",
     "stock": 30, "min_stock": 12, "price": 1450},
    {"brand": "Amaron", "model": "Current Tubular AR150TT54", "capacity_ah": "150", "category": "Inverter",
     "stock": 6, "min_stock": 8, "price": 15800},
]


def create_sample_products(db):
    """Create sample products unless the catalogue already has data."""
    if db.query(Product).count():
        print("Products already present, skipping")
        return
    for product_data in SAMPLE_PRODUCTS:
        db.add(Product(**product_data))
    db.commit()
    print(f"Created {len(SAMPLE_PRODUCTS)} products")


def create_sample_service_and_exchange(db):
    """Create one service job and one exchange credit unless either table has data."""
    if db.query(ServiceJob).count() or db.query(ExchangeRecord).count():
        print("Service jobs or exchange records already present, skipping")
        return
    db.add(ServiceJob(
        customer_name="Ravi Kumar",
        contact_number="9876543210",
        vehicle_details="Maruti Swift KA-01-AB-1234",
        battery_brand="Exide",
        status=ServiceStatus.COMPLETED,
        service_charge=350
    ))
    db.add(ExchangeRecord(
        customer_name="Ravi Kumar",
        customer_phone="9876543210",
        battery_brand="Amaron",
        battery_model="Go 35Ah",
        valuation_amount=1200,
        status=ExchangeStatus.PENDING
    ))
    db.commit()
    print("Created a completed service job and a pending exchange credit")


def main():
    init_db()
    with get_db_context() as db:
        create_sample_products(db)
        create_sample_service_and_exchange(db)
    print("Sample data ready")


if __name__ == "__main__":
    main()
