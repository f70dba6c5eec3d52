"""
Tests for the sample data script.
"""
from powercell.models import ExchangeRecord, Product, ServiceJob
from scripts.sample_data import SAMPLE_PRODUCTS, create_sample_products, create_sample_service_and_exchange


def test_seeding_twice_adds_nothing(db):
    for _ in range(2):
        create_sample_products(db)
        create_sample_service_and_exchange(db)

    assert db.query(Product).count() == len(SAMPLE_PRODUCTS)
    assert db.query(ServiceJob).count() == 1
    assert db.query(ExchangeRecord).count() == 1
