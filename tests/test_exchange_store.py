"""
Tests for the Exchange Credit Store and buy-back valuation.
"""
import pytest

from powercell.core.exceptions import ExchangeAlreadyConsumedError, NotFoundError, ValidationError
from powercell.models import ExchangeStatus
from powercell.services.exchange_store import ExchangeCreditStore, estimate_value


@pytest.fixture
def store():
    return ExchangeCreditStore()


@pytest.mark.asyncio
async def test_create_record_is_pending(store, db):
    record = await store.create_record(db, {
        "customer_name": "Anita",
        "battery_brand": "Exide",
        "valuation_amount": 900,
    })
    assert record.status == ExchangeStatus.PENDING
    assert record.id is not None


@pytest.mark.asyncio
async def test_list_pending_filters_and_orders(store, db, make_exchange):
    older = make_exchange(customer_name="Ravi Kumar")
    make_exchange(customer_name="Sunil", status=ExchangeStatus.CONSUMED)
    newer = make_exchange(customer_name="Kumaravel")
    make_exchange(customer_name="Anita")

    pending = await store.list_pending(db, customer_name="kumar")

    assert [r.id for r in pending] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_list_pending_without_filter(store, db, make_exchange):
    make_exchange(customer_name="A")
    make_exchange(customer_name="B", status=ExchangeStatus.CONSUMED)

    pending = await store.list_pending(db)

    assert [r.customer_name for r in pending] == ["A"]


@pytest.mark.asyncio
async def test_consume_twice_fails(store, db, make_exchange):
    record = make_exchange()

    await store.consume(db, record.id)
    db.commit()

    with pytest.raises(ExchangeAlreadyConsumedError):
        await store.consume(db, record.id)

    db.refresh(record)
    assert record.status == ExchangeStatus.CONSUMED


@pytest.mark.asyncio
async def test_consume_missing(store, db):
    with pytest.raises(NotFoundError):
        await store.consume(db, 12)


@pytest.mark.parametrize("weight, condition, age, expected", [
    (10, "Good", 0, 1500),
    (10, "Good", 2, 1200),
    (12, "Excellent", 0, 2160),
    (10, "Poor", 5, 300),
    (10, "Fair", 12, 0),
])
def test_estimate_value(weight, condition, age, expected):
    assert estimate_value(weight, condition, age) == expected


def test_estimate_value_rejects_unknown_condition():
    with pytest.raises(ValidationError):
        estimate_value(10, "Broken", 1)
