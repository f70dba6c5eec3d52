"""
Tests for the Inventory Ledger service.
"""
import pytest

from powercell.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from powercell.models import StockMovement, StockMovementType
from powercell.services.inventory_ledger import InventoryLedger


@pytest.fixture
def ledger():
    return InventoryLedger()


@pytest.mark.asyncio
async def test_reserve_stock_decrements(ledger, db, make_product):
    product = make_product(stock=5)

    result = await ledger.reserve_stock(db, product.id, 3, reference_id="17")
    db.commit()

    assert result["previous_quantity"] == 5
    assert result["new_quantity"] == 2
    db.refresh(product)
    assert product.stock == 2


@pytest.mark.asyncio
async def test_reserve_stock_message_names_battery(ledger, db, make_product):
    product = make_product(brand="Amaron", model="AAM-PR-45", stock=1)

    with pytest.raises(InsufficientStockError) as exc_info:
        await ledger.reserve_stock(db, product.id, 2)

    assert "Amaron AAM-PR-45" in exc_info.value.message
    assert exc_info.value.payload == {"product_id": product.id, "requested": 2, "available": 1}
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_reserve_exact_stock_allowed(ledger, db, make_product):
    product = make_product(stock=2)
    await ledger.reserve_stock(db, product.id, 2)
    db.commit()
    db.refresh(product)
    assert product.stock == 0


@pytest.mark.asyncio
async def test_reserve_rejects_bad_input(ledger, db, make_product):
    product = make_product(stock=2)
    with pytest.raises(ValidationError):
        await ledger.reserve_stock(db, product.id, 0)
    with pytest.raises(NotFoundError):
        await ledger.reserve_stock(db, 999, 1)


@pytest.mark.asyncio
async def test_adjust_stock_restocks(ledger, db, make_product):
    product = make_product(stock=1)

    result = await ledger.adjust_stock(db, product.id, 10, StockMovementType.PURCHASE, notes="Weekly delivery")

    assert result["new_quantity"] == 11
    movement = db.query(StockMovement).one()
    assert movement.movement_type == StockMovementType.PURCHASE
    assert movement.notes == "Weekly delivery"


@pytest.mark.asyncio
async def test_adjust_stock_cannot_go_negative(ledger, db, make_product):
    product = make_product(stock=1)

    with pytest.raises(InsufficientStockError):
        await ledger.adjust_stock(db, product.id, -2)

    db.refresh(product)
    assert product.stock == 1
    assert db.query(StockMovement).count() == 0


@pytest.mark.asyncio
async def test_adjust_stock_refuses_sale_movements(ledger, db, make_product):
    product = make_product(stock=1)
    with pytest.raises(ValidationError):
        await ledger.adjust_stock(db, product.id, -1, StockMovementType.SALE)


@pytest.mark.asyncio
async def test_low_stock_products(ledger, db, make_product):
    make_product(model="OK", stock=10, min_stock=5)
    low = make_product(model="LOW", stock=3, min_stock=5)
    make_product(model="AT-MIN", stock=5, min_stock=5)

    result = await ledger.get_low_stock_products(db)

    assert [row["product_id"] for row in result] == [low.id]
    assert result[0]["shortfall"] == 2


@pytest.mark.asyncio
async def test_stock_movements_newest_first(ledger, db, make_product):
    product = make_product(stock=5)
    await ledger.adjust_stock(db, product.id, 1)
    await ledger.adjust_stock(db, product.id, 2)

    movements = await ledger.get_stock_movements(db, product_id=product.id)

    assert [m["quantity"] for m in movements] == [2, 1]
    assert movements[0]["product_name"] == "Exide EPIQ65"
