"""
Inventory API endpoints for the battery catalogue and stock levels.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from powercell.core.database import get_db
from powercell.core.exceptions import ShopError
from powercell.models.inventory import StockMovementType
from powercell.services.inventory_ledger import InventoryLedger, product_to_dict

products_router = APIRouter()
router = APIRouter()
inventory_ledger = InventoryLedger()


class ProductCreateRequest(BaseModel):
    """Request model for adding a battery to the catalogue."""
    brand: str = Field(..., min_length=1, description="Brand")
    model: str = Field(..., min_length=1, description="Model number")
    category: str = Field(..., min_length=1, description="Car, Bike, Inverter, ...")
    capacity_ah: str = Field(..., description="Capacity rating in Ah")
    price: float = Field(..., ge=0, description="Unit price")
    stock: int = Field(0, ge=0, description="Opening stock")
    min_stock: int = Field(0, ge=0, description="Minimum stock before restocking")


class StockUpdateRequest(BaseModel):
    """Request model for updating stock levels."""
    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., description="Quantity to add/subtract")
    movement_type: str = Field("adjustment", description="Type of movement (purchase, adjustment, return)")
    notes: Optional[str] = Field(None, description="Additional notes")


@products_router.get("")
async def list_products(
    category: Optional[str] = None,
    db: Session = Depends(get_db)
):
    try:
        products = await inventory_ledger.list_products(db, category=category)
        return [product_to_dict(product) for product in products]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get products: {str(e)}")


@products_router.post("", status_code=201)
async def create_product(
    request: ProductCreateRequest,
    db: Session = Depends(get_db)
):
    try:
        product = await inventory_ledger.create_product(db, request.model_dump())
        return product_to_dict(product)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create product: {str(e)}")


@products_router.get("/{product_id}")
async def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    try:
        product = await inventory_ledger.get_product(db, product_id)
        return product_to_dict(product)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get product: {str(e)}")


@router.put("/update")
async def update_stock_level(
    stock_update: StockUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Adjust stock level for a product.

    Administrative restock or correction; sales take stock through checkout.
    """
    try:
        # Validate movement type
        try:
            movement_type = StockMovementType(stock_update.movement_type)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid movement type: {stock_update.movement_type}")

        return await inventory_ledger.adjust_stock(
            db,
            product_id=stock_update.product_id,
            quantity=stock_update.quantity,
            movement_type=movement_type,
            notes=stock_update.notes
        )
    except (HTTPException, ShopError):
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update stock level: {str(e)}")


@router.get("/low-stock")
async def get_low_stock_products(db: Session = Depends(get_db)):
    """Products below their minimum stock."""
    try:
        low_stock_products = await inventory_ledger.get_low_stock_products(db)
        return {
            "products": low_stock_products,
            "count": len(low_stock_products)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get low stock products: {str(e)}")


@router.get("/movements")
async def get_stock_movements(
    product_id: Optional[int] = None,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Stock movement history."""
    try:
        if limit > 500:
            limit = 500  # Cap for performance

        movements = await inventory_ledger.get_stock_movements(db, product_id=product_id, limit=limit)
        return {
            "movements": movements,
            "count": len(movements)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get stock movements: {str(e)}")
