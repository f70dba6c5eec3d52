"""
Sales API endpoints for recording counter sales and reading them back.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Header
from sqlalchemy.orm import Session

from powercell.core.database import get_db
from powercell.core.exceptions import ShopError
from powercell.schemas.cart import SaleRequest
from powercell.services.sales_engine import SaleTransactionEngine, sale_to_dict

router = APIRouter()
sales_engine = SaleTransactionEngine()


@router.post("", status_code=201)
async def create_sale(
    sale_data: SaleRequest,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db)
):
    """
    Record a sale.

    Creates the sale and its lines, takes the products out of stock and
    redeems the exchange credit in one transaction. Resubmitting with the same
    Idempotency-Key returns the original sale.
    """
    try:
        sale = await sales_engine.create_sale(db, sale_data, idempotency_key=idempotency_key)
        return sale_to_dict(sale)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to record sale: {str(e)}")


@router.get("")
async def list_sales(
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Most recent sales with their lines."""
    try:
        if limit > 500:
            limit = 500  # Cap for performance

        sales = await sales_engine.list_sales(db, limit=limit)
        return {
            "sales": [sale_to_dict(sale) for sale in sales],
            "count": len(sales)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get sales: {str(e)}")


@router.get("/{sale_id}")
async def get_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    """Sale details for the invoice screen."""
    try:
        sale = await sales_engine.get_sale(db, sale_id)
        return sale_to_dict(sale)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get sale: {str(e)}")
