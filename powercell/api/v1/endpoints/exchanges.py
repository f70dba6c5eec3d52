"""
Exchange API endpoints for valuing old batteries and tracking credits.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from powercell.core.database import get_db
from powercell.core.exceptions import ShopError
from powercell.services.exchange_store import ExchangeCreditStore, estimate_value, exchange_to_dict

router = APIRouter()
exchange_store = ExchangeCreditStore()


class ExchangeCreateRequest(BaseModel):
    """Request model for recording an old battery valuation."""
    customer_name: str = Field(..., min_length=1, description="Customer name")
    customer_phone: Optional[str] = Field(None, description="Customer phone")
    customer_address: Optional[str] = Field(None, description="Customer address")
    battery_brand: str = Field(..., min_length=1, description="Old battery brand")
    battery_model: Optional[str] = Field(None, description="Old battery model")
    valuation_amount: float = Field(..., ge=0, description="Credit granted")


class ValuationRequest(BaseModel):
    """Request model for estimating an old battery's value."""
    weight_kg: float = Field(..., ge=0, description="Battery weight in kg")
    condition: str = Field("Good", description="Excellent, Good, Fair or Poor")
    age_years: float = Field(0, ge=0, description="Battery age in years")


@router.post("", status_code=201)
async def create_exchange(
    request: ExchangeCreateRequest,
    db: Session = Depends(get_db)
):
    """Record an exchange credit for an old battery."""
    try:
        record = await exchange_store.create_record(db, request.model_dump())
        return exchange_to_dict(record)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create exchange record: {str(e)}")


@router.get("")
async def list_exchanges(db: Session = Depends(get_db)):
    """All exchange records, newest first."""
    try:
        records = await exchange_store.list_records(db)
        return [exchange_to_dict(record) for record in records]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get exchange records: {str(e)}")


@router.get("/pending")
async def list_pending_exchanges(
    customer_name: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Credits not yet redeemed, optionally filtered by customer name."""
    try:
        records = await exchange_store.list_pending(db, customer_name=customer_name)
        return [exchange_to_dict(record) for record in records]
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get pending exchanges: {str(e)}")


@router.post("/valuation")
async def estimate_exchange_value(request: ValuationRequest):
    """Suggested credit for an old battery."""
    value = estimate_value(request.weight_kg, request.condition, request.age_years)
    return {"valuation_amount": value}


@router.get("/{record_id}")
async def get_exchange(
    record_id: int,
    db: Session = Depends(get_db)
):
    try:
        record = await exchange_store.get_record(db, record_id)
        return exchange_to_dict(record)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get exchange record: {str(e)}")
