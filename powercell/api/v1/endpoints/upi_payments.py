"""
UPI payment endpoints: create, poll, confirm and finalise.
"""
from typing import Dict, Any, Optional
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from powercell.core.database import get_db
from powercell.core.exceptions import ShopError
from powercell.schemas.cart import CartPayload
from powercell.services.upi_coordinator import UpiPaymentCoordinator

router = APIRouter()
upi_coordinator = UpiPaymentCoordinator()


class UpiPaymentRequest(BaseModel):
    """Request model for starting a UPI payment."""
    amount: float = Field(..., ge=0, description="Amount to collect")
    sale_data: CartPayload = Field(..., description="Cart to turn into a sale once paid")
    invoice_state: Optional[Dict[str, Any]] = Field(None, description="Invoice rendering state, stored as-is")


class UpiConfirmRequest(BaseModel):
    """Request model for confirming a UPI payment."""
    upi_ref: Optional[str] = Field(None, max_length=100, description="UPI transaction reference")


@router.post("", status_code=201)
async def create_payment(
    request: UpiPaymentRequest,
    db: Session = Depends(get_db)
):
    """Create a pending UPI payment for a cart."""
    try:
        payment = await upi_coordinator.create_intent(
            db,
            amount=request.amount,
            sale_data=request.sale_data,
            invoice_state=request.invoice_state
        )
        return {
            "id": payment.id,
            "amount": payment.amount,
            "status": payment.status.value
        }
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create UPI payment: {str(e)}")


@router.get("/{payment_id}/status")
async def get_payment_status(
    payment_id: int,
    db: Session = Depends(get_db)
):
    """Poll the status of a UPI payment."""
    try:
        return await upi_coordinator.get_status(db, payment_id)
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get UPI payment status: {str(e)}")


@router.post("/{payment_id}/confirm")
async def confirm_payment(
    payment_id: int,
    request: Optional[UpiConfirmRequest] = None,
    db: Session = Depends(get_db)
):
    """
    Confirm that the UPI payment was received.

    Called by staff at the counter, or by the checkout screen a few seconds
    after the customer returns from their UPI app.
    """
    try:
        upi_ref = request.upi_ref if request else None
        payment = await upi_coordinator.confirm(db, payment_id, upi_ref=upi_ref)
        return {"id": payment.id, "status": payment.status.value}
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to confirm UPI payment: {str(e)}")


@router.post("/{payment_id}/finalise", status_code=201)
async def finalise_payment(
    payment_id: int,
    db: Session = Depends(get_db)
):
    """Create the sale for a confirmed UPI payment."""
    try:
        sale = await upi_coordinator.finalise(db, payment_id)
        return {"sale_id": sale.id, "status": "finalised"}
    except ShopError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to finalise UPI payment: {str(e)}")
