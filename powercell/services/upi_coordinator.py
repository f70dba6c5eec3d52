"""
UPI payment coordinator.

A UPI checkout parks the cart on a payment record until staff (or the
client's auto-confirm) say the money arrived, then turns it into a sale:

    pending --confirm--> received --finalise--> finalised

Each transition locks the payment row before checking its status.
"""
import logging
from typing import Dict, Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from powercell.core.config import settings
from powercell.core.exceptions import (
    ShopError, NotFoundError, ValidationError, AlreadyProcessedError, NotYetConfirmedError
)
from powercell.core.redis_client import cache_manager
from powercell.models.payments import UpiPayment, UpiPaymentStatus
from powercell.models.sales import PaymentMethod, Sale
from powercell.schemas.cart import CartPayload
from powercell.services.sales_engine import SaleTransactionEngine

logger = logging.getLogger(__name__)


def payment_idempotency_key(payment_id: int) -> str:
    return f"upi-payment:{payment_id}"


class UpiPaymentCoordinator:
    """Service driving UPI payments from creation to the sale they pay for."""

    def __init__(self):
        self.sales_engine = SaleTransactionEngine()

    async def create_intent(
        self,
        db: Session,
        amount: float,
        sale_data: CartPayload,
        invoice_state: Optional[Dict[str, Any]] = None
    ) -> UpiPayment:
        """Park a validated cart on a new pending payment."""
        if amount < 0:
            raise ValidationError(f"Amount must be non-negative, got {amount}")

        payment = UpiPayment(
            amount=amount,
            status=UpiPaymentStatus.PENDING,
            sale_data=sale_data.model_dump(mode="json"),
            invoice_state=invoice_state or {}
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)

        logger.info(f"UPI payment {payment.id} created for {amount}")
        return payment

    async def get_status(self, db: Session, payment_id: int) -> Dict[str, Any]:
        """Current status; polled by the checkout screen."""
        cache_key = self._status_key(payment_id)
        cached = cache_manager.get(cache_key)
        if cached is not None:
            return cached

        payment = db.query(UpiPayment).filter(UpiPayment.id == payment_id).first()
        if not payment:
            raise NotFoundError(f"UPI payment {payment_id} not found")

        status = {
            "id": payment.id,
            "status": payment.status.value,
            "sale_id": payment.sale_id,
            "poll_interval": settings.upi_poll_interval,
            "auto_confirm_delay": settings.upi_auto_confirm_delay,
        }
        # Only the terminal state is safe to serve from cache
        if payment.status == UpiPaymentStatus.FINALISED:
            cache_manager.set(cache_key, status, ttl=settings.status_cache_ttl)
        return status

    async def confirm(self, db: Session, payment_id: int, upi_ref: Optional[str] = None) -> UpiPayment:
        """
        Mark a pending payment as received. Does not create the sale.

        Raises:
            NotFoundError: unknown payment
            AlreadyProcessedError: payment is no longer pending
        """
        try:
            payment = self._lock_payment(db, payment_id)
            if payment.status != UpiPaymentStatus.PENDING:
                raise AlreadyProcessedError(payload={
                    "payment_id": payment.id,
                    "payment_status": payment.status.value
                })

            payment.status = UpiPaymentStatus.RECEIVED
            payment.upi_ref = upi_ref
            db.commit()
        except Exception:
            db.rollback()
            raise

        cache_manager.delete(self._status_key(payment_id))
        logger.info(f"UPI payment {payment_id} confirmed (ref={upi_ref})")
        return payment

    async def finalise(self, db: Session, payment_id: int) -> Sale:
        """
        Create the sale for a received payment and mark it finalised.

        The sale and the status change commit together. If the sale fails the
        payment stays received so the operator can retry. A payment that is
        already finalised is rejected with the id of the sale it produced.

        Raises:
            NotFoundError: unknown payment
            AlreadyProcessedError: payment already finalised
            NotYetConfirmedError: payment not received yet
        """
        try:
            payment = self._lock_payment(db, payment_id)

            if payment.status == UpiPaymentStatus.FINALISED:
                logger.warning(f"UPI payment {payment_id} finalised twice; sale {payment.sale_id} kept")
                raise AlreadyProcessedError("Payment already finalised.", payload={
                    "payment_id": payment.id,
                    "sale_id": payment.sale_id
                })
            if payment.status != UpiPaymentStatus.RECEIVED:
                raise NotYetConfirmedError(payload={
                    "payment_id": payment.id,
                    "payment_status": payment.status.value
                })

            cart = CartPayload.model_validate(payment.sale_data).model_copy(
                update={"payment_method": PaymentMethod.UPI}
            )
            sale, products = await self.sales_engine.apply_sale(
                db, cart, idempotency_key=payment_idempotency_key(payment.id)
            )

            payment.status = UpiPaymentStatus.FINALISED
            payment.sale_id = sale.id
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AlreadyProcessedError("Payment already finalised.", payload={"payment_id": payment_id})
        except ShopError:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to finalise UPI payment {payment_id}: {e}")
            raise

        self.sales_engine.inventory_ledger.cache_stock_levels(products)
        cache_manager.delete(self._status_key(payment_id))
        logger.info(f"UPI payment {payment_id} finalised as sale {sale.id}")
        return sale

    def _lock_payment(self, db: Session, payment_id: int) -> UpiPayment:
        payment = db.query(UpiPayment).filter(UpiPayment.id == payment_id).with_for_update().first()
        if not payment:
            raise NotFoundError(f"UPI payment {payment_id} not found")
        return payment

    def _status_key(self, payment_id: int) -> str:
        return f"upi_status:{payment_id}"
