"""
Sale Transaction Engine: turns a validated cart into a persisted sale.

A sale, its line items, the stock it takes and the exchange credit it redeems
are written in one transaction; any failure leaves none of them behind.
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from powercell.core.exceptions import ShopError, NotFoundError, ServiceNotBillableError
from powercell.models.inventory import Product
from powercell.models.sales import Sale, SaleItem
from powercell.models.services import ServiceJob, ServiceStatus
from powercell.schemas.cart import CartPayload, ProductLine, WALK_IN_CUSTOMER
from powercell.services.exchange_store import ExchangeCreditStore
from powercell.services.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


def sale_to_dict(sale: Sale) -> Dict[str, Any]:
    """Sale with its lines and their product / service details joined in."""
    items = []
    for item in sale.items:
        line = {
            "id": item.id,
            "product_id": item.product_id,
            "service_id": item.service_id,
            "quantity": item.quantity,
            "price": item.price,
            "line_total": item.line_total,
            "product": None,
            "service": None,
        }
        if item.product is not None:
            line["product"] = {
                "id": item.product.id,
                "brand": item.product.brand,
                "model": item.product.model,
                "category": item.product.category,
                "capacity_ah": item.product.capacity_ah,
            }
        if item.service is not None:
            line["service"] = {
                "id": item.service.id,
                "vehicle_details": item.service.vehicle_details,
                "status": item.service.status.value,
            }
        items.append(line)

    return {
        "id": sale.id,
        "customer_name": sale.customer_name,
        "customer_phone": sale.customer_phone,
        "vehicle_details": sale.vehicle_details,
        "installation_address": sale.installation_address,
        "product_category": sale.product_category,
        "sale_type": sale.sale_type.value,
        "payment_method": sale.payment_method.value,
        "total_amount": sale.total_amount,
        "extra_charges": sale.extra_charges,
        "discount_amount": sale.discount_amount,
        "exchange_record_id": sale.exchange_record_id,
        "created_at": sale.created_at.isoformat() if sale.created_at else None,
        "items": items,
    }


class SaleTransactionEngine:
    """Service for recording counter sales atomically."""

    def __init__(self):
        self.inventory_ledger = InventoryLedger()
        self.exchange_store = ExchangeCreditStore()

    async def create_sale(
        self,
        db: Session,
        cart: CartPayload,
        idempotency_key: Optional[str] = None
    ) -> Sale:
        """
        Record a sale and all of its side effects, then commit.

        Args:
            db: Database session
            cart: Validated cart
            idempotency_key: Optional client token; a sale already recorded
                under the same key is returned instead of creating another

        Returns:
            The persisted Sale with its items

        Raises:
            NotFoundError: a product, service job or exchange record is missing
            InsufficientStockError: a product line exceeds stock
            ExchangeAlreadyConsumedError: the exchange credit was already redeemed
        """
        if idempotency_key:
            existing = self._find_by_key(db, idempotency_key)
            if existing:
                logger.info(f"Sale {existing.id} already recorded under key {idempotency_key}")
                return existing

        try:
            sale, products = await self.apply_sale(db, cart, idempotency_key=idempotency_key)
            db.commit()
        except IntegrityError:
            db.rollback()
            # Lost a race against a request carrying the same key
            existing = self._find_by_key(db, idempotency_key) if idempotency_key else None
            if existing:
                logger.info(f"Sale {existing.id} already recorded under key {idempotency_key}")
                return existing
            raise
        except ShopError:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to record sale: {e}")
            raise

        self.inventory_ledger.cache_stock_levels(products)
        logger.info(f"Sale recorded successfully: {sale.id} ({sale.payment_method.value}, {sale.total_amount})")
        return sale

    async def apply_sale(
        self,
        db: Session,
        cart: CartPayload,
        idempotency_key: Optional[str] = None
    ) -> Tuple[Sale, List[Product]]:
        """
        Write the sale into the current transaction without committing.

        Callers that need more changes in the same unit of work (UPI
        finalisation) call this directly and commit themselves.
        """
        sale = Sale(
            customer_name=cart.customer_name or WALK_IN_CUSTOMER,
            customer_phone=cart.customer_phone,
            vehicle_details=cart.vehicle_details,
            installation_address=cart.installation_address,
            product_category=cart.product_category,
            sale_type=cart.sale_type,
            payment_method=cart.payment_method,
            total_amount=cart.total_amount,
            extra_charges=cart.extra_charges,
            discount_amount=cart.discount_amount,
            idempotency_key=idempotency_key
        )
        db.add(sale)
        db.flush()  # Get the sale ID

        if cart.exchange_record_id is not None:
            record = await self.exchange_store.consume(db, cart.exchange_record_id)
            sale.exchange_record_id = record.id

        products = []
        billed_services = set()
        for line in cart.items:
            if isinstance(line, ProductLine):
                await self.inventory_ledger.reserve_stock(
                    db,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    reference_id=str(sale.id)
                )
                products.append(db.get(Product, line.product_id))
            else:
                self._require_service(db, line.service_id, billed_services)

        for line in cart.items:
            db.add(SaleItem(
                sale_id=sale.id,
                product_id=getattr(line, "product_id", None),
                service_id=getattr(line, "service_id", None),
                quantity=line.quantity,
                price=line.price
            ))

        db.flush()
        return sale, products

    async def get_sale(self, db: Session, sale_id: int) -> Sale:
        sale = db.query(Sale).options(selectinload(Sale.items)).filter(Sale.id == sale_id).first()
        if not sale:
            raise NotFoundError(f"Sale {sale_id} not found")
        return sale

    async def list_sales(self, db: Session, limit: int = 100) -> List[Sale]:
        """Most recent sales first."""
        return db.query(Sale).options(selectinload(Sale.items)).order_by(
            desc(Sale.created_at), desc(Sale.id)
        ).limit(limit).all()

    def _find_by_key(self, db: Session, idempotency_key: str) -> Optional[Sale]:
        return db.query(Sale).filter(Sale.idempotency_key == idempotency_key).first()

    def _require_service(self, db: Session, service_id: int, billed: set) -> ServiceJob:
        """Lock a service job and check it can be billed on this sale."""
        job = db.query(ServiceJob).filter(ServiceJob.id == service_id).with_for_update().first()
        if not job:
            raise NotFoundError(f"Service job {service_id} not found", payload={"service_id": service_id})
        if job.status != ServiceStatus.COMPLETED:
            raise ServiceNotBillableError(
                f"Service job {service_id} is {job.status.value}, only completed jobs can be billed",
                payload={"service_id": service_id, "service_status": job.status.value}
            )

        already_billed = service_id in billed or db.query(SaleItem.id).filter(
            SaleItem.service_id == service_id
        ).first() is not None
        if already_billed:
            raise ServiceNotBillableError(
                f"Service job {service_id} has already been billed",
                payload={"service_id": service_id}
            )
        billed.add(service_id)
        return job
