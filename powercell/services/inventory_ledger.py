"""
Inventory Ledger service: battery stock counts and their movements.
"""
import logging
from typing import List, Dict, Any, Optional, Iterable
from datetime import datetime

from sqlalchemy.orm import Session
from sqlalchemy import desc

from powercell.core.config import settings
from powercell.core.exceptions import NotFoundError, InsufficientStockError, ValidationError
from powercell.core.redis_client import cache_manager
from powercell.models.inventory import Product, StockMovement, StockMovementType

logger = logging.getLogger(__name__)


def product_to_dict(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "brand": product.brand,
        "model": product.model,
        "category": product.category,
        "capacity_ah": product.capacity_ah,
        "price": product.price,
        "stock": product.stock,
        "min_stock": product.min_stock,
        "is_low_stock": product.is_low_stock,
    }


class InventoryLedger:
    """Keeps per-product stock counts and guarantees they never go negative."""

    def _lock_product(self, db: Session, product_id: int) -> Product:
        # SELECT ... FOR UPDATE serializes concurrent sales of the same product
        product = db.query(Product).filter(Product.id == product_id).with_for_update().first()
        if not product:
            raise NotFoundError(f"Product {product_id} not found", payload={"product_id": product_id})
        return product

    async def reserve_stock(
        self,
        db: Session,
        product_id: int,
        quantity: int,
        reference_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Decrement stock for a product being sold.

        Runs inside the caller's transaction and does not commit; the product
        row stays locked until the caller commits or rolls back.

        Args:
            db: Database session
            product_id: Product ID
            quantity: Units to take out of stock (positive)
            reference_id: Sale ID the units were sold under

        Returns:
            Dict with the previous and new stock level

        Raises:
            ValidationError: quantity is not a positive integer
            NotFoundError: product does not exist
            InsufficientStockError: fewer units in stock than requested
        """
        if quantity < 1:
            raise ValidationError(f"Quantity must be at least 1, got {quantity}")

        product = self._lock_product(db, product_id)

        if product.stock < quantity:
            logger.warning(
                f"Stock reservation rejected for {product.display_name}: "
                f"requested {quantity}, available {product.stock}"
            )
            raise InsufficientStockError(product.id, product.display_name, quantity, product.stock)

        previous_quantity = product.stock
        product.stock = previous_quantity - quantity

        db.add(StockMovement(
            product_id=product.id,
            movement_type=StockMovementType.SALE,
            quantity=-quantity,
            previous_quantity=previous_quantity,
            new_quantity=product.stock,
            reference_id=reference_id,
            reference_type="sale" if reference_id else None
        ))

        return {
            "product_id": product.id,
            "product_name": product.display_name,
            "previous_quantity": previous_quantity,
            "new_quantity": product.stock
        }

    async def adjust_stock(
        self,
        db: Session,
        product_id: int,
        quantity: int,
        movement_type: StockMovementType = StockMovementType.ADJUSTMENT,
        notes: Optional[str] = None
    ) -> Dict[str, Any]:
        """Administrative stock edit: restock, correction or customer return."""
        if movement_type == StockMovementType.SALE:
            raise ValidationError("Sales must go through the checkout, not a stock adjustment")
        try:
            product = self._lock_product(db, product_id)
            previous_quantity = product.stock
            new_quantity = previous_quantity + quantity
            if new_quantity < 0:
                raise InsufficientStockError(product.id, product.display_name, -quantity, previous_quantity)

            product.stock = new_quantity
            db.add(StockMovement(
                product_id=product.id,
                movement_type=movement_type,
                quantity=quantity,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                reference_type="adjustment",
                notes=notes
            ))
            db.commit()
        except Exception:
            db.rollback()
            raise

        self.cache_stock_levels([product])
        logger.info(f"Stock adjusted for product {product_id}: {previous_quantity} -> {new_quantity}")

        return {
            "product_id": product.id,
            "product_name": product.display_name,
            "previous_quantity": previous_quantity,
            "new_quantity": new_quantity,
            "movement_type": movement_type.value,
            "quantity_changed": quantity
        }

    async def create_product(self, db: Session, product_data: Dict[str, Any]) -> Product:
        """Add a battery model to the catalogue."""
        product = Product(**product_data)
        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info(f"Product created: {product.display_name} (id={product.id})")
        return product

    async def get_product(self, db: Session, product_id: int) -> Product:
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    async def list_products(self, db: Session, category: Optional[str] = None) -> List[Product]:
        query = db.query(Product)
        if category:
            query = query.filter(Product.category == category)
        return query.order_by(Product.brand, Product.model).all()

    async def get_low_stock_products(self, db: Session) -> List[Dict[str, Any]]:
        """Get products whose stock has fallen below their minimum."""
        products = db.query(Product).filter(
            Product.stock < Product.min_stock
        ).order_by(Product.stock).all()

        return [
            {
                "product_id": product.id,
                "name": product.display_name,
                "current_quantity": product.stock,
                "min_stock": product.min_stock,
                "shortfall": product.min_stock - product.stock
            }
            for product in products
        ]

    async def get_stock_movements(
        self,
        db: Session,
        product_id: Optional[int] = None,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        """Get stock movement history, newest first."""
        query = db.query(StockMovement).join(Product)

        if product_id:
            query = query.filter(StockMovement.product_id == product_id)

        movements = query.order_by(desc(StockMovement.created_at), desc(StockMovement.id)).limit(limit).all()

        return [
            {
                "id": movement.id,
                "product_id": movement.product_id,
                "product_name": movement.product.display_name,
                "movement_type": movement.movement_type.value,
                "quantity": movement.quantity,
                "previous_quantity": movement.previous_quantity,
                "new_quantity": movement.new_quantity,
                "reference_id": movement.reference_id,
                "reference_type": movement.reference_type,
                "notes": movement.notes,
                "created_at": movement.created_at.isoformat() if movement.created_at else None
            }
            for movement in movements
        ]

    def cache_stock_levels(self, products: Iterable[Product]) -> None:
        """Publish committed stock levels for quick reads."""
        for product in products:
            cache_manager.set(f"stock:{product.id}", {
                "stock": product.stock,
                "min_stock": product.min_stock,
                "updated_at": datetime.utcnow().isoformat()
            }, ttl=settings.stock_cache_ttl)
