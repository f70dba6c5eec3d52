"""
Celery background tasks for PowerCell application.
"""
import asyncio
import logging
from datetime import datetime

from powercell.worker.celery import celery
from powercell.services.inventory_ledger import InventoryLedger
from powercell.core.database import get_db_context

logger = logging.getLogger(__name__)


@celery.task(bind=True)
def check_low_stock_levels(self):
    """Report batteries whose stock has fallen below the minimum."""
    try:
        logger.info("Starting low stock check task")

        inventory_ledger = InventoryLedger()
        with get_db_context() as db:
            low_stock = asyncio.run(inventory_ledger.get_low_stock_products(db))

        for product in low_stock:
            logger.warning(
                f"Low stock: {product['name']} has {product['current_quantity']} "
                f"(minimum {product['min_stock']})"
            )

        logger.info(f"Low stock check found {len(low_stock)} products")
        return {
            "status": "success",
            "low_stock_count": len(low_stock),
            "product_ids": [product["product_id"] for product in low_stock],
            "timestamp": datetime.utcnow().isoformat()
        }

    except Exception as e:
        logger.error(f"Failed to check low stock levels: {e}")
        raise self.retry(countdown=300, max_retries=3)  # Retry in 5 minutes
