"""
Business logic services for PowerCell application.
"""

from .inventory_ledger import InventoryLedger
from .exchange_store import ExchangeCreditStore
from .service_jobs import ServiceJobManager
from .sales_engine import SaleTransactionEngine
from .upi_coordinator import UpiPaymentCoordinator

__all__ = [
    "InventoryLedger",
    "ExchangeCreditStore",
    "ServiceJobManager",
    "SaleTransactionEngine",
    "UpiPaymentCoordinator"
]
