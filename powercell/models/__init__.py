"""
Database models for PowerCell application.
"""

from .inventory import Product, StockMovement, StockMovementType
from .services import ServiceJob, ServiceStatus
from .exchanges import ExchangeRecord, ExchangeStatus
from .sales import Sale, SaleItem, PaymentMethod, SaleType
from .payments import UpiPayment, UpiPaymentStatus

__all__ = [
    "Product", "StockMovement", "StockMovementType",
    "ServiceJob", "ServiceStatus",
    "ExchangeRecord", "ExchangeStatus",
    "Sale", "SaleItem", "PaymentMethod", "SaleType",
    "UpiPayment", "UpiPaymentStatus",
]
