"""
Request payload schemas shared across endpoints and services.
"""

from .cart import CartPayload, SaleRequest, ProductLine, ServiceLine, WALK_IN_CUSTOMER

__all__ = ["CartPayload", "SaleRequest", "ProductLine", "ServiceLine", "WALK_IN_CUSTOMER"]
