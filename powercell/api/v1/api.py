"""
Main API router for v1 endpoints.
"""
from fastapi import APIRouter

from powercell.api.v1.endpoints import sales, inventory, services, exchanges, upi_payments

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(inventory.products_router, prefix="/products", tags=["products"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(exchanges.router, prefix="/exchanges", tags=["exchanges"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(upi_payments.router, prefix="/upi-payments", tags=["upi-payments"])
