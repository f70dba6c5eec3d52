"""
Domain exceptions for the PowerCell application.

Every error carries the HTTP status it maps to; the API layer turns them into
``{"detail": ..., "status": "error"}`` responses.
"""
from typing import Any, Dict, Optional


class ShopError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str = "An internal error occurred", status_code: Optional[int] = None,
                 payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        rv = dict(self.payload or ())
        rv["detail"] = self.message
        rv["status"] = "error"
        return rv


class ValidationError(ShopError):
    """Malformed or missing input, rejected before any mutation."""
    status_code = 422


class NotFoundError(ShopError):
    """Referenced record does not exist."""
    status_code = 404

    def __init__(self, message: str = "Resource not found", payload: Optional[Dict[str, Any]] = None):
        super().__init__(message, payload=payload)


class ConflictError(ShopError):
    """Business rule violated by the current persisted state."""
    status_code = 409


class InsufficientStockError(ConflictError):
    """Raised when a product does not have enough stock for a reservation."""

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        message = (
            f"Insufficient stock for product: {product_name} "
            f"(requested {requested}, available {available})"
        )
        super().__init__(message, payload={
            "product_id": product_id,
            "requested": requested,
            "available": available,
        })


class ExchangeAlreadyConsumedError(ConflictError):
    """Raised when an exchange credit has already been redeemed."""

    def __init__(self, record_id: int):
        super().__init__(
            f"Exchange record {record_id} has already been consumed",
            payload={"exchange_record_id": record_id},
        )


class AlreadyProcessedError(ConflictError):
    """Raised when a UPI payment has moved past the requested transition."""

    def __init__(self, message: str = "Payment already processed.", payload: Optional[Dict[str, Any]] = None):
        super().__init__(message, payload=payload)


class ServiceNotBillableError(ConflictError):
    """Raised when a service job is not completed or was already billed."""


class InvalidStatusTransitionError(ConflictError):
    """Raised when a service job status change goes backwards or skips."""


class NotYetConfirmedError(ShopError):
    """Raised when finalising a UPI payment that has not been confirmed."""
    status_code = 422

    def __init__(self, message: str = "Payment not yet confirmed.", payload: Optional[Dict[str, Any]] = None):
        super().__init__(message, payload=payload)
