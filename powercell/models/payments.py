"""
UPI payment intents that defer a sale until the payment is confirmed.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from powercell.core.database import Base


class UpiPaymentStatus(enum.Enum):
    """UPI payment states. EXPIRED is reserved; nothing transitions into it."""
    PENDING = "pending"
    RECEIVED = "received"
    FINALISED = "finalised"
    EXPIRED = "expired"


class UpiPayment(Base):
    """Model for a pending UPI payment and the cart it will pay for."""
    __tablename__ = "upi_payments"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    status = Column(Enum(UpiPaymentStatus), default=UpiPaymentStatus.PENDING, nullable=False)

    # Serialized payloads
    sale_data = Column(JSON, nullable=False)  # validated cart, replayed at finalise
    invoice_state = Column(JSON, nullable=True)  # opaque to the server

    upi_ref = Column(String(100), nullable=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    sale = relationship("Sale")

    def __repr__(self):
        return f"<UpiPayment(id={self.id}, amount={self.amount}, status={self.status})>"
