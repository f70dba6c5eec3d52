"""
Exchange (buy-back) credit records for old batteries.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum
from sqlalchemy.sql import func
import enum

from powercell.core.database import Base


class ExchangeStatus(enum.Enum):
    """Exchange credit lifecycle."""
    PENDING = "pending"
    CONSUMED = "consumed"


class ExchangeRecord(Base):
    """Model for a valued old battery awaiting redemption against a sale."""
    __tablename__ = "exchange_records"

    id = Column(Integer, primary_key=True, index=True)

    # Customer
    customer_name = Column(String(200), nullable=False, index=True)
    customer_phone = Column(String(20), nullable=True)
    customer_address = Column(Text, nullable=True)

    # Old battery
    battery_brand = Column(String(100), nullable=False)
    battery_model = Column(String(100), nullable=True)
    valuation_amount = Column(Float, nullable=False)

    status = Column(Enum(ExchangeStatus), default=ExchangeStatus.PENDING, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ExchangeRecord(id={self.id}, customer='{self.customer_name}', value={self.valuation_amount}, status={self.status})>"
