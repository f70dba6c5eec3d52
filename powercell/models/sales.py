"""
Sales models for counter transactions.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from powercell.core.database import Base


class PaymentMethod(enum.Enum):
    """Payment method enumeration."""
    CASH = "Cash"
    UPI = "UPI"
    CARD = "Card"


class SaleType(enum.Enum):
    """Plain sale or a sale that redeems an old battery."""
    SALE = "Sale"
    EXCHANGE = "Exchange"


class Sale(Base):
    """Model for a finalized sale. Rows are never updated after creation."""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)

    # Customer information
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(20), nullable=True)
    vehicle_details = Column(String(200), nullable=True)
    installation_address = Column(Text, nullable=True)
    product_category = Column(String(50), nullable=True)
    sale_type = Column(Enum(SaleType), default=SaleType.SALE, nullable=False)

    # Payment information
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    total_amount = Column(Float, nullable=False)
    extra_charges = Column(Float, nullable=False, default=0.0)
    discount_amount = Column(Float, nullable=False, default=0.0)

    # One sale per exchange credit and per client key
    exchange_record_id = Column(Integer, ForeignKey("exchange_records.id"), unique=True, nullable=True)
    idempotency_key = Column(String(100), unique=True, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan", order_by="SaleItem.id")
    exchange_record = relationship("ExchangeRecord")

    def __repr__(self):
        return f"<Sale(id={self.id}, customer='{self.customer_name}', total={self.total_amount})>"


class SaleItem(Base):
    """Model for one line of a sale: a product or a service job."""
    __tablename__ = "sale_items"
    __table_args__ = (
        CheckConstraint(
            "(product_id IS NULL) <> (service_id IS NULL)",
            name="ck_sale_items_single_reference",
        ),
        CheckConstraint("quantity >= 1", name="ck_sale_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    service_id = Column(Integer, ForeignKey("service_jobs.id"), nullable=True)

    # Item details
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
    service = relationship("ServiceJob")

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    def __repr__(self):
        ref = f"product_id={self.product_id}" if self.product_id else f"service_id={self.service_id}"
        return f"<SaleItem(id={self.id}, {ref}, quantity={self.quantity})>"
