"""
Inventory models for battery products and their stock movements.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from powercell.core.database import Base


class StockMovementType(enum.Enum):
    """Stock movement type enumeration."""
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RETURN = "return"


class Product(Base):
    """Model for batteries held in stock."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False)  # Car, Bike, Inverter, ...
    capacity_ah = Column(String(20), nullable=False)

    # Pricing
    price = Column(Float, nullable=False)

    # Inventory settings
    stock = Column(Integer, default=0, nullable=False)
    min_stock = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    stock_movements = relationship("StockMovement", back_populates="product", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}"

    @property
    def is_low_stock(self) -> bool:
        return self.stock < self.min_stock

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.display_name}', stock={self.stock})>"


class StockMovement(Base):
    """Model for tracking all stock movements."""
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Movement details
    movement_type = Column(Enum(StockMovementType), nullable=False)
    quantity = Column(Integer, nullable=False)  # Positive for additions, negative for reductions
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)

    # Reference information
    reference_id = Column(String(50), nullable=True)  # Sale ID
    reference_type = Column(String(50), nullable=True)  # "sale", "adjustment"
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="stock_movements")

    def __repr__(self):
        return f"<StockMovement(id={self.id}, product_id={self.product_id}, type={self.movement_type}, quantity={self.quantity})>"
