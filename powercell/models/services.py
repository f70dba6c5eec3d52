"""
Service job models for battery checks, charging and repairs.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Date, Enum
from sqlalchemy.sql import func
import enum

from powercell.core.database import Base


class ServiceStatus(enum.Enum):
    """Service job status, in workflow order."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ServiceJob(Base):
    """Model for a customer's service job."""
    __tablename__ = "service_jobs"

    id = Column(Integer, primary_key=True, index=True)

    # Customer
    customer_name = Column(String(200), nullable=False)
    contact_number = Column(String(20), nullable=False)
    vehicle_details = Column(String(200), nullable=False)

    # Battery under service
    battery_brand = Column(String(100), nullable=True)
    battery_model = Column(String(100), nullable=True)

    # Work
    status = Column(Enum(ServiceStatus), default=ServiceStatus.PENDING, nullable=False)
    service_charge = Column(Float, default=0.0, nullable=False)
    assigned_to = Column(String(100), nullable=True)
    pickup_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ServiceJob(id={self.id}, customer='{self.customer_name}', status={self.status})>"
