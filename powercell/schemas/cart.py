"""Pydantic schemas for the checkout cart.

The same payload drives a cash sale directly and is stored on a UPI payment
to be replayed at finalisation, so it is validated once at the boundary.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from powercell.models.sales import PaymentMethod, SaleType

WALK_IN_CUSTOMER = "Walk-in Customer"


def _drop_null_key(data, key):
    # Checkout sends the unused reference as null
    if isinstance(data, dict) and key in data and data[key] is None:
        data = {k: v for k, v in data.items() if k != key}
    return data


class ProductLine(BaseModel):
    """Cart line selling a battery from stock."""
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., ge=1, description="Quantity sold")
    price: float = Field(..., ge=0, description="Unit price")

    @model_validator(mode="before")
    @classmethod
    def drop_null_service(cls, data):
        return _drop_null_key(data, "service_id")


class ServiceLine(BaseModel):
    """Cart line billing a service job."""
    model_config = ConfigDict(extra="forbid")

    service_id: int = Field(..., description="Service job ID")
    quantity: int = Field(1, ge=1, description="Quantity billed")
    price: float = Field(..., ge=0, description="Unit price")

    @model_validator(mode="before")
    @classmethod
    def drop_null_product(cls, data):
        return _drop_null_key(data, "product_id")


CartLine = Union[ProductLine, ServiceLine]


class CartPayload(BaseModel):
    """Everything needed to create a sale."""
    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(None, description="Customer name")
    customer_phone: Optional[str] = Field(None, description="Customer phone")
    vehicle_details: Optional[str] = Field(None, description="Vehicle the battery is for")
    installation_address: Optional[str] = Field(None, description="Installation / delivery address")
    product_category: Optional[str] = Field(None, description="Battery category")
    sale_type: SaleType = Field(SaleType.SALE, alias="type", description="Sale or Exchange")
    items: List[CartLine] = Field(..., min_length=1, description="Product and service lines")
    total_amount: float = Field(..., ge=0, description="Total amount")
    extra_charges: float = Field(0, ge=0, description="Installation and delivery charges")
    discount_amount: float = Field(0, ge=0, description="Discount from an exchange credit")
    exchange_record_id: Optional[int] = Field(None, description="Exchange credit to redeem")
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, description="Cash, UPI or Card")

    @property
    def product_lines(self) -> List[ProductLine]:
        return [line for line in self.items if isinstance(line, ProductLine)]

    @property
    def service_lines(self) -> List[ServiceLine]:
        return [line for line in self.items if isinstance(line, ServiceLine)]


class SaleRequest(CartPayload):
    """Cart submitted at the counter; a customer name is mandatory."""
    customer_name: str = Field(..., min_length=1, description="Customer name")
