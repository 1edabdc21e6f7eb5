# shopping_cart/domain/schemas.py
import uuid
from decimal import Decimal
from enum import Enum
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# prices go over the wire as JSON numbers, not strings
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# upper bound of the Integer columns product_id and quantity
INT32_MAX = 2**31 - 1


class CartStatus(str, Enum):
    ACTIVE = "Active"
    CANCELLED = "Cancelled"
    FINISHED = "Finished"


class CamelModel(BaseModel):
    """Base schema with camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ItemIn(CamelModel):
    """Item sent by the client when creating or replacing cart items."""

    product_id: int = Field(..., gt=0, le=INT32_MAX, description="Product id (must be > 0)")
    quantity: int = Field(..., gt=0, le=INT32_MAX, description="Quantity (must be > 0)")
    unit_price: Price = Field(..., ge=0, max_digits=12, decimal_places=2, description="Unit price (>= 0)")


class CreateCartIn(CamelModel):
    items: List[ItemIn] = Field(default_factory=list)


class CartItemOut(CamelModel):
    product_id: int
    quantity: int
    unit_price: Price


class CartOut(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    status: str
    items: List[CartItemOut]


class UserRead(BaseModel):
    id: uuid.UUID
    email: str

    model_config = ConfigDict(from_attributes=True)


class OrderItem(CamelModel):
    product_id: int
    quantity: int
    unit_price: Price


class OrderRequest(CamelModel):
    """Payload posted to the order service on checkout."""

    user_id: uuid.UUID
    items: List[OrderItem]
