# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from datetime import datetime


class AddToCartIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    user_id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")


class QuantityUpdateIn(BaseModel):
    """Schema dla zmiany ilości pozycji w koszyku."""

    operation: Literal["increment", "decrement"]


class CartLineOut(BaseModel):
    """Schema dla pozycji w koszyku (response)."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    user_id: int
    items: List[CartLineOut]
    total: Decimal


class CartCountOut(BaseModel):
    user_id: int
    count: int


class ShippingDetails(BaseModel):
    """Dane wysyłki i kontaktowe. Puste pola sprawdza CheckoutService."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    payment_type: str | None = None


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia."""

    user_id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    shipping: ShippingDetails


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    reference: str
    user_id: int
    status: int
    status_label: str
    items: List[OrderItemOut]
    shipping: ShippingDetails
    subtotal: Decimal
    shipping_fee: Decimal
    handling_fee: Decimal
    total: Decimal
    created_at: datetime
    updated_at: datetime


class StatusUpdateIn(BaseModel):
    status: int = Field(..., description="Kod statusu z /orders/statuses")


class StatusOut(BaseModel):
    code: int
    label: str
    terminal: bool
