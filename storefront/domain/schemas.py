# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class MessageOut(BaseModel):
    detail: str


class UserCreate(BaseModel):
    """Registration payload."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=255)


class UserUpdate(BaseModel):
    """Partial profile update; omitted fields keep their value."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[str] = Field(None, min_length=3, max_length=255)


class UserRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    category_code: str
    price: Decimal
    discount_type: str
    discount_percent: int
    inventory: int
    total_sold: int

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    """A cart line with its prices; unit_price is after discount."""

    product_id: int
    name: str
    quantity: int
    price: Decimal
    discount_percent: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    id: int
    user_id: int
    num_items: int
    subtotal: Decimal
    taxes: Decimal
    total: Decimal
    items: List[CartItemOut]


class AddressIn(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=100)
    unit: Optional[str] = Field(None, max_length=20)
    city: str = Field(..., min_length=1, max_length=50)
    province: str = Field(..., min_length=1, max_length=50)
    country: str = Field(..., min_length=1, max_length=50)
    postal_code: str = Field(..., min_length=3, max_length=10)
    phone_number: str = Field(..., min_length=7, max_length=20)


class AddressOut(AddressIn):
    id: int
    user_id: int
    address_type: str

    model_config = ConfigDict(from_attributes=True)


class AddressSnapshot(BaseModel):
    first_name: str
    last_name: str
    address: str
    unit: Optional[str] = None
    city: str
    province: str
    country: str
    postal_code: str
    phone_number: str


class PaymentCardIn(BaseModel):
    card_number: str = Field(..., min_length=12, max_length=19, pattern=r"^\d+$")
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    expiration_month: int = Field(..., ge=1, le=12)
    expiration_year: int = Field(..., ge=2000, le=2100)
    payment_card_type: str = Field(..., min_length=1, max_length=20)


class PaymentCardOut(BaseModel):
    """Card on file; only the last four digits leave the service."""

    id: int
    user_id: int
    last4: str
    first_name: str
    last_name: str
    expiration_month: int
    expiration_year: int
    payment_card_type: str


class CheckoutOut(BaseModel):
    id: int
    user_id: int
    cart_id: int
    stage: str
    shipping_address_id: Optional[int] = None
    billing_address_id: Optional[int] = None
    payment_card_id: Optional[int] = None
    num_items: int
    subtotal: Decimal
    taxes: Decimal
    total: Decimal


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int


class OrderOut(BaseModel):
    id: int
    user_id: int
    order_date: datetime
    num_items: int
    subtotal: Decimal
    taxes: Decimal
    total: Decimal
    shipping_address: AddressSnapshot
    billing_address: AddressSnapshot
    payment_card_type: str
    payment_card_last4: str
    items: List[OrderItemOut]
