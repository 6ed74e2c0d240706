# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AddItemIn(BaseModel):
    """Schema dla dodawania pozycji do koszyka."""

    item_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("item_id", "itemId", "artworkId"),
    )
    quantity: int = Field(1, ge=1, description="Ilosc (musi byc >= 1)")


class ShippingInfo(BaseModel):
    """Dane wysylki - wszystkie pola wymagane i niepuste."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    full_name: str = Field(..., min_length=1, alias="fullName")
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class PaymentDetails(BaseModel):
    """Dane karty - tylko walidacja obecnosci, platnosc jest symulowana."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    card_number: str = Field(..., min_length=1, alias="cardNumber")
    card_name: str = Field(..., min_length=1, alias="cardName")
    expiry_date: str = Field(..., min_length=1, alias="expiryDate")
    cvv: str = Field(..., min_length=1)


class CreateOrderIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")
    shipping_info: ShippingInfo = Field(..., alias="shippingInfo")


class ProcessPaymentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., min_length=1, alias="orderId")
    payment_method: str = Field("card", min_length=1, alias="paymentMethod")
    amount: Decimal
    card: PaymentDetails | None = None


class StartCheckoutIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")


class CartItemOut(BaseModel):
    item_id: str
    title: str
    seller_id: str | None = None
    quantity: int
    unit_price: Decimal
    added_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    session_id: str
    items: List[CartItemOut]
    total: Decimal
    item_count: int

    model_config = ConfigDict(from_attributes=True)


class OrderItemOut(BaseModel):
    item_id: str
    title: str
    seller_id: str | None = None
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: str
    buyer_id: str
    status: str
    total: Decimal
    shipping_info: dict
    items: List[OrderItemOut]
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentOut(BaseModel):
    id: str
    order_id: str
    buyer_id: str
    amount: Decimal
    method: str
    status: str
    processed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckoutOut(BaseModel):
    id: str
    session_id: str
    state: str
    shipping_info: dict | None = None
    order_id: str | None = None
    last_error: str | None = None
    cart_cleared: bool = False
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionEnvelope(BaseModel):
    success: bool = True
    session_id: str


class CartEnvelope(BaseModel):
    success: bool = True
    cart: CartOut


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class OrderEnvelope(BaseModel):
    success: bool = True
    order: OrderOut


class OrdersEnvelope(BaseModel):
    success: bool = True
    orders: List[OrderOut]


class PaymentEnvelope(BaseModel):
    success: bool = True
    payment: PaymentOut
    order: OrderOut


class CheckoutEnvelope(BaseModel):
    success: bool = True
    checkout: CheckoutOut
    order: OrderOut | None = None
