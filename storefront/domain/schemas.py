# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List, Literal, Optional
from decimal import Decimal
from datetime import datetime


DeliveryMethod = Literal["pickup", "delivery"]
PaymentMethod = Literal["online", "on_delivery", "on_pickup"]
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed"]


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="Product id")
    quantity: int = Field(..., gt=0, description="Quantity, at least 1")
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)


class ItemQuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, description="New quantity, at least 1")


class DeliveryIn(BaseModel):
    delivery_method: DeliveryMethod
    delivery_zone_id: Optional[int] = Field(None, gt=0)


class TotalsOut(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    large_order_fee: Decimal
    special_delivery_fee: Decimal
    total: Decimal


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    stock_quantity: int
    requires_special_delivery: bool
    line_total: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: int
    user_id: int
    delivery_method: DeliveryMethod
    delivery_zone_id: Optional[int] = None
    items: List[CartItemOut]
    item_count: int
    totals: TotalsOut

    model_config = ConfigDict(from_attributes=True)


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamowienia."""

    payment_method: PaymentMethod
    delivery_method: DeliveryMethod
    delivery_address_id: Optional[int] = Field(None, gt=0)
    pickup_location_id: Optional[int] = Field(None, gt=0)
    customer_notes: Optional[str] = Field(None, max_length=500)


class OrderTotalsOut(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    shipping_fee: Decimal
    large_order_fee: Decimal
    special_delivery_fee: Decimal
    total_amount: Decimal


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    requires_special_delivery: bool

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    order_number: str
    user_id: int
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    delivery_method: DeliveryMethod
    delivery_zone_id: Optional[int] = None
    delivery_address: Optional[Dict[str, Any]] = None
    pickup_location_id: Optional[int] = None
    totals: OrderTotalsOut
    customer_notes: Optional[str] = None
    items: List[OrderItemOut] = []
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class CheckoutSessionOut(BaseModel):
    id: int
    user_id: int
    status: str
    delivery_method: DeliveryMethod
    delivery_zone_id: Optional[int] = None
    delivery_address_id: Optional[int] = None
    pickup_location_id: Optional[int] = None
    totals: OrderTotalsOut
    created_at: datetime


class OrderCreatedOut(BaseModel):
    """Zamowienie (platnosc przy odbiorze/dostawie) albo sesja checkout (online)."""

    kind: Literal["order", "checkout_session"]
    order: Optional[OrderOut] = None
    checkout_session: Optional[CheckoutSessionOut] = None


class OrderStatusIn(BaseModel):
    status: OrderStatus


class PaymentStatusIn(BaseModel):
    payment_status: PaymentStatus


class SettingsOut(BaseModel):
    tax_rate: Decimal
    free_shipping_threshold: Decimal
    large_order_quantity_threshold: int
    large_order_delivery_fee: Decimal
    pickup_address: Optional[str] = None
    currency_symbol: str
    currency_code: str

    model_config = ConfigDict(from_attributes=True)


class SettingsUpdate(BaseModel):
    """Patch ustawien - tylko przeslane pola sa zmieniane (exclude_unset)."""

    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    free_shipping_threshold: Optional[Decimal] = Field(None, ge=0)
    large_order_quantity_threshold: Optional[int] = Field(None, ge=1)
    large_order_delivery_fee: Optional[Decimal] = Field(None, ge=0)
    pickup_address: Optional[str] = None
    currency_symbol: Optional[str] = Field(None, min_length=1, max_length=5)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
