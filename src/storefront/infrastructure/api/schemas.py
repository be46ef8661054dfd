"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from storefront.domain.model.order import PaymentMethod
from storefront.domain.model.value_objects import ShippingAddress

# --- Requests -----------------------------------------------------------------


class ShippingAddressIn(BaseModel):
    # Blank fields are accepted here so the domain can name every missing one.
    address: str = ""
    city: str = ""
    postal_code: str = Field("", validation_alias=AliasChoices("postal_code", "postalCode"))
    country: str = ""

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(
            address=self.address,
            city=self.city,
            postal_code=self.postal_code,
            country=self.country,
        )


class CartItemIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    product_id: str = Field(validation_alias=AliasChoices("product_id", "productId"))
    quantity: int = 1


class CheckoutIn(BaseModel):
    items: list[CartItemIn] | None = None
    shipping_address: ShippingAddressIn = Field(
        default_factory=ShippingAddressIn,
        validation_alias=AliasChoices("shipping_address", "shippingAddress"),
    )
    payment_method: PaymentMethod = Field(
        PaymentMethod.STRIPE,
        validation_alias=AliasChoices("payment_method", "paymentMethod"),
    )
    notes: str | None = None
    requires_approval: bool = False


class StatusUpdateIn(BaseModel):
    status: str


class PaymentWebhookIn(BaseModel):
    order_id: int | None = None
    order_number: str | None = None
    payment_reference: str | None = None


# --- Responses ----------------------------------------------------------------


class TotalsOut(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    currency: str


class CartLineOut(BaseModel):
    product_id: str
    name: str
    image: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    buyer_id: str
    items: list[CartLineOut]
    item_count: int
    totals: TotalsOut


class CartSummaryOut(TotalsOut):
    item_count: int


class OrderLineItemOut(BaseModel):
    product_id: str
    name: str
    image: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ShippingAddressOut(BaseModel):
    address: str
    city: str
    postal_code: str
    country: str


class OrderOut(BaseModel):
    id: int
    order_number: str
    buyer_id: str
    status: str
    payment_method: str
    items: list[OrderLineItemOut]
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    currency: str
    shipping_address: ShippingAddressOut
    is_paid: bool
    paid_at: datetime | None
    delivered_at: datetime | None
    created_at: datetime
    notes: str | None
    checkout_url: str | None


class CheckoutOut(BaseModel):
    order: OrderOut
    checkout_url: str | None
    replayed: bool = False


class OrderPageOut(BaseModel):
    orders: list[OrderOut]
    total: int
    pages: int
    page: int
    limit: int


class OrderStatisticsOut(BaseModel):
    total_revenue: Decimal
    total_orders: int
    status_counts: dict[str, int]
    recent_orders: list[OrderOut]
    currency: str


class ErrorOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    error: str
    message: str
