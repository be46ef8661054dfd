"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data from the application layer to the adapters (CLI, HTTP)
without exposing domain internals.  Amounts are plain Decimals in the
order's currency; formatting is left to the adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.order import Order
from storefront.domain.service.pricing import MoneyBreakdown


@dataclass(frozen=True)
class CartItemSpec:
    """Input: a product and how many of it."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class TotalsDTO:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    currency: str


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    name: str
    image: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class CartDTO:
    buyer_id: str
    items: list[CartLineDTO]
    item_count: int
    totals: TotalsDTO


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    name: str
    image: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class ShippingAddressDTO:
    address: str
    city: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    buyer_id: str
    status: str
    payment_method: str
    items: list[OrderLineItemDTO]
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    currency: str
    shipping_address: ShippingAddressDTO
    is_paid: bool
    paid_at: datetime | None
    delivered_at: datetime | None
    created_at: datetime
    notes: str | None
    checkout_url: str | None


@dataclass(frozen=True)
class CheckoutResultDTO:
    """Output of checkout: the order plus where to send the buyer, if anywhere."""

    order: OrderDTO
    checkout_url: str | None
    replayed: bool = False


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    total: int
    pages: int
    page: int
    limit: int


@dataclass(frozen=True)
class OrderStatisticsDTO:
    total_revenue: Decimal
    total_orders: int
    status_counts: dict[str, int]
    recent_orders: list[OrderDTO]
    currency: str


# --- Mapping ------------------------------------------------------------------


def totals_to_dto(totals: MoneyBreakdown) -> TotalsDTO:
    return TotalsDTO(
        subtotal=totals.subtotal.amount,
        tax=totals.tax.amount,
        shipping=totals.shipping.amount,
        total=totals.total.amount,
        currency=totals.total.currency,
    )


def cart_line_to_dto(line: CartLine) -> CartLineDTO:
    return CartLineDTO(
        product_id=line.product_id,
        name=line.name,
        image=line.image,
        quantity=line.quantity,
        unit_price=line.unit_price.amount,
        line_total=line.line_total.amount,
    )


def cart_to_dto(cart: Cart, totals: MoneyBreakdown) -> CartDTO:
    return CartDTO(
        buyer_id=cart.buyer_id,
        items=[cart_line_to_dto(line) for line in cart.lines],
        item_count=cart.item_count,
        totals=totals_to_dto(totals),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        buyer_id=order.buyer_id,
        status=order.status.value,
        payment_method=order.payment_method.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=item.name,
                image=item.image,
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                line_total=item.line_total.amount,
            )
            for item in order.items
        ],
        items_price=order.items_price.amount,
        tax_price=order.tax_price.amount,
        shipping_price=order.shipping_price.amount,
        total_price=order.total_price.amount,
        currency=order.total_price.currency,
        shipping_address=ShippingAddressDTO(**order.shipping_address.to_dict()),
        is_paid=order.is_paid,
        paid_at=order.paid_at,
        delivered_at=order.delivered_at,
        created_at=order.created_at,
        notes=order.notes,
        checkout_url=order.checkout_url,
    )
