"""Order aggregate: the core of the domain.

An Order is created once, at checkout, from a snapshot of the buyer's
cart.  Its line items and prices never change afterwards; only the
lifecycle fields (status, payment and delivery stamps) move, and only
through ``transition_to`` / ``mark_paid``.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import (
    EmptyCartError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationError,
)
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    NEW = "new"
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    APPROVED = "approved"


class PaymentMethod(Enum):
    STRIPE = "stripe"
    CARD = "card"
    COD = "cod"

    @property
    def requires_redirect(self) -> bool:
        """True for methods paid through an external hosted checkout."""
        return self is not PaymentMethod.COD


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------
_STAFF = frozenset({Role.SELLER, Role.ADMIN})
_ANYONE = frozenset(Role)

TRANSITIONS: dict[OrderStatus, dict[OrderStatus, frozenset[Role]]] = {
    OrderStatus.NEW: {
        OrderStatus.PROCESSING: _STAFF,
        OrderStatus.CANCELLED: _ANYONE,
    },
    OrderStatus.PENDING: {
        OrderStatus.APPROVED: _STAFF,
        OrderStatus.REJECTED: _STAFF,
        OrderStatus.CANCELLED: _ANYONE,
    },
    OrderStatus.PROCESSING: {
        OrderStatus.SHIPPED: _STAFF,
        OrderStatus.CANCELLED: _ANYONE,
    },
    OrderStatus.SHIPPED: {
        OrderStatus.DELIVERED: _STAFF,
    },
    OrderStatus.APPROVED: {
        OrderStatus.PROCESSING: _STAFF,
        OrderStatus.CANCELLED: _ANYONE,
    },
    OrderStatus.DELIVERED: {},
    OrderStatus.CANCELLED: {},
    OrderStatus.REJECTED: {},
}

# Entering one of these returns the order's reserved units to stock.
RESTOCK_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.REJECTED})

# Statuses whose total never counts as revenue.
UNREALIZED_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.REJECTED})


@dataclass(frozen=True)
class OrderLineItem:
    """Frozen copy of a cart line at checkout time."""

    product_id: str
    name: str
    unit_price: Money
    image: str
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


def generate_order_number(created_at: datetime) -> str:
    """Human-facing order id, e.g. ``ORD-20261019-9F3A2C1B``."""
    return f"ORD-{created_at:%Y%m%d}-{secrets.token_hex(4).upper()}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.create()`` for new orders; it enforces the checkout
    invariants.  ``__init__`` stays plain so repositories can reconstitute
    persisted orders without re-validating them.
    """

    id: int | None
    order_number: str
    buyer_id: str
    items: tuple[OrderLineItem, ...]
    items_price: Money
    tax_price: Money
    shipping_price: Money
    total_price: Money
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.NEW
    is_paid: bool = False
    paid_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    notes: str | None = None
    idempotency_key: str | None = None
    checkout_url: str | None = None
    payment_reference: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        buyer_id: str,
        items: list[OrderLineItem],
        *,
        items_price: Money,
        tax_price: Money,
        shipping_price: Money,
        total_price: Money,
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        requires_approval: bool = False,
        notes: str | None = None,
        idempotency_key: str | None = None,
        created_at: datetime | None = None,
    ) -> Order:
        """Create a new, unpaid order, enforcing all invariants."""
        if not buyer_id or not buyer_id.strip():
            raise ValidationError("Buyer is required", fields=["buyer_id"])
        if not items:
            raise EmptyCartError()
        shipping_address.validate()
        if items_price + tax_price + shipping_price != total_price:
            raise ValidationError(
                f"Order total {total_price} does not equal "
                f"{items_price} + {tax_price} + {shipping_price}"
            )

        created_at = created_at or _utcnow()
        return Order(
            id=None,
            order_number=generate_order_number(created_at),
            buyer_id=buyer_id,
            items=tuple(items),
            items_price=items_price,
            tax_price=tax_price,
            shipping_price=shipping_price,
            total_price=total_price,
            shipping_address=shipping_address,
            payment_method=payment_method,
            status=OrderStatus.PENDING if requires_approval else OrderStatus.NEW,
            created_at=created_at,
            notes=notes.strip() if notes and notes.strip() else None,
            idempotency_key=idempotency_key,
        )

    # --- State transitions ----------------------------------------------------

    def check_transition(self, target: OrderStatus, actor: Actor) -> None:
        """Raise unless *actor* may move this order to *target* right now."""
        if not actor.is_staff and not actor.owns(self.buyer_id):
            raise UnauthorizedError(
                f"Order {self.order_number} belongs to another buyer"
            )

        allowed = TRANSITIONS[self.status]
        if target not in allowed:
            raise InvalidTransitionError(self.status, target)

        if actor.role not in allowed[target]:
            raise UnauthorizedError(
                f"A {actor.role.value} cannot move an order from "
                f"'{self.status.value}' to '{target.value}'"
            )

    def transition_to(
        self,
        target: OrderStatus,
        actor: Actor,
        now: datetime | None = None,
    ) -> OrderStatus:
        """Apply a legal transition and return the previous status.

        Restocking for cancellation/rejection is not done here; the
        lifecycle service wraps this call together with the inventory
        update.
        """
        self.check_transition(target, actor)
        previous = self.status
        self.status = target
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now or _utcnow()
        return previous

    def mark_paid(self, payment_reference: str | None = None, now: datetime | None = None) -> bool:
        """Record payment confirmation.  Returns False if already paid."""
        if self.is_paid:
            return False
        self.is_paid = True
        self.paid_at = now or _utcnow()
        self.payment_reference = payment_reference
        return True

    # --- Computed properties --------------------------------------------------

    @property
    def counts_as_revenue(self) -> bool:
        return self.status not in UNREALIZED_STATUSES

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
