"""Application service: Checkout.

Turns a cart snapshot into an immutable Order:

1. reject an empty snapshot
2. validate the shipping address (every missing field is named)
3. reserve stock for every line, all-or-nothing
4. price the snapshot (snapshot prices, never live catalog prices)
5. build the order as NEW (PENDING for manual-review checkouts), unpaid
6. for redirect payment methods, open a gateway session for its URL
7. persist, then clear the buyer's cart

If anything after step 3 fails the reservation is released, nothing is
persisted and the cart is left as it was, so the buyer can retry.

A checkout carrying an idempotency key that the buyer already used
returns the original order instead of creating another one.  Requests
with the same key are serialized so concurrent retries cannot both slip
past the lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from storefront.application.cart_store import CartStore
from storefront.application.dto import CheckoutResultDTO, order_to_dto
from storefront.domain.exceptions import EmptyCartError, PaymentGatewayError
from storefront.domain.gateway.notification_sink import (
    NotificationSink,
    OrderEvent,
    publish,
)
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import Order, OrderLineItem, PaymentMethod
from storefront.domain.model.value_objects import Quantity, ShippingAddress
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from storefront.domain.service.keyed_locks import KeyedLocks
from storefront.domain.service.pricing import (
    DEFAULT_PRICING,
    PricingConfig,
    compute_totals,
)

logger = logging.getLogger(__name__)


class CheckoutOrchestrator:

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        payment_gateway: PaymentGateway,
        cart_store: CartStore | None = None,
        notifications: NotificationSink | None = None,
        pricing: PricingConfig = DEFAULT_PRICING,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = InventoryReservationService(inventory_repo)
        self._payment_gateway = payment_gateway
        self._cart_store = cart_store
        self._notifications = notifications
        self._pricing = pricing
        self._locks = KeyedLocks()

    def checkout_cart(
        self,
        buyer_id: str,
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        idempotency_key: str | None = None,
        notes: str | None = None,
        requires_approval: bool = False,
    ) -> CheckoutResultDTO:
        """Check out the buyer's stored cart and clear it on success."""
        if self._cart_store is None:
            raise RuntimeError("CheckoutOrchestrator was built without a CartStore")
        return self._run(
            buyer_id,
            lambda: self._cart_store.snapshot(buyer_id),
            shipping_address,
            payment_method,
            idempotency_key=idempotency_key,
            notes=notes,
            requires_approval=requires_approval,
            clear_cart=True,
        )

    def checkout(
        self,
        buyer_id: str,
        lines: list[CartLine],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        idempotency_key: str | None = None,
        notes: str | None = None,
        requires_approval: bool = False,
    ) -> CheckoutResultDTO:
        """Check out an explicit cart snapshot.  The stored cart is not touched."""
        return self._run(
            buyer_id,
            lambda: list(lines),
            shipping_address,
            payment_method,
            idempotency_key=idempotency_key,
            notes=notes,
            requires_approval=requires_approval,
            clear_cart=False,
        )

    # --- Internal -------------------------------------------------------------

    def _run(
        self,
        buyer_id: str,
        load_lines: Callable[[], list[CartLine]],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        *,
        idempotency_key: str | None,
        notes: str | None,
        requires_approval: bool,
        clear_cart: bool,
    ) -> CheckoutResultDTO:
        if not idempotency_key:
            return self._place(
                buyer_id,
                load_lines(),
                shipping_address,
                payment_method,
                None,
                notes,
                requires_approval,
                clear_cart,
            )

        with self._locks.hold((buyer_id, idempotency_key)):
            existing = self._order_repo.get_by_idempotency_key(buyer_id, idempotency_key)
            if existing is not None:
                logger.info(
                    "Checkout replay for buyer %s key %s -> order %s",
                    buyer_id,
                    idempotency_key,
                    existing.order_number,
                )
                return CheckoutResultDTO(
                    order=order_to_dto(existing),
                    checkout_url=existing.checkout_url,
                    replayed=True,
                )
            return self._place(
                buyer_id,
                load_lines(),
                shipping_address,
                payment_method,
                idempotency_key,
                notes,
                requires_approval,
                clear_cart,
            )

    def _place(
        self,
        buyer_id: str,
        lines: list[CartLine],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        idempotency_key: str | None,
        notes: str | None,
        requires_approval: bool,
        clear_cart: bool,
    ) -> CheckoutResultDTO:
        if not lines:
            raise EmptyCartError()
        shipping_address.validate()

        quantities = [(line.product_id, line.quantity) for line in lines]
        self._reservations.reserve(quantities)

        try:
            order = self._build_order(
                buyer_id,
                lines,
                shipping_address,
                payment_method,
                idempotency_key,
                notes,
                requires_approval,
            )
            if payment_method.requires_redirect:
                order.checkout_url = self._open_payment_session(order)
            self._order_repo.save(order)
        except Exception:
            logger.warning("Checkout for buyer %s failed; releasing reserved stock", buyer_id)
            self._reservations.release(quantities)
            raise

        if clear_cart and self._cart_store is not None:
            self._cart_store.clear(buyer_id)

        logger.info(
            "Order %s placed by %s: %d item(s), total %s, payment %s",
            order.order_number,
            buyer_id,
            order.item_count,
            order.total_price,
            payment_method.value,
        )
        publish(self._notifications, OrderEvent.CREATED, order)
        return CheckoutResultDTO(order=order_to_dto(order), checkout_url=order.checkout_url)

    def _build_order(
        self,
        buyer_id: str,
        lines: list[CartLine],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        idempotency_key: str | None,
        notes: str | None,
        requires_approval: bool,
    ) -> Order:
        totals = compute_totals(lines, self._pricing)
        items = [
            OrderLineItem(
                product_id=line.product_id,
                name=line.name,
                unit_price=line.unit_price,
                image=line.image,
                quantity=Quantity(line.quantity),
            )
            for line in lines
        ]
        order = Order.create(
            buyer_id,
            items,
            items_price=totals.subtotal,
            tax_price=totals.tax,
            shipping_price=totals.shipping,
            total_price=totals.total,
            shipping_address=shipping_address,
            payment_method=payment_method,
            requires_approval=requires_approval,
            notes=notes,
            idempotency_key=idempotency_key,
        )
        return order

    def _open_payment_session(self, order: Order) -> str:
        try:
            url = self._payment_gateway.create_checkout_session(order)
        except PaymentGatewayError:
            raise
        except Exception as exc:
            raise PaymentGatewayError(
                f"Payment gateway failed for order {order.order_number}: {exc}"
            ) from exc
        if not url:
            raise PaymentGatewayError(
                f"Payment gateway returned no checkout URL for order {order.order_number}"
            )
        return url
