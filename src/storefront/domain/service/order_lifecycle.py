"""Domain service: Order Lifecycle.

Applies status transitions together with their side effects.  The
transition table itself lives on the Order aggregate; this service adds
the parts that reach outside it:

- entering CANCELLED or REJECTED returns every item to stock, atomically
  with the status write
- DELIVERED stamps ``delivered_at`` (done by the aggregate)
- every applied change is published to the notification sink

Operations on the same order are serialized, and the order is re-read
inside the lock, so two concurrent cancellations restock once.
"""

from __future__ import annotations

import logging
from datetime import datetime

from storefront.domain.exceptions import NotFoundError
from storefront.domain.gateway.notification_sink import (
    NotificationSink,
    OrderEvent,
    publish,
)
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import RESTOCK_STATUSES, Order, OrderStatus
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from storefront.domain.service.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


class OrderLifecycle:

    def __init__(
        self,
        order_repo: OrderRepository,
        inventory_repo: InventoryRepository,
        notifications: NotificationSink | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = InventoryReservationService(inventory_repo)
        self._notifications = notifications
        self._locks = KeyedLocks()

    def transition(
        self,
        order_id: int,
        target: OrderStatus,
        actor: Actor,
        now: datetime | None = None,
    ) -> Order:
        """Move an order to *target* on behalf of *actor* and persist it.

        For restocking targets the sequence is: validate, restock, write
        status.  If the status write fails the restock is reversed, so
        stock and status never disagree.
        """
        with self._locks.hold(order_id):
            order = self._load(order_id)
            order.check_transition(target, actor)

            restock = target in RESTOCK_STATUSES
            quantities = [(item.product_id, item.quantity.value) for item in order.items]
            if restock:
                self._reservations.release(quantities)

            previous = order.status
            previous_delivered_at = order.delivered_at
            try:
                order.transition_to(target, actor, now=now)
                self._order_repo.save(order)
            except Exception:
                order.status = previous
                order.delivered_at = previous_delivered_at
                if restock:
                    logger.error(
                        "Saving order %s as %s failed; reversing restock",
                        order.order_number,
                        target.value,
                    )
                    self._reservations.reserve(quantities)
                raise

        logger.info(
            "Order %s: %s -> %s by %s %s",
            order.order_number,
            previous.value,
            target.value,
            actor.role.value,
            actor.user_id,
        )
        if target == OrderStatus.CANCELLED:
            publish(self._notifications, OrderEvent.CANCELLED, order)
        else:
            publish(self._notifications, OrderEvent.STATUS_CHANGED, order)
        return order

    def cancel(self, order_id: int, actor: Actor, now: datetime | None = None) -> Order:
        return self.transition(order_id, OrderStatus.CANCELLED, actor, now=now)

    def confirm_payment(
        self,
        order_id: int,
        payment_reference: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Record payment from the gateway webhook, whatever the status.

        Repeated confirmations keep the first ``paid_at``.
        """
        with self._locks.hold(order_id):
            order = self._load(order_id)
            changed = order.mark_paid(payment_reference, now=now)
            if changed:
                self._order_repo.save(order)

        if changed:
            logger.info("Order %s marked paid (%s)", order.order_number, payment_reference)
            publish(self._notifications, OrderEvent.PAID, order)
        else:
            logger.info("Order %s already paid; ignoring confirmation", order.order_number)
        return order

    def _load(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order
