"""Port for order notifications consumed by the UI layer (toasts, emails)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

from storefront.domain.model.order import Order

logger = logging.getLogger(__name__)


class OrderEvent(Enum):
    CREATED = "order_created"
    STATUS_CHANGED = "order_status_changed"
    CANCELLED = "order_cancelled"
    PAID = "order_paid"


class NotificationSink(ABC):

    @abstractmethod
    def notify(self, event: OrderEvent, order: Order) -> None:
        """Deliver a notification.  May raise; callers use ``publish``."""


def publish(sink: NotificationSink | None, event: OrderEvent, order: Order) -> None:
    """Fire-and-forget delivery: a failing sink never fails the order operation."""
    if sink is None:
        return
    try:
        sink.notify(event, order)
    except Exception:
        logger.exception(
            "Notification %s for order %s failed", event.value, order.order_number
        )
