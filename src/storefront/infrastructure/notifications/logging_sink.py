"""Notification sink that writes order events to the log.

The UI layer consumes events from wherever this is pointed; by default
that is the ``storefront.notifications`` logger.
"""

from __future__ import annotations

import logging

from storefront.domain.gateway.notification_sink import NotificationSink, OrderEvent
from storefront.domain.model.order import Order

logger = logging.getLogger("storefront.notifications")


class LoggingNotificationSink(NotificationSink):

    def notify(self, event: OrderEvent, order: Order) -> None:
        logger.info(
            "%s order=%s buyer=%s status=%s paid=%s",
            event.value,
            order.order_number,
            order.buyer_id,
            order.status.value,
            order.is_paid,
        )
