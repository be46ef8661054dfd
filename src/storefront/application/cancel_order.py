"""Application service: Cancel Order use case.

Buyers cancel their own orders; sellers and admins may cancel any.  Only
NEW, PENDING and PROCESSING orders can be cancelled.  Every item is
returned to stock in the same step as the status change.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.model.actor import Actor
from storefront.domain.service.order_lifecycle import OrderLifecycle


class CancelOrderHandler:

    def __init__(self, lifecycle: OrderLifecycle) -> None:
        self._lifecycle = lifecycle

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        order = self._lifecycle.cancel(order_id, actor)
        return order_to_dto(order)
