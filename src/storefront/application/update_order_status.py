"""Application service: Update Order Status use case (seller/admin)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import UnauthorizedError, ValidationError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus
from storefront.domain.service.order_lifecycle import OrderLifecycle


def parse_status(raw: str | OrderStatus) -> OrderStatus:
    """Accept an OrderStatus or its wire value, case-insensitively."""
    if isinstance(raw, OrderStatus):
        return raw
    try:
        return OrderStatus((raw or "").strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(
            f"Invalid order status '{raw}' (expected one of: {allowed})",
            fields=["status"],
        ) from None


class UpdateOrderStatusHandler:

    def __init__(self, lifecycle: OrderLifecycle) -> None:
        self._lifecycle = lifecycle

    def handle(self, order_id: int, status: str | OrderStatus, actor: Actor) -> OrderDTO:
        """Apply a fulfilment transition.

        Buyers are turned away here even for CANCELLED; they use the
        cancel use case, which checks ownership instead.
        """
        if not actor.is_staff:
            raise UnauthorizedError("Only sellers and admins can update order status")
        target = parse_status(status)
        order = self._lifecycle.transition(order_id, target, actor)
        return order_to_dto(order)
