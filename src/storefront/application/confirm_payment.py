"""Application service: Confirm Payment use case.

Called by the payment webhook once the gateway reports a completed
checkout.  Marks the order paid without touching its status.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.order_lifecycle import OrderLifecycle


class ConfirmPaymentHandler:

    def __init__(self, order_repo: OrderRepository, lifecycle: OrderLifecycle) -> None:
        self._order_repo = order_repo
        self._lifecycle = lifecycle

    def handle(self, order_ref: int | str, payment_reference: str | None = None) -> OrderDTO:
        """*order_ref* is the internal id or the human order number."""
        if isinstance(order_ref, int):
            order_id = order_ref
        else:
            order = self._order_repo.get_by_order_number(order_ref)
            if order is None:
                raise NotFoundError("Order", order_ref)
            order_id = order.id  # type: ignore[assignment]
        order = self._lifecycle.confirm_payment(order_id, payment_reference)
        return order_to_dto(order)
