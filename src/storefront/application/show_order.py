"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import NotFoundError, UnauthorizedError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, actor: Actor) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return self._visible(order, actor)

    def handle_by_number(self, order_number: str, actor: Actor) -> OrderDTO:
        order = self._order_repo.get_by_order_number(order_number)
        if order is None:
            raise NotFoundError("Order", order_number)
        return self._visible(order, actor)

    @staticmethod
    def _visible(order: Order, actor: Actor) -> OrderDTO:
        if not actor.is_staff and not actor.owns(order.buyer_id):
            raise UnauthorizedError(
                f"Order {order.order_number} belongs to another buyer"
            )
        return order_to_dto(order)
