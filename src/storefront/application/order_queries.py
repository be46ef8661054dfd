"""Application service: Order queries (listing, buyer history, statistics)."""

from __future__ import annotations

import math
from decimal import Decimal

from storefront.application.dto import (
    OrderDTO,
    OrderPageDTO,
    OrderStatisticsDTO,
    order_to_dto,
)
from storefront.domain.exceptions import UnauthorizedError, ValidationError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

DEFAULT_SORT = "-created_at"
RECENT_ORDERS_LIMIT = 5

_SORT_KEYS = {
    "created_at": lambda order: order.created_at,
    "total_price": lambda order: order.total_price.amount,
}


def _sorted(orders: list[Order], sort: str) -> list[Order]:
    """Sort by *sort* (``-`` prefix for descending), ties broken by id.

    The tie-break follows the same direction so equal timestamps keep
    creation order when ascending and reverse it when descending.
    """
    descending = sort.startswith("-")
    field_name = sort.lstrip("-")
    key = _SORT_KEYS.get(field_name)
    if key is None:
        allowed = ", ".join(sorted(_SORT_KEYS))
        raise ValidationError(
            f"Cannot sort orders by '{field_name}' (expected one of: {allowed})",
            fields=["sort"],
        )
    return sorted(orders, key=lambda o: (key(o), o.id or 0), reverse=descending)


class OrderQueryService:

    def __init__(self, order_repo: OrderRepository, currency: str = "USD") -> None:
        self._order_repo = order_repo
        self._currency = currency

    def list(
        self,
        status: OrderStatus | None = None,
        buyer_id: str | None = None,
        page: int = 1,
        limit: int = 10,
        sort: str = DEFAULT_SORT,
    ) -> OrderPageDTO:
        """One page of orders matching the filter.  ``page`` is 1-indexed."""
        if page < 1:
            raise ValidationError("Page must be 1 or greater", fields=["page"])
        if limit < 1:
            raise ValidationError("Limit must be 1 or greater", fields=["limit"])

        matching = [
            order
            for order in self._order_repo.list_all()
            if (status is None or order.status == status)
            and (buyer_id is None or order.buyer_id == buyer_id)
        ]
        ordered = _sorted(matching, sort)
        start = (page - 1) * limit
        total = len(ordered)
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in ordered[start:start + limit]],
            total=total,
            pages=math.ceil(total / limit),
            page=page,
            limit=limit,
        )

    def list_for(self, actor: Actor, **filters) -> OrderPageDTO:
        """Seller/admin listing; buyers are refused."""
        if not actor.is_staff:
            raise UnauthorizedError("Only sellers and admins can list all orders")
        return self.list(**filters)

    def my_orders(self, buyer_id: str) -> list[OrderDTO]:
        orders = [o for o in self._order_repo.list_all() if o.buyer_id == buyer_id]
        return [order_to_dto(o) for o in _sorted(orders, DEFAULT_SORT)]

    def statistics(self) -> OrderStatisticsDTO:
        """Dashboard numbers.

        Revenue counts every order except CANCELLED and REJECTED ones, whose
        money was never realized.  ``total_orders`` counts all orders.
        """
        orders = self._order_repo.list_all()
        revenue = sum(
            (o.total_price.amount for o in orders if o.counts_as_revenue),
            Decimal("0.00"),
        )
        counts = {status.value: 0 for status in OrderStatus}
        for order in orders:
            counts[order.status.value] += 1
        recent = _sorted(orders, DEFAULT_SORT)[:RECENT_ORDERS_LIMIT]
        return OrderStatisticsDTO(
            total_revenue=revenue,
            total_orders=len(orders),
            status_counts=counts,
            recent_orders=[order_to_dto(o) for o in recent],
            currency=self._currency,
        )

    def statistics_for(self, actor: Actor) -> OrderStatisticsDTO:
        if not actor.is_staff:
            raise UnauthorizedError("Only sellers and admins can view order statistics")
        return self.statistics()
