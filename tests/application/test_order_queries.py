"""Tests for order listing, buyer history and statistics."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.exceptions import UnauthorizedError, ValidationError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import OrderStatus, PaymentMethod
from storefront.domain.model.value_objects import ShippingAddress
from tests.fakes import make_store

ADDRESS = ShippingAddress("1 Main St", "Springfield", "12345", "US")
ADMIN = Actor("root", Role.ADMIN)


def _store_with_orders(*specs: tuple[str, str, int]):
    """Place one COD order per (buyer, product_id, quantity), one minute apart."""
    store = make_store(stock={"1": 99, "2": 99, "3": 99})
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i, (buyer, product_id, qty) in enumerate(specs):
        store.services.cart_store.add_item(buyer, product_id, qty)
        result = store.services.checkout.checkout_cart(
            buyer, shipping_address=ADDRESS, payment_method=PaymentMethod.COD
        )
        store.orders.get_by_id(result.order.id).created_at = start + timedelta(minutes=i)
    return store


class TestList:

    def test_newest_first_by_default(self):
        store = _store_with_orders(("alice", "1", 1), ("bob", "2", 1), ("alice", "3", 1))
        page = store.services.queries.list()
        assert [o.id for o in page.orders] == [3, 2, 1]

    def test_pagination(self):
        store = _store_with_orders(*[("alice", "1", 1)] * 5)
        page = store.services.queries.list(page=2, limit=2)
        assert [o.id for o in page.orders] == [3, 2]
        assert (page.total, page.pages, page.page, page.limit) == (5, 3, 2, 2)

    def test_filters(self):
        store = _store_with_orders(("alice", "1", 1), ("bob", "2", 1))
        store.services.cancel_order.handle(1, Actor("alice"))

        assert [o.id for o in store.services.queries.list(buyer_id="bob").orders] == [2]
        cancelled = store.services.queries.list(status=OrderStatus.CANCELLED)
        assert [o.id for o in cancelled.orders] == [1]

    def test_sort_by_total(self):
        store = _store_with_orders(("alice", "3", 1), ("alice", "1", 1), ("alice", "2", 1))
        page = store.services.queries.list(sort="total_price")
        assert [o.total_price for o in page.orders] == sorted(o.total_price for o in page.orders)

    def test_bad_arguments(self):
        queries = make_store().services.queries
        with pytest.raises(ValidationError, match="Page"):
            queries.list(page=0)
        with pytest.raises(ValidationError, match="Limit"):
            queries.list(limit=0)
        with pytest.raises(ValidationError, match="Cannot sort orders by 'colour'"):
            queries.list(sort="colour")

    def test_buyers_cannot_list_everything(self):
        with pytest.raises(UnauthorizedError):
            make_store().services.queries.list_for(Actor("alice"))


class TestMyOrders:

    def test_only_own_orders_newest_first(self):
        store = _store_with_orders(("alice", "1", 1), ("bob", "2", 1), ("alice", "3", 1))
        assert [o.id for o in store.services.queries.my_orders("alice")] == [3, 1]


class TestStatistics:

    def test_revenue_excludes_cancelled_and_rejected(self):
        store = _store_with_orders(("alice", "1", 3), ("bob", "3", 2), ("carol", "2", 1))
        # 1: 90 -> 113.50   2: 200 -> 230.00   3: 25 -> 38.75
        store.services.cancel_order.handle(2, Actor("bob"))

        stats = store.services.queries.statistics_for(ADMIN)

        assert stats.total_revenue == Decimal("152.25")
        assert stats.total_orders == 3
        assert stats.status_counts["new"] == 2
        assert stats.status_counts["cancelled"] == 1
        assert stats.status_counts["delivered"] == 0
        assert set(stats.status_counts) == {s.value for s in OrderStatus}

    def test_recent_orders_are_the_five_newest(self):
        store = _store_with_orders(*[("alice", "1", 1)] * 7)
        stats = store.services.queries.statistics()
        assert [o.id for o in stats.recent_orders] == [7, 6, 5, 4, 3]

    def test_staff_only(self):
        with pytest.raises(UnauthorizedError):
            make_store().services.queries.statistics_for(Actor("alice"))
