"""Integration tests for the checkout orchestrator.

Uses in-memory fakes, no file I/O.
"""

import threading
from decimal import Decimal

import pytest

from storefront.domain.exceptions import (
    EmptyCartError,
    OutOfStockError,
    PaymentGatewayError,
    ValidationError,
)
from storefront.domain.gateway.notification_sink import OrderEvent
from storefront.domain.model.actor import Actor
from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import OrderStatus, PaymentMethod
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, ShippingAddress
from tests.fakes import make_store

ADDRESS = ShippingAddress("1 Main St", "Springfield", "12345", "US")


def _checkout(store, buyer="alice", method=PaymentMethod.STRIPE, **kwargs):
    return store.services.checkout.checkout_cart(
        buyer, shipping_address=kwargs.pop("address", ADDRESS), payment_method=method, **kwargs
    )


class TestCheckoutHappyPath:

    def test_places_order_from_cart(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 3)

        result = _checkout(store)

        order = result.order
        assert order.status == "new"
        assert order.is_paid is False
        assert order.items_price == Decimal("90.00")
        assert order.tax_price == Decimal("13.50")
        assert order.shipping_price == Decimal("10.00")
        assert order.total_price == Decimal("113.50")
        assert order.id == 1
        assert store.orders.get_by_id(1) is not None

    def test_takes_stock_and_clears_cart(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 3)

        _checkout(store)

        assert store.inventory.get_by_product_id("1").stock == 7
        assert store.inventory.get_by_product_id("1").sold_stock == 3
        assert store.services.cart_store.view("alice").items == []

    def test_redirect_method_gets_checkout_url(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)

        result = _checkout(store)

        assert result.checkout_url == f"https://pay.test/session/{result.order.order_number}"
        assert result.order.checkout_url == result.checkout_url

    def test_cash_on_delivery_has_no_redirect(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)

        result = _checkout(store, method=PaymentMethod.COD)

        assert result.checkout_url is None
        assert store.payments.sessions == []

    def test_manual_review_order_is_pending(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)
        result = _checkout(store, requires_approval=True)
        assert result.order.status == OrderStatus.PENDING.value

    def test_free_shipping_above_threshold(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "3", 1)
        store.services.cart_store.add_item("alice", "2", 2)  # 100 + 50

        order = _checkout(store).order

        assert order.shipping_price == Decimal("0.00")
        assert order.total_price == Decimal("172.50")

    def test_publishes_created_event(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)
        _checkout(store)
        assert store.sink.kinds == [OrderEvent.CREATED]

    def test_explicit_lines_leave_stored_cart_alone(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "2", 1)
        lines = [CartLine("1", "Widget", Money.of("30.00"), "", 2)]

        store.services.checkout.checkout(
            "alice", lines, shipping_address=ADDRESS, payment_method=PaymentMethod.COD
        )

        assert len(store.services.cart_store.view("alice").items) == 1


class TestCheckoutFailures:

    def test_empty_cart(self):
        store = make_store()
        with pytest.raises(EmptyCartError):
            _checkout(store)
        assert store.orders.list_all() == []

    def test_missing_address_fields_named(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)

        with pytest.raises(ValidationError) as exc_info:
            _checkout(store, address=ShippingAddress("1 Main St", "", "", "US"))

        assert exc_info.value.fields == ("city", "postal_code")
        assert store.inventory.get_by_product_id("1").stock == 10

    def test_out_of_stock_is_all_or_nothing(self):
        store = make_store(stock={"2": 1})
        store.services.cart_store.add_item("alice", "1", 2)
        store.services.cart_store.add_item("alice", "2", 1)
        # Someone else buys the last Gadget first
        store.inventory.check_and_decrement("2", 1)

        with pytest.raises(OutOfStockError, match="'2'"):
            _checkout(store)

        assert store.inventory.get_by_product_id("1").stock == 10
        assert store.orders.list_all() == []
        assert len(store.services.cart_store.view("alice").items) == 2

    def test_gateway_failure_releases_stock_and_keeps_cart(self):
        store = make_store()
        store.payments.fail = True
        store.services.cart_store.add_item("alice", "1", 2)

        with pytest.raises(PaymentGatewayError):
            _checkout(store)

        assert store.inventory.get_by_product_id("1").stock == 10
        assert store.orders.list_all() == []
        assert store.services.cart_store.view("alice").item_count == 2
        assert store.sink.events == []

    def test_persistence_failure_releases_stock(self):
        store = make_store()
        store.orders.fail_on_save = True
        store.services.cart_store.add_item("alice", "1", 2)

        with pytest.raises(OSError):
            _checkout(store, method=PaymentMethod.COD)

        assert store.inventory.get_by_product_id("1").stock == 10


class TestIdempotency:

    def test_replay_returns_same_order_and_decrements_once(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 2)

        first = _checkout(store, idempotency_key="k-1")
        store.services.cart_store.add_item("alice", "1", 2)
        second = _checkout(store, idempotency_key="k-1")

        assert second.replayed is True
        assert second.order.id == first.order.id
        assert second.checkout_url == first.checkout_url
        assert len(store.orders.list_all()) == 1
        assert store.inventory.get_by_product_id("1").stock == 8

    def test_keys_are_scoped_per_buyer(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)
        store.services.cart_store.add_item("bob", "1", 1)

        a = _checkout(store, buyer="alice", idempotency_key="same")
        b = _checkout(store, buyer="bob", idempotency_key="same")

        assert a.order.id != b.order.id

    def test_concurrent_retries_create_one_order(self):
        store = make_store()
        lines = [CartLine("1", "Widget", Money.of("30.00"), "", 1)]
        results = []

        def place():
            results.append(
                store.services.checkout.checkout(
                    "alice",
                    lines,
                    shipping_address=ADDRESS,
                    payment_method=PaymentMethod.COD,
                    idempotency_key="retry",
                )
            )

        threads = [threading.Thread(target=place) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.orders.list_all()) == 1
        assert {r.order.id for r in results} == {1}
        assert store.inventory.get_by_product_id("1").stock == 9
        assert len(store.services.checkout._locks) == 0


class TestSnapshotInvariant:

    def test_catalog_changes_do_not_alter_placed_orders(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)
        order = _checkout(store, method=PaymentMethod.COD).order

        store.products.save(Product("1", "Renamed Widget", Money.of("999.00")))

        reloaded = store.services.show_order.handle_by_number(
            order.order_number, Actor("alice")
        )
        assert reloaded.items[0].name == "Widget"
        assert reloaded.items[0].unit_price == Decimal("30.00")
        assert reloaded.total_price == order.total_price

    def test_cart_keeps_price_from_add_time(self):
        store = make_store()
        store.services.cart_store.add_item("alice", "1", 1)
        store.products.save(Product("1", "Widget", Money.of("45.00")))

        order = _checkout(store, method=PaymentMethod.COD).order

        assert order.items_price == Decimal("30.00")
