"""Tests for the payment gateway, notification sink and settings adapters."""

import logging
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
from pydantic import ValidationError as SettingsError

from storefront.domain.exceptions import PaymentGatewayError
from storefront.domain.gateway.notification_sink import OrderEvent
from storefront.domain.model.order import Order, OrderLineItem, PaymentMethod
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.infrastructure.config import Settings
from storefront.infrastructure.notifications.logging_sink import LoggingNotificationSink
from storefront.infrastructure.payment.redirect_gateway import RedirectPaymentGateway


def _order() -> Order:
    return Order.create(
        "alice",
        [OrderLineItem("1", "Widget", Money.of("30.00"), "", Quantity(3))],
        items_price=Money.of("90.00"),
        tax_price=Money.of("13.50"),
        shipping_price=Money.of("10.00"),
        total_price=Money.of("113.50"),
        shipping_address=ShippingAddress("1 Main St", "Springfield", "12345", "US"),
        payment_method=PaymentMethod.STRIPE,
    )


class TestRedirectPaymentGateway:

    def test_builds_hosted_checkout_url(self):
        gateway = RedirectPaymentGateway(
            base_url="https://pay.example.com/checkout",
            success_url="http://shop.test/order-success",
            cancel_url="http://shop.test/cart?canceled=true",
        )
        order = _order()

        url = urlparse(gateway.create_checkout_session(order))
        query = parse_qs(url.query)

        assert f"{url.scheme}://{url.netloc}{url.path}" == "https://pay.example.com/checkout"
        assert query["order"] == [order.order_number]
        assert query["amount"] == ["11350"]
        assert query["currency"] == ["usd"]
        assert query["success_url"] == [
            f"http://shop.test/order-success?orderId={order.order_number}"
        ]
        assert query["cancel_url"] == ["http://shop.test/cart?canceled=true"]

    def test_unconfigured_gateway_fails(self):
        gateway = RedirectPaymentGateway(base_url="", success_url="", cancel_url="")
        with pytest.raises(PaymentGatewayError, match="not configured"):
            gateway.create_checkout_session(_order())


class TestLoggingNotificationSink:

    def test_logs_event(self, caplog):
        order = _order()
        with caplog.at_level(logging.INFO, logger="storefront.notifications"):
            LoggingNotificationSink().notify(OrderEvent.CREATED, order)
        assert f"order_created order={order.order_number} buyer=alice" in caplog.text


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        pricing = settings.pricing()
        assert pricing.tax_rate == Decimal("0.15")
        assert pricing.free_shipping_threshold == Money.of("100.00")
        assert settings.success_url == "http://localhost:3000/order-success"
        assert settings.cancel_url == "http://localhost:3000/cart?canceled=true"

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STOREFRONT_TAX_RATE", "0.20")
        monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("STOREFRONT_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.tax_rate == Decimal("0.20")
        assert settings.data_dir == tmp_path
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SettingsError, match="Unknown log level"):
            Settings(_env_file=None, log_level="chatty")
