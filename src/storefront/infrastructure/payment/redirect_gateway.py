"""Hosted-checkout payment gateway.

Builds the redirect URL for a hosted checkout page.  The page reports the
outcome back through the payment webhook; nothing here waits for it.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from storefront.domain.exceptions import PaymentGatewayError
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.model.order import Order

logger = logging.getLogger(__name__)


class RedirectPaymentGateway(PaymentGateway):

    def __init__(self, base_url: str, success_url: str, cancel_url: str) -> None:
        self._base_url = base_url
        self._success_url = success_url
        self._cancel_url = cancel_url

    def create_checkout_session(self, order: Order) -> str:
        if not self._base_url:
            raise PaymentGatewayError("Payment gateway is not configured (no checkout URL)")

        query = urlencode(
            {
                "order": order.order_number,
                "amount": order.total_price.minor_units,
                "currency": order.total_price.currency.lower(),
                "method": order.payment_method.value,
                "success_url": f"{self._success_url}?orderId={order.order_number}",
                "cancel_url": self._cancel_url,
            }
        )
        url = f"{self._base_url}?{query}"
        logger.debug("Checkout session for %s: %s", order.order_number, url)
        return url
