"""Port for the external payment collaborator.

The core only needs a URL to send the buyer to.  Payment confirmation
arrives later through a webhook (see ``ConfirmPaymentHandler``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class PaymentGateway(ABC):

    @abstractmethod
    def create_checkout_session(self, order: Order) -> str:
        """Return the hosted-checkout URL for *order*.

        Raises PaymentGatewayError if the gateway cannot be reached or
        refuses the session.
        """
