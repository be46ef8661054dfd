"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the code base that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.add_product import AddProductHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.cart_store import CartStore
from storefront.application.checkout import CheckoutOrchestrator
from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.list_products import ListProductsHandler
from storefront.application.order_queries import OrderQueryService
from storefront.application.set_inventory import SetInventoryHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.gateway.notification_sink import NotificationSink
from storefront.domain.gateway.payment_gateway import PaymentGateway
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.inventory_repository import InventoryRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.order_lifecycle import OrderLifecycle
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.notifications.logging_sink import LoggingNotificationSink
from storefront.infrastructure.payment.redirect_gateway import RedirectPaymentGateway
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def product_repository(settings: Settings | None = None) -> JsonProductRepository:
    settings = settings or get_settings()
    return JsonProductRepository(settings.data_dir / "products.json")


def inventory_repository(settings: Settings | None = None) -> JsonInventoryRepository:
    settings = settings or get_settings()
    return JsonInventoryRepository(settings.data_dir / "inventory.json")


def order_repository(settings: Settings | None = None) -> JsonOrderRepository:
    settings = settings or get_settings()
    return JsonOrderRepository(settings.data_dir / "orders.json")


def cart_repository(settings: Settings | None = None) -> JsonCartRepository:
    settings = settings or get_settings()
    return JsonCartRepository(settings.data_dir / "carts.json")


def payment_gateway(settings: Settings | None = None) -> RedirectPaymentGateway:
    settings = settings or get_settings()
    return RedirectPaymentGateway(
        base_url=settings.checkout_base_url,
        success_url=settings.success_url,
        cancel_url=settings.cancel_url,
    )


@dataclass
class Services:
    """Every use case, sharing one set of repositories.

    Build it once per process: the lifecycle and checkout services keep
    the per-order and per-idempotency-key locks.
    """

    cart_store: CartStore
    checkout: CheckoutOrchestrator
    lifecycle: OrderLifecycle
    queries: OrderQueryService
    show_order: ShowOrderHandler
    cancel_order: CancelOrderHandler
    update_status: UpdateOrderStatusHandler
    confirm_payment: ConfirmPaymentHandler
    add_product: AddProductHandler
    list_products: ListProductsHandler
    set_inventory: SetInventoryHandler
    show_inventory: ShowInventoryHandler


def build_services(
    *,
    orders: OrderRepository,
    products: ProductRepository,
    inventory: InventoryRepository,
    carts: CartRepository,
    payments: PaymentGateway,
    notifications: NotificationSink | None = None,
    settings: Settings | None = None,
) -> Services:
    settings = settings or get_settings()
    pricing = settings.pricing()

    cart_store = CartStore(carts, products, inventory, pricing)
    lifecycle = OrderLifecycle(orders, inventory, notifications)
    return Services(
        cart_store=cart_store,
        checkout=CheckoutOrchestrator(
            orders,
            inventory,
            payments,
            cart_store=cart_store,
            notifications=notifications,
            pricing=pricing,
        ),
        lifecycle=lifecycle,
        queries=OrderQueryService(orders, currency=settings.currency),
        show_order=ShowOrderHandler(orders),
        cancel_order=CancelOrderHandler(lifecycle),
        update_status=UpdateOrderStatusHandler(lifecycle),
        confirm_payment=ConfirmPaymentHandler(orders, lifecycle),
        add_product=AddProductHandler(products, inventory),
        list_products=ListProductsHandler(products),
        set_inventory=SetInventoryHandler(inventory, products),
        show_inventory=ShowInventoryHandler(inventory),
    )


def default_services(settings: Settings | None = None) -> Services:
    """Services over the JSON stores in ``settings.data_dir``."""
    settings = settings or get_settings()
    return build_services(
        orders=order_repository(settings),
        products=product_repository(settings),
        inventory=inventory_repository(settings),
        carts=cart_repository(settings),
        payments=payment_gateway(settings),
        notifications=LoggingNotificationSink(),
        settings=settings,
    )
