"""Order endpoints: checkout, lookups, cancellation, fulfilment, payment webhook."""

from __future__ import annotations

import hmac

from fastapi import APIRouter, Depends, Header, Query, Response, status

from storefront.application.dto import CartItemSpec, CheckoutResultDTO, OrderDTO
from storefront.application.update_order_status import parse_status
from storefront.domain.exceptions import UnauthenticatedError, ValidationError
from storefront.domain.model.actor import Actor
from storefront.infrastructure.api.dependencies import (
    current_actor,
    get_app_settings,
    get_services,
    staff_actor,
)
from storefront.infrastructure.api.schemas import (
    CheckoutIn,
    CheckoutOut,
    ErrorOut,
    OrderOut,
    OrderPageOut,
    OrderStatisticsOut,
    PaymentWebhookIn,
    StatusUpdateIn,
)
from storefront.infrastructure.bootstrap import Services
from storefront.infrastructure.config import Settings

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    responses={
        400: {"model": ErrorOut},
        401: {"model": ErrorOut},
        403: {"model": ErrorOut},
        404: {"model": ErrorOut},
        409: {"model": ErrorOut},
    },
)


@router.post(
    "",
    response_model=CheckoutOut,
    status_code=status.HTTP_201_CREATED,
    responses={502: {"model": ErrorOut}},
)
def create_order(
    payload: CheckoutIn,
    response: Response,
    idempotency_key: str | None = Header(None),
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CheckoutResultDTO:
    """Check out the buyer's cart, or the ``items`` given in the body."""
    options = dict(
        shipping_address=payload.shipping_address.to_domain(),
        payment_method=payload.payment_method,
        idempotency_key=idempotency_key,
        notes=payload.notes,
        requires_approval=payload.requires_approval,
    )
    if payload.items is not None:
        lines = services.cart_store.lines_for(
            [CartItemSpec(product_id=i.product_id, quantity=i.quantity) for i in payload.items]
        )
        result = services.checkout.checkout(actor.user_id, lines, **options)
    else:
        result = services.checkout.checkout_cart(actor.user_id, **options)

    if result.replayed:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("", response_model=OrderPageOut)
def list_orders(
    page: int = Query(1),
    limit: int = Query(10),
    status_filter: str | None = Query(None, alias="status"),
    sort: str = Query("-created_at"),
    buyer_id: str | None = Query(None),
    actor: Actor = Depends(staff_actor),
    services: Services = Depends(get_services),
):
    return services.queries.list_for(
        actor,
        status=parse_status(status_filter) if status_filter else None,
        buyer_id=buyer_id,
        page=page,
        limit=limit,
        sort=sort,
    )


@router.get("/my-orders", response_model=list[OrderOut])
def my_orders(
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> list[OrderDTO]:
    return services.queries.my_orders(actor.user_id)


@router.get("/statistics", response_model=OrderStatisticsOut)
def order_statistics(
    actor: Actor = Depends(staff_actor),
    services: Services = Depends(get_services),
):
    return services.queries.statistics_for(actor)


@router.get("/id/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> OrderDTO:
    return services.show_order.handle(order_id, actor)


@router.get("/order-id/{order_number}", response_model=OrderOut)
def get_order_by_number(
    order_number: str,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> OrderDTO:
    return services.show_order.handle_by_number(order_number, actor)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> OrderDTO:
    return services.cancel_order.handle(order_id, actor)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: StatusUpdateIn,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> OrderDTO:
    return services.update_status.handle(order_id, payload.status, actor)


@router.post("/webhooks/payment", response_model=OrderOut)
def payment_webhook(
    payload: PaymentWebhookIn,
    x_webhook_secret: str | None = Header(None),
    settings: Settings = Depends(get_app_settings),
    services: Services = Depends(get_services),
) -> OrderDTO:
    """Called by the payment provider once a hosted checkout completes.

    Refused outright until a webhook secret is configured.
    """
    if not settings.webhook_secret:
        raise UnauthenticatedError("Payment webhook is disabled: no webhook secret configured")
    if not hmac.compare_digest(x_webhook_secret or "", settings.webhook_secret):
        raise UnauthenticatedError("Invalid webhook secret")

    order_ref = payload.order_id if payload.order_id is not None else payload.order_number
    if order_ref is None:
        raise ValidationError(
            "order_id or order_number is required",
            fields=["order_id", "order_number"],
        )
    return services.confirm_payment.handle(order_ref, payload.payment_reference)
