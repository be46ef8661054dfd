"""Cart endpoints.  The cart always belongs to the calling buyer."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.application.dto import CartDTO
from storefront.domain.model.actor import Actor
from storefront.infrastructure.api.dependencies import current_actor, get_services
from storefront.infrastructure.api.schemas import CartItemIn, CartOut, CartSummaryOut, ErrorOut
from storefront.infrastructure.bootstrap import Services

router = APIRouter(
    prefix="/cart",
    tags=["Cart"],
    responses={
        400: {"model": ErrorOut},
        401: {"model": ErrorOut},
        404: {"model": ErrorOut},
        409: {"model": ErrorOut},
    },
)


@router.get("", response_model=CartOut)
def get_cart(
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartDTO:
    return services.cart_store.view(actor.user_id)


@router.get("/summary", response_model=CartSummaryOut)
def cart_summary(
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartSummaryOut:
    cart = services.cart_store.view(actor.user_id)
    return CartSummaryOut(
        subtotal=cart.totals.subtotal,
        tax=cart.totals.tax,
        shipping=cart.totals.shipping,
        total=cart.totals.total,
        currency=cart.totals.currency,
        item_count=cart.item_count,
    )


@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartItemIn,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartDTO:
    return services.cart_store.add_item(actor.user_id, payload.product_id, payload.quantity)


@router.patch("/update", response_model=CartOut)
def update_cart_item(
    payload: CartItemIn,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartDTO:
    """Set a line's quantity; 0 or less removes the line."""
    return services.cart_store.set_quantity(actor.user_id, payload.product_id, payload.quantity)


@router.delete("/remove/{product_id}", response_model=CartOut)
def remove_from_cart(
    product_id: str,
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartDTO:
    return services.cart_store.remove_item(actor.user_id, product_id)


@router.delete("/clear", response_model=CartOut)
def clear_cart(
    actor: Actor = Depends(current_actor),
    services: Services = Depends(get_services),
) -> CartDTO:
    return services.cart_store.clear(actor.user_id)
