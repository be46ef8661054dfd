"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import CartItemSpec
from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import OrderStatus, PaymentMethod
from storefront.domain.model.value_objects import ShippingAddress
from storefront.infrastructure.bootstrap import Services
from storefront.infrastructure.cli.render import echo_order, money


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse '1:3,2:5' into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(CartItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def actor_options(func):
    func = click.option(
        "--role",
        type=click.Choice([r.value for r in Role]),
        default=Role.BUYER.value,
        show_default=True,
        help="Role of the acting user.",
    )(func)
    return click.option("--actor", "actor_id", required=True, help="Acting user ID.")(func)


@click.command("checkout")
@click.option("--buyer", required=True, help="Buyer user ID.")
@click.option("--address", default="", help="Street address.")
@click.option("--city", default="")
@click.option("--postal-code", default="")
@click.option("--country", default="")
@click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.STRIPE.value,
    show_default=True,
)
@click.option("--items", default=None, help="Check out 'ProductID:Qty,...' instead of the cart.")
@click.option("--idempotency-key", default=None, help="Replays the original order on retry.")
@click.option("--notes", default=None)
@click.option("--manual-review", is_flag=True, default=False, help="Hold as pending for approval.")
@click.pass_obj
def order_checkout(
    services: Services,
    buyer: str,
    address: str,
    city: str,
    postal_code: str,
    country: str,
    payment: str,
    items: str | None,
    idempotency_key: str | None,
    notes: str | None,
    manual_review: bool,
) -> None:
    """Turn the buyer's cart into an order."""
    shipping = ShippingAddress(
        address=address, city=city, postal_code=postal_code, country=country
    )
    options = dict(
        shipping_address=shipping,
        payment_method=PaymentMethod(payment),
        idempotency_key=idempotency_key,
        notes=notes,
        requires_approval=manual_review,
    )

    try:
        if items:
            lines = services.cart_store.lines_for(_parse_items(items))
            result = services.checkout.checkout(buyer, lines, **options)
        else:
            result = services.checkout.checkout_cart(buyer, **options)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.replayed:
        click.echo(f"Idempotency key already used; showing order {result.order.order_number}.")
    else:
        click.echo(f"Order {result.order.order_number} placed.")
    echo_order(result.order)
    if result.checkout_url:
        click.echo()
        click.echo(f"Pay at: {result.checkout_url}")


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
@actor_options
@click.pass_obj
def order_show(
    services: Services,
    order_id: int | None,
    order_number: str | None,
    actor_id: str,
    role: str,
) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Give exactly one of --id or --number.")
    actor = Actor(actor_id, Role(role))

    try:
        if order_id is not None:
            dto = services.show_order.handle(order_id, actor)
        else:
            dto = services.show_order.handle_by_number(order_number, actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_order(dto)


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@actor_options
@click.pass_obj
def order_cancel(services: Services, order_id: int, actor_id: str, role: str) -> None:
    """Cancel an order and return its items to stock."""
    try:
        dto = services.cancel_order.handle(order_id, Actor(actor_id, Role(role)))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} cancelled; items returned to stock.")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "target",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="New status.",
)
@actor_options
@click.pass_obj
def order_status(
    services: Services, order_id: int, target: str, actor_id: str, role: str
) -> None:
    """Move an order along its fulfilment path (sellers and admins)."""
    try:
        dto = services.update_status.handle(order_id, target, Actor(actor_id, Role(role)))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("pay")
@click.option("--id", "order_id", type=int, default=None, help="Order ID.")
@click.option("--number", "order_number", default=None, help="Order number.")
@click.option("--reference", default=None, help="Gateway payment reference.")
@click.pass_obj
def order_pay(
    services: Services,
    order_id: int | None,
    order_number: str | None,
    reference: str | None,
) -> None:
    """Record a completed payment, as the gateway webhook would."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Give exactly one of --id or --number.")

    try:
        dto = services.confirm_payment.handle(
            order_id if order_id is not None else order_number, reference
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} marked paid at {dto.paid_at:%Y-%m-%d %H:%M}.")


@click.command("list")
@click.option("--status", default=None, type=click.Choice([s.value for s in OrderStatus]))
@click.option("--buyer", default=None, help="Only this buyer's orders.")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=10, type=int, show_default=True)
@click.option("--sort", default="-created_at", show_default=True)
@actor_options
@click.pass_obj
def order_list(
    services: Services,
    status: str | None,
    buyer: str | None,
    page: int,
    limit: int,
    sort: str,
    actor_id: str,
    role: str,
) -> None:
    """List orders.  Buyers see their own; staff see everyone's."""
    actor = Actor(actor_id, Role(role))

    try:
        if actor.is_staff:
            result = services.queries.list_for(
                actor,
                status=OrderStatus(status) if status else None,
                buyer_id=buyer,
                page=page,
                limit=limit,
                sort=sort,
            )
            orders = result.orders
            footer = f"Page {result.page} of {result.pages} ({result.total} order(s))"
        else:
            orders = services.queries.my_orders(actor.user_id)
            footer = f"{len(orders)} order(s)"
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<5} {'Number':<22} {'Buyer':<12} {'Status':<11} {'Paid':<5} {'Total':>12}")
    click.echo("-" * 72)
    for o in orders:
        click.echo(
            f"{o.id:<5} {o.order_number:<22} {o.buyer_id:<12} {o.status:<11} "
            f"{'yes' if o.is_paid else 'no':<5} {money(o.total_price, o.currency):>12}"
        )
    click.echo(footer)


@click.command("stats")
@actor_options
@click.pass_obj
def order_stats(services: Services, actor_id: str, role: str) -> None:
    """Show revenue and order counts per status (sellers and admins)."""
    try:
        stats = services.queries.statistics_for(Actor(actor_id, Role(role)))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Total orders:  {stats.total_orders}")
    click.echo(f"Total revenue: {money(stats.total_revenue, stats.currency)}")
    click.echo()
    for status, count in stats.status_counts.items():
        click.echo(f"  {status:<12} {count:>5}")
    if stats.recent_orders:
        click.echo()
        click.echo("Recent orders:")
        for o in stats.recent_orders:
            click.echo(f"  {o.order_number:<22} {o.status:<11} {money(o.total_price, o.currency):>12}")
