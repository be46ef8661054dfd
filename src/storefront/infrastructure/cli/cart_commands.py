"""CLI commands for the buyer's cart."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Services
from storefront.infrastructure.cli.render import echo_cart

buyer_option = click.option("--buyer", required=True, help="Buyer user ID.")


@click.command("add")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, type=int, show_default=True)
@click.pass_obj
def cart_add(services: Services, buyer: str, product_id: str, quantity: int) -> None:
    """Add units of a product to the cart."""
    try:
        dto = services.cart_store.add_item(buyer, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_cart(dto)


@click.command("set")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity; 0 removes the line.")
@click.pass_obj
def cart_set(services: Services, buyer: str, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    try:
        dto = services.cart_store.set_quantity(buyer, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_cart(dto)


@click.command("remove")
@buyer_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(services: Services, buyer: str, product_id: str) -> None:
    """Remove a line from the cart."""
    try:
        dto = services.cart_store.remove_item(buyer, product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    echo_cart(dto)


@click.command("clear")
@buyer_option
@click.pass_obj
def cart_clear(services: Services, buyer: str) -> None:
    """Empty the cart."""
    services.cart_store.clear(buyer)
    click.echo(f"Cart for {buyer} cleared.")


@click.command("show")
@buyer_option
@click.pass_obj
def cart_show(services: Services, buyer: str) -> None:
    """Show the cart with its totals."""
    echo_cart(services.cart_store.view(buyer))
