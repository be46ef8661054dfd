"""CLI commands for inventory management."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Services


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--stock", required=True, type=int, help="Units on hand.")
@click.pass_obj
def inventory_set(services: Services, product_id: str, stock: int) -> None:
    """Set the stock level for a product."""
    try:
        item = services.set_inventory.handle(product_id=product_id, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock for {item.product_name} (#{item.product_id}) set to {item.stock} "
        f"({item.sold_stock} sold)"
    )


@click.command("show")
@click.pass_obj
def inventory_show(services: Services) -> None:
    """Show current stock levels."""
    lines = services.show_inventory.handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'In stock':>10} {'Sold':>8}")
    click.echo("-" * 47)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.stock:>10} {line.sold_stock:>8}"
        )
