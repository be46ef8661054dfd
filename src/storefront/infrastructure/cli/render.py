"""Plain-text rendering shared by the CLI commands."""

from __future__ import annotations

from decimal import Decimal

import click

from storefront.application.dto import CartDTO, OrderDTO, TotalsDTO


def money(amount: Decimal, currency: str) -> str:
    if currency == "USD":
        return f"${amount:.2f}"
    return f"{amount:.2f} {currency}"


def echo_totals(totals: TotalsDTO) -> None:
    c = totals.currency
    click.echo(f"  {'Subtotal':<27} {money(totals.subtotal, c):>20}")
    click.echo(f"  {'Tax':<27} {money(totals.tax, c):>20}")
    click.echo(f"  {'Shipping':<27} {money(totals.shipping, c):>20}")
    click.echo(f"  {'Total':<27} {money(totals.total, c):>20}")


def echo_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo(f"Cart for {dto.buyer_id} is empty.")
        return

    c = dto.totals.currency
    click.echo(f"Cart for {dto.buyer_id}  ({dto.item_count} item(s))")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for line in dto.items:
        click.echo(
            f"  {line.name:<20} {line.quantity:>5} "
            f"{money(line.unit_price, c):>10} {money(line.line_total, c):>10}"
        )
    click.echo(f"  {'-'*47}")
    echo_totals(dto.totals)


def echo_order(dto: OrderDTO) -> None:
    c = dto.currency
    paid = f"paid {dto.paid_at:%Y-%m-%d %H:%M}" if dto.is_paid and dto.paid_at else "unpaid"
    click.echo(f"Order {dto.order_number} (#{dto.id})  status={dto.status}  {paid}")
    click.echo(f"Buyer:    {dto.buyer_id}")
    click.echo(f"Created:  {dto.created_at:%Y-%m-%d %H:%M}")
    click.echo(f"Payment:  {dto.payment_method}")
    addr = dto.shipping_address
    click.echo(f"Ship to:  {addr.address}, {addr.city} {addr.postal_code}, {addr.country}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<20} {item.quantity:>5} "
            f"{money(item.unit_price, c):>10} {money(item.line_total, c):>10}"
        )
    click.echo(f"  {'-'*47}")
    echo_totals(
        TotalsDTO(
            subtotal=dto.items_price,
            tax=dto.tax_price,
            shipping=dto.shipping_price,
            total=dto.total_price,
            currency=c,
        )
    )
