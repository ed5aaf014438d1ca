"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from atelier.application.dto import OrderDTO
from atelier.application.list_orders import ListOrdersHandler
from atelier.application.show_order import ShowOrderHandler
from atelier.application.update_order_status import UpdateOrderStatusHandler
from atelier.domain.exceptions import DomainException
from atelier.domain.model.order import OrderStatus
from atelier.infrastructure.bootstrap import Container
from atelier.infrastructure.cli.operator import OPERATOR


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    address = dto.shipping_address
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Customer: {address.name} <{address.email}>  user={dto.user_id}")
    click.echo(f"Ship to:  {address.address}, {address.city} {address.country}".rstrip())
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Size':<8} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*61}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.size:<8} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*61}")
    click.echo(f"  {'Subtotal':<38} {dto.subtotal:>21}")
    if dto.discount_code:
        click.echo(f"  {'Discount (' + dto.discount_code + ')':<38} {'-' + dto.discount_amount:>21}")
    click.echo(f"  {'Order Total':<38} {dto.total:>21}")


@click.command("list")
@click.pass_obj
def order_list(container: Container) -> None:
    """List every order, newest first."""
    orders = ListOrdersHandler(order_repo=container.order_repo).handle(OPERATOR)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<34} {'Status':<11} {'User':<16} {'Total':>10}")
    click.echo("-" * 74)
    for o in orders:
        click.echo(f"{o.id:<34} {o.status:<11} {o.user_id:<16} {o.total:>10}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=container.order_repo)

    try:
        dto = handler.handle(order_id, OPERATOR)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="Status to move the order to.",
)
@click.pass_obj
def order_status(container: Container, order_id: str, new_status: str) -> None:
    """Move an order to a new status (stock is not returned on cancel)."""
    handler = UpdateOrderStatusHandler(order_repo=container.order_repo)

    try:
        change = handler.handle(order_id, new_status, OPERATOR)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id}: {change.previous_status} -> {change.new_status}")
