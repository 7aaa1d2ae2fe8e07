"""CLI commands for the Order aggregate and revenue."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, order_to_dto
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.infrastructure.bootstrap import Container


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Created:  {dto.created_at}")
    if dto.payment_method:
        click.echo(f"Paid via: {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    click.echo(
        f"  {dto.product_name:<20} {dto.quantity:>5} {dto.unit_price:>10} {dto.total:>10}"
    )


@click.command("create")
@click.option("--email", required=True, help="Customer email.")
@click.option("--name", required=True, help="Customer name.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to order.")
@click.pass_obj
def order_create(container: Container, email: str, name: str, product_id: str, quantity: int) -> None:
    """Create an order and reserve its stock."""
    try:
        order = container.order_ledger.create_order(email, name, product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order.id} created  (status={order.status.value})")
    _display_order(order_to_dto(order))


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        order = container.order_ledger.get_order(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order_to_dto(order))


@click.command("list")
@click.option("--email", default=None, help="Only orders for this customer.")
@click.pass_obj
def order_list(container: Container, email: str | None) -> None:
    """List orders."""
    if email:
        orders = container.order_ledger.get_orders_by_customer(email)
    else:
        orders = container.order_ledger.get_all_orders()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Customer':<28} {'Product':<20} {'Qty':>5} {'Total':>10} {'Status':<10}")
    click.echo("-" * 84)
    for dto in (order_to_dto(o) for o in orders):
        click.echo(
            f"{dto.id:<6} {dto.customer_email:<28} {dto.product_name:<20} "
            f"{dto.quantity:>5} {dto.total:>10} {dto.status:<10}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="New status.",
)
@click.pass_obj
def order_status(container: Container, order_id: int, status: str) -> None:
    """Overwrite an order's status (stock is not touched)."""
    try:
        order = container.order_ledger.update_order_status(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {order.status.value}")


@click.command("pay")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to pay.")
@click.option("--method", "payment_method", default="CREDIT_CARD", show_default=True, help="Payment method.")
@click.pass_obj
def order_pay(container: Container, order_id: int, payment_method: str) -> None:
    """Attempt payment for an order."""
    try:
        accepted = container.order_ledger.process_payment(order_id, payment_method)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not accepted:
        raise click.ClickException(f"Payment for order #{order_id} failed.")
    click.echo(f"Order #{order_id} paid via {payment_method}: CONFIRMED")


@click.command("revenue")
@click.pass_obj
def revenue(container: Container) -> None:
    """Show total revenue from confirmed orders."""
    total = container.revenue.calculate_total_revenue()
    click.echo(f"Total revenue: {total}")
