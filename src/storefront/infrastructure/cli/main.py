from pathlib import Path

import click

from storefront.domain.service.payment_simulator import DEFAULT_DECLINE_PROBABILITY
from storefront.infrastructure.bootstrap import Settings, build_container
from storefront.infrastructure.cli.order_commands import (
    order_create,
    order_list,
    order_pay,
    order_show,
    order_status,
    revenue,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_price,
    product_show,
    product_stock,
)
from storefront.infrastructure.cli.simulate_commands import simulate_traffic
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("data"),
    show_default=True,
    envvar="STOREFRONT_DATA_DIR",
    help="Directory holding products.json and orders.json.",
)
@click.option(
    "--decline-probability",
    type=click.FloatRange(0.0, 1.0),
    default=DEFAULT_DECLINE_PROBABILITY,
    show_default=True,
    envvar="STOREFRONT_DECLINE_PROBABILITY",
    help="Chance that a simulated payment is declined.",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    envvar="STOREFRONT_SEED",
    help="Seed for the payment simulator.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="STOREFRONT_LOG_LEVEL",
)
@click.option("--json-logs/--console-logs", default=True, show_default=True)
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Path,
    decline_probability: float,
    seed: int | None,
    log_level: str,
    json_logs: bool,
) -> None:
    """Storefront: products, orders, payments and revenue."""
    configure_logging(log_level, json_logs=json_logs)
    settings = Settings(data_dir=data_dir, decline_probability=decline_probability, seed=seed)
    ctx.obj = build_container(settings)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def simulate() -> None:
    """Exercise the system with simulated load."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_pay)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_price)
product.add_command(product_show)
product.add_command(product_stock)
simulate.add_command(simulate_traffic)
cli.add_command(revenue)
