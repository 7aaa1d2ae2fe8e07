"""CLI commands for the traffic harness."""

from __future__ import annotations

import random

import click

from storefront.application.traffic import TrafficDriver
from storefront.infrastructure.bootstrap import Container


@click.command("traffic")
@click.option("--requests", "request_count", default=100, show_default=True, type=click.IntRange(min=0))
@click.option("--workers", default=8, show_default=True, type=click.IntRange(min=1))
@click.option("--seed", type=int, default=None, help="Seed for the action mix.")
@click.pass_obj
def simulate_traffic(container: Container, request_count: int, workers: int, seed: int | None) -> None:
    """Fire concurrent random user actions at the catalog and orders."""
    driver = TrafficDriver(
        product_store=container.product_store,
        order_ledger=container.order_ledger,
        revenue=container.revenue,
        rng=random.Random(seed),
        max_workers=workers,
    )
    report = driver.run(request_count)

    click.echo(f"Requests:          {report.requests}")
    for action, count in sorted(report.actions.items()):
        click.echo(f"  {action:<17} {count}")
    click.echo(f"Orders created:    {report.orders_created}")
    click.echo(f"Payments accepted: {report.payments_accepted}")
    click.echo(f"Payments declined: {report.payments_declined}")
    click.echo(f"Domain errors:     {report.domain_errors}")
    if report.unexpected_errors:
        raise click.ClickException(f"{report.unexpected_errors} actions crashed")
