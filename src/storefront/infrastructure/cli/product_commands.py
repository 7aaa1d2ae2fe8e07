"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import Container


def _print_table(products: list[ProductDTO]) -> None:
    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<16} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 66)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<24} {p.category:<16} {p.price:>10} {p.stock:>6}")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--category", default="", help="Category label.")
@click.option("--stock", default=0, show_default=True, type=int, help="Units in stock.")
@click.pass_obj
def product_add(container: Container, name: str, price: str, category: str, stock: int) -> None:
    """Add a new product to the catalog."""
    try:
        product = container.product_store.save(
            Product.create(name=name, price=Money.of(price), category=category, stock=stock)
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price} ({product.stock} in stock)")


@click.command("list")
@click.option("--category", default=None, help="Only products in this category.")
@click.option("--search", default=None, help="Only products whose name contains this text.")
@click.pass_obj
def product_list(container: Container, category: str | None, search: str | None) -> None:
    """List products in the catalog."""
    products = container.product_store.list_products(category=category, name_contains=search)

    if not products:
        click.echo("No products found.")
        return

    _print_table([product_to_dto(p) for p in products])


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(container: Container, product_id: str) -> None:
    """Show a single product."""
    try:
        product = container.product_store.get_by_id(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_table([product_to_dto(product)])


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New absolute stock level.")
@click.pass_obj
def product_stock(container: Container, product_id: str, quantity: int) -> None:
    """Set a product's stock level."""
    try:
        container.product_store.update_stock(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product #{product_id} set to {quantity}")


@click.command("price")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price (e.g. 18.50).")
@click.pass_obj
def product_price(container: Container, product_id: str, price: str) -> None:
    """Change a product's price. Existing orders keep the price they were placed at."""
    try:
        product = container.product_store.update_price(product_id, Money.of(price))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Price for product #{product.id} set to {product.price}")
