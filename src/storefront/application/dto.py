"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry display-ready data from the domain to the CLI without
exposing domain objects to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


@dataclass(frozen=True)
class ProductDTO:

    id: str
    name: str
    category: str
    price: str  # formatted, e.g. "$15.00"
    stock: int


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_email: str
    customer_name: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    total: str
    status: str
    payment_method: str | None
    created_at: str


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        category=product.category,
        price=str(product.price),
        stock=product.stock,
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_email=order.customer_email,
        customer_name=order.customer_name,
        product_id=order.product_id,
        product_name=order.product_name,
        quantity=order.quantity.value,
        unit_price=str(order.unit_price),
        total=str(order.total_amount),
        status=order.status.value,
        payment_method=order.payment_method,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
