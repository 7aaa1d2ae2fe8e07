"""Product aggregate.

Products own their stock count, the one piece of mutable state that
concurrent orders compete for. Stock changes go through ProductStore,
which serializes them per product.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Use ``Product.create()`` for new products. The plain constructor lets
    repositories rehydrate stored records without re-validating.

    Invariant: ``stock >= 0``.
    """

    id: str | None
    name: str
    price: Money
    category: str = ""
    stock: int = 0

    @staticmethod
    def create(name: str, price: Money, category: str = "", stock: int = 0) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_stock(stock)
        return Product(
            id=None,
            name=name.strip(),
            price=price,
            category=(category or "").strip(),
            stock=stock,
        )

    def set_stock(self, new_stock: int) -> int:
        """Overwrite the stock count and return the previous value.

        This is an absolute value, not a delta: callers compute
        ``stock - quantity`` themselves.
        """
        _check_stock(new_stock)
        old_stock = self.stock
        self.stock = new_stock
        return old_stock

    def update_price(self, new_price: Money) -> Money:
        """Change the product price and return the previous one.

        Existing orders are unaffected; they keep their price snapshot.
        """
        if not isinstance(new_price, Money):
            raise ValidationError(f"Price must be Money, got {type(new_price).__name__}")
        old_price = self.price
        self.price = new_price
        return old_price

    def in_category(self, category: str) -> bool:
        return self.category.lower() == category.strip().lower()

    def name_contains(self, fragment: str) -> bool:
        return fragment.strip().lower() in self.name.lower()


def _check_stock(stock: int) -> None:
    if isinstance(stock, bool) or not isinstance(stock, int):
        raise ValidationError(f"Stock must be an integer, got {type(stock).__name__}")
    if stock < 0:
        raise ValidationError(f"Stock cannot be negative, got {stock}")
