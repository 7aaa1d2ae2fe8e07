"""Domain service: ProductStore.

Owns product records and their stock counts. Every stock write for a
given product goes through that product's lock, so updates to one
product's stock are linearized while different products proceed in
parallel. The lock is a thread lock from a fixed pool combined with the
repository's record lock, which stores shared between processes make
inter-process.

``stock_guard`` exposes the same lock to OrderLedger, which needs the
check-stock / persist-order / decrement-stock sequence to run as one
critical section.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

import structlog

from storefront.domain.exceptions import ProductNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository

events = structlog.get_logger("storefront.events")

LOCK_STRIPES = 64


class ProductStore:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        # Products share a fixed pool of locks; ids seen never grow it.
        self._locks = [threading.RLock() for _ in range(LOCK_STRIPES)]

    # --- Queries --------------------------------------------------------------

    def get_by_id(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            events.warning("product_not_found", product_id=product_id, outcome="not_found")
            raise ProductNotFoundError(product_id)
        events.info(
            "product_viewed",
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            outcome="found",
        )
        return product

    def list_products(
        self,
        category: str | None = None,
        name_contains: str | None = None,
    ) -> list[Product]:
        """List products, optionally filtered.

        Both filters are case-insensitive: ``category`` must match exactly,
        ``name_contains`` is a substring of the name. Insertion order is kept.
        """
        products = self._product_repo.list_all()
        if category is not None:
            products = [p for p in products if p.in_category(category)]
        if name_contains is not None:
            products = [p for p in products if p.name_contains(name_contains)]

        events.info(
            "products_listed",
            category=category,
            query=name_contains,
            count=len(products),
            outcome="ok",
        )
        return products

    def list_by_category(self, category: str) -> list[Product]:
        return self.list_products(category=category)

    def search_by_name(self, fragment: str) -> list[Product]:
        return self.list_products(name_contains=fragment)

    # --- Commands -------------------------------------------------------------

    def save(self, product: Product) -> Product:
        """Persist *product*; the repository assigns an ID when it has none.

        Names are not required to be unique.
        """
        if not product.name or not product.name.strip():
            raise ValidationError("Product name is required")
        if product.stock < 0:
            raise ValidationError(f"Stock cannot be negative, got {product.stock}")

        if product.id is None:
            self._product_repo.save(product)
        else:
            with self._locked(product.id):
                self._product_repo.save(product)

        events.info(
            "product_saved",
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            price=str(product.price.amount),
            stock=product.stock,
            outcome="ok",
        )
        return product

    def update_stock(self, product_id: str, new_stock: int) -> Product:
        """Overwrite the stock of *product_id* with *new_stock*.

        An absolute value, not a delta. Raises ValidationError when
        ``new_stock`` is negative and ProductNotFoundError when the product
        does not exist; in both cases nothing is written.
        """
        if isinstance(new_stock, bool) or not isinstance(new_stock, int) or new_stock < 0:
            raise ValidationError(f"New stock must be a non-negative integer, got {new_stock!r}")

        with self._locked(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                events.error(
                    "stock_updated",
                    product_id=product_id,
                    new_stock=new_stock,
                    outcome="not_found",
                )
                raise ProductNotFoundError(product_id)

            old_stock = product.set_stock(new_stock)
            try:
                self._product_repo.save(product)
            except Exception:
                # Repositories may hand out shared instances.
                product.stock = old_stock
                raise

        events.info(
            "stock_updated",
            product_id=product_id,
            old_stock=old_stock,
            new_stock=new_stock,
            outcome="ok",
        )
        return product

    def update_price(self, product_id: str, new_price: Money) -> Product:
        """Change the price of *product_id*. Existing orders keep theirs."""
        with self._locked(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                events.error("price_updated", product_id=product_id, outcome="not_found")
                raise ProductNotFoundError(product_id)

            old_price = product.update_price(new_price)
            try:
                self._product_repo.save(product)
            except Exception:
                product.price = old_price
                raise

        events.info(
            "price_updated",
            product_id=product_id,
            old_price=str(old_price.amount),
            new_price=str(new_price.amount),
            outcome="ok",
        )
        return product

    @contextmanager
    def stock_guard(self, product_id: str) -> Iterator[Product]:
        """Hold *product_id*'s lock and yield a freshly loaded product.

        ``update_stock`` may be called from inside the block; the lock is
        re-entrant.
        """
        with self._locked(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            yield product

    # --- Internal helpers -----------------------------------------------------

    @contextmanager
    def _locked(self, product_id: str) -> Iterator[None]:
        lock = self._locks[hash(product_id) % len(self._locks)]
        with lock, self._product_repo.record_lock(product_id):
            yield
