"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

import threading

from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.payment_simulator import PaymentGateway


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def next_id(self) -> int:
        return self._next_id

    def get_by_id(self, order_id: int) -> Order | None:
        return self._store.get(order_id)

    def list_all(self) -> list[Order]:
        return list(self._store.values())

    def save(self, order: Order) -> None:
        with self._lock:
            if order.id is None:
                order.id = self._next_id
                self._next_id += 1
            self._store[order.id] = order

    def delete(self, order_id: int) -> None:
        with self._lock:
            self._store.pop(order_id, None)


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        self._lock = threading.Lock()
        for p in products or []:
            self.save(p)

    def next_id(self) -> str:
        return str(len(self._store) + 1)

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        with self._lock:
            if product.id is None:
                product.id = self.next_id()
            self._store[product.id] = product


class BrokenProductRepository(FakeProductRepository):
    """Accepts products at setup, then fails every later write."""

    def __init__(self, products: list[Product] | None = None) -> None:
        super().__init__(products)
        self.fail_writes = True

    def save(self, product: Product) -> None:
        if getattr(self, "fail_writes", False):
            raise OSError("disk full")
        super().save(product)


class UndeletableOrderRepository(FakeOrderRepository):

    def delete(self, order_id: int) -> None:
        raise OSError("order store unavailable")


class FixedPaymentGateway(PaymentGateway):
    """Always accepts, or always declines. Records what it was asked."""

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.authorized: list[int] = []

    def authorize(self, order: Order) -> bool:
        self.authorized.append(order.id)  # type: ignore[arg-type]
        return self.accept
