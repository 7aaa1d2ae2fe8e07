"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, nullcontext

from storefront.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, in insertion order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order, assigning an ID if absent."""

    @abstractmethod
    def delete(self, order_id: int) -> None:
        """Remove an order. Only used to undo a half-finished creation."""

    def record_lock(self, order_id: int) -> AbstractContextManager:
        """Lock held around a read-modify-write of one order.

        Only stores shared between processes need more than a no-op.
        """
        return nullcontext()

    def list_by_customer(self, customer_email: str) -> list[Order]:
        email = customer_email.strip().lower()
        return [o for o in self.list_all() if o.customer_email.lower() == email]

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        return [o for o in self.list_all() if o.status == status]
