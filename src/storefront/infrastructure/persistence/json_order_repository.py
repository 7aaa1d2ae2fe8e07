"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from filelock import FileLock

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        return max((o["id"] for o in self._file.load()), default=0) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def save(self, order: Order) -> None:
        with self._file.locked():
            if order.id is None:
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            orders = self._file.load()
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

            self._file.write(orders)

    def delete(self, order_id: int) -> None:
        with self._file.locked():
            orders = [raw for raw in self._file.load() if raw["id"] != order_id]
            self._file.write(orders)

    def record_lock(self, order_id: int) -> FileLock:
        return self._file.record_lock(order_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "customer_email": order.customer_email,
            "customer_name": order.customer_name,
            "product_id": order.product_id,
            "product_name": order.product_name,
            "quantity": order.quantity.value,
            "unit_price": str(order.unit_price.amount),
            "total_amount": str(order.total_amount.amount),
            "currency": order.unit_price.currency,
            "status": order.status.value,
            "payment_method": order.payment_method,
            "created_at": order.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")
        return Order(
            id=raw["id"],
            customer_email=raw["customer_email"],
            customer_name=raw["customer_name"],
            product_id=raw["product_id"],
            product_name=raw.get("product_name", ""),
            quantity=Quantity(raw["quantity"]),
            unit_price=Money(Decimal(raw["unit_price"]), currency),
            total_amount=Money(Decimal(raw["total_amount"]), currency),
            status=OrderStatus(raw["status"]),
            payment_method=raw.get("payment_method"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
