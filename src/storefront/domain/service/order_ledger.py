"""Domain service: OrderLedger.

Owns orders and their lifecycle. Creating an order reserves stock on the
product; the stock check, the order write and the stock decrement run
under the product's lock as one unit, so two concurrent orders can never
oversell a product.

A declined payment leaves the order PENDING and keeps its stock
reservation. Nothing here releases stock automatically.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

import structlog

from storefront.domain.exceptions import (
    DomainException,
    InconsistentStateError,
    InsufficientStockError,
    OrderNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.payment_simulator import PaymentGateway
from storefront.domain.service.product_store import ProductStore

events = structlog.get_logger("storefront.events")

LOCK_STRIPES = 64


class OrderLedger:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_store: ProductStore,
        payment_gateway: PaymentGateway,
    ) -> None:
        self._order_repo = order_repo
        self._product_store = product_store
        self._payment_gateway = payment_gateway
        self._order_locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    # --- Commands -------------------------------------------------------------

    def create_order(
        self,
        customer_email: str,
        customer_name: str,
        product_id: str,
        quantity: int,
    ) -> Order:
        """Create a PENDING order and reserve its stock.

        On success exactly one order is persisted and the product's stock is
        decremented exactly once. On failure neither happens.

        Raises:
            ValidationError: bad customer fields or non-positive quantity.
            ProductNotFoundError: unknown product.
            InsufficientStockError: quantity exceeds the remaining stock.
            InconsistentStateError: the stock write failed and the order
                could not be removed again.
        """
        try:
            qty = Quantity(quantity)
            with self._product_store.stock_guard(product_id) as product:
                if product.stock < qty.value:
                    raise InsufficientStockError(product_id, qty.value, product.stock)

                order = Order.create(customer_email, customer_name, product, qty)
                self._order_repo.save(order)
                self._reserve_stock(order, product.stock - qty.value)
        except DomainException as exc:
            events.warning(
                "order_creation_failed",
                customer_email=customer_email,
                product_id=product_id,
                quantity=quantity,
                reason=_failure_reason(exc),
                error=str(exc),
                outcome="failed",
            )
            raise

        events.info(
            "order_created",
            order_id=order.id,
            customer_email=order.customer_email,
            product_id=order.product_id,
            quantity=order.quantity.value,
            total_amount=str(order.total_amount.amount),
            outcome="ok",
        )
        return order

    def update_order_status(self, order_id: int, new_status: OrderStatus | str) -> Order:
        """Overwrite an order's status.

        Permissive: any status may replace any other. Changing status does
        not touch stock.
        """
        status = OrderStatus.parse(new_status)

        with self._locked(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                events.error("order_status_updated", order_id=order_id, outcome="not_found")
                raise OrderNotFoundError(order_id)

            old_status = order.change_status(status)
            self._order_repo.save(order)

        events.info(
            "order_status_updated",
            order_id=order_id,
            customer_email=order.customer_email,
            old_status=old_status.value,
            new_status=status.value,
            outcome="ok",
        )
        return order

    def process_payment(self, order_id: int, payment_method: str) -> bool:
        """Attempt payment for an order.

        Returns True when the gateway accepts; the order becomes CONFIRMED
        and records ``payment_method``. Returns False, changing nothing,
        when the order does not exist or the payment is declined.

        A blank ``payment_method`` raises ValidationError before the
        gateway is asked, whatever it would have answered.
        """
        if not payment_method or not payment_method.strip():
            events.error(
                "payment_rejected",
                order_id=order_id,
                payment_method=payment_method,
                reason="validation_error",
                outcome="failed",
            )
            raise ValidationError("Payment method is required")

        with self._locked(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                events.error(
                    "payment_rejected",
                    order_id=order_id,
                    payment_method=payment_method,
                    reason="order_not_found",
                    outcome="failed",
                )
                return False

            if not self._payment_gateway.authorize(order):
                events.warning(
                    "payment_declined",
                    order_id=order_id,
                    payment_method=payment_method,
                    amount=str(order.total_amount.amount),
                    reason="payment_declined",
                    outcome="declined",
                )
                return False

            order.confirm_payment(payment_method)
            self._order_repo.save(order)

        events.info(
            "payment_processed",
            order_id=order_id,
            payment_method=order.payment_method,
            amount=str(order.total_amount.amount),
            customer_email=order.customer_email,
            outcome="accepted",
        )
        return True

    # --- Queries --------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def get_orders_by_customer(self, customer_email: str) -> list[Order]:
        orders = self._order_repo.list_by_customer(customer_email)
        events.info(
            "customer_orders_fetched",
            customer_email=customer_email,
            orders_count=len(orders),
            outcome="ok",
        )
        return orders

    def get_all_orders(self) -> list[Order]:
        orders = self._order_repo.list_all()
        events.info("all_orders_fetched", total_orders=len(orders), outcome="ok")
        return orders

    # --- Internal helpers -----------------------------------------------------

    def _reserve_stock(self, order: Order, new_stock: int) -> None:
        """Decrement stock for a just-saved order, undoing the save on failure.

        Must be called while holding the product's stock guard.
        """
        try:
            self._product_store.update_stock(order.product_id, new_stock)
        except Exception as exc:
            try:
                self._order_repo.delete(order.id)  # type: ignore[arg-type]
            except Exception as rollback_exc:
                events.critical(
                    "order_creation_failed",
                    order_id=order.id,
                    product_id=order.product_id,
                    reason="inconsistent_state",
                    error=str(rollback_exc),
                    outcome="inconsistent",
                )
                raise InconsistentStateError(
                    f"Order #{order.id} was saved but stock for product "
                    f"'{order.product_id}' was not decremented and the order "
                    f"could not be removed; manual reconciliation required"
                ) from exc
            raise

    @contextmanager
    def _locked(self, order_id: int) -> Iterator[None]:
        lock = self._order_locks[hash(order_id) % len(self._order_locks)]
        with lock, self._order_repo.record_lock(order_id):
            yield


def _failure_reason(exc: DomainException) -> str:
    if isinstance(exc, ProductNotFoundError):
        return "product_not_found"
    if isinstance(exc, InsufficientStockError):
        return "insufficient_stock"
    if isinstance(exc, InconsistentStateError):
        return "inconsistent_state"
    if isinstance(exc, ValidationError):
        return "validation_error"
    return "domain_error"
