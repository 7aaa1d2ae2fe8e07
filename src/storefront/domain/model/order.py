"""Order aggregate.

An order references one product, snapshots its price, and stores the
total once at creation. Status moves PENDING -> CONFIRMED on an accepted
payment, or to CANCELLED when a caller says so.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

    @staticmethod
    def parse(value: OrderStatus | str) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        try:
            return OrderStatus(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(
                f"Unknown order status {value!r} (expected one of {allowed})"
            ) from None


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders. ``total_amount`` is
    computed there and stored; nothing recomputes it afterwards, so a later
    product price change never alters an existing order.
    """

    id: int | None
    customer_email: str
    customer_name: str
    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    payment_method: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        customer_email: str,
        customer_name: str,
        product: Product,
        quantity: Quantity,
    ) -> Order:
        """Create a new PENDING order for *quantity* units of *product*."""
        if not customer_email or not customer_email.strip():
            raise ValidationError("Customer email is required")
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if product.id is None:
            raise ValidationError("Cannot order a product that has not been saved")

        return Order(
            id=None,
            customer_email=customer_email.strip(),
            customer_name=customer_name.strip(),
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=product.price,
            total_amount=product.price * quantity.value,
        )

    # --- State transitions ----------------------------------------------------

    def confirm_payment(self, payment_method: str) -> None:
        """Record an accepted payment and move to CONFIRMED."""
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")
        self.payment_method = payment_method.strip()
        self.status = OrderStatus.CONFIRMED

    def change_status(self, new_status: OrderStatus) -> OrderStatus:
        """Overwrite the status and return the previous one.

        Permissive: no transition table is enforced here.
        """
        old_status = self.status
        self.status = new_status
        return old_status
