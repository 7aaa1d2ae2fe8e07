"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so callers (the CLI, the traffic harness) can catch them uniformly.
A declined payment is NOT an exception; it is a ``False`` result.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ProductNotFoundError(EntityNotFoundError):

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product with ID '{product_id}' not found")
        self.product_id = product_id


class OrderNotFoundError(EntityNotFoundError):

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order #{order_id} not found")
        self.order_id = order_id


class InsufficientStockError(DomainException):
    """Requested quantity exceeds the product's remaining stock."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(need {requested}, have {available} available)"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InconsistentStateError(DomainException):
    """An order and its stock reservation diverged.

    Fatal: the data needs manual reconciliation.
    """
