"""Domain service: revenue over confirmed orders (query)."""

from __future__ import annotations

import structlog

from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.order_repository import OrderRepository

events = structlog.get_logger("storefront.events")


class RevenueAggregator:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def calculate_total_revenue(self) -> Money:
        """Sum ``total_amount`` over CONFIRMED orders.

        Recomputed on every call; confirmations land at any time.
        """
        confirmed = self._order_repo.list_by_status(OrderStatus.CONFIRMED)
        total = Money.sum(order.total_amount for order in confirmed)

        events.info(
            "revenue_calculated",
            total_revenue=str(total.amount),
            confirmed_orders_count=len(confirmed),
            outcome="ok",
        )
        return total
