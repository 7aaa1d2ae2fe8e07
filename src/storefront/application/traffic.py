"""Application service: simulated storefront traffic.

Fires independent "virtual user" actions at the public ProductStore /
OrderLedger operations from a thread pool. The harness keeps no state of
its own besides the report it hands back; all contention happens inside
the core, which is the point of running it.
"""

from __future__ import annotations

import random
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import structlog

from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Product
from storefront.domain.service.order_ledger import OrderLedger
from storefront.domain.service.product_store import ProductStore
from storefront.domain.service.revenue_aggregator import RevenueAggregator

logger = structlog.get_logger(__name__)
events = structlog.get_logger("storefront.events")

ACTIONS = (
    "browse_products",
    "search",
    "view_product",
    "browse_category",
    "create_order",
)
PAYMENT_METHODS = ("CREDIT_CARD", "PAYPAL", "BANK_TRANSFER", "APPLE_PAY", "GOOGLE_PAY")
PAYMENT_ATTEMPT_PROBABILITY = 0.7
MAX_ORDER_QUANTITY = 4


@dataclass
class TrafficReport:
    requests: int = 0
    actions: Counter = field(default_factory=Counter)
    orders_created: int = 0
    payments_accepted: int = 0
    payments_declined: int = 0
    domain_errors: int = 0
    unexpected_errors: int = 0


class TrafficDriver:

    def __init__(
        self,
        product_store: ProductStore,
        order_ledger: OrderLedger,
        revenue: RevenueAggregator,
        rng: random.Random | None = None,
        max_workers: int = 8,
    ) -> None:
        self._product_store = product_store
        self._order_ledger = order_ledger
        self._revenue = revenue
        self._rng = rng or random.Random()
        self._rng_lock = threading.Lock()
        self._max_workers = max_workers

    def run(self, request_count: int) -> TrafficReport:
        """Run *request_count* random actions concurrently and wait for them."""
        if request_count < 0:
            raise ValueError("request_count cannot be negative")

        report = TrafficReport(requests=request_count)

        # Draw every action up front so a seeded rng gives the same mix.
        plan = [self._choice(ACTIONS) for _ in range(request_count)]
        logger.info("traffic simulation starting", requests=request_count, workers=self._max_workers)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [pool.submit(self._perform, action, n) for n, action in enumerate(plan)]
            for action, future in zip(plan, futures):
                exc = future.exception()
                report.actions[action] += 1
                if exc is None:
                    self._tally(report, future.result())
                elif isinstance(exc, DomainException):
                    report.domain_errors += 1
                else:
                    report.unexpected_errors += 1
                    logger.error("traffic action crashed", action=action, error=str(exc))

        events.info(
            "traffic_simulation_finished",
            requests=report.requests,
            orders_created=report.orders_created,
            payments_accepted=report.payments_accepted,
            payments_declined=report.payments_declined,
            domain_errors=report.domain_errors,
            revenue=str(self._revenue.calculate_total_revenue().amount),
            outcome="ok",
        )
        return report

    # --- Actions --------------------------------------------------------------

    def _perform(self, action: str, user_number: int) -> str | None:
        """Run one action; returns an outcome tag for order actions."""
        if action == "browse_products":
            self._product_store.list_products()
        elif action == "search":
            product = self._pick_product()
            if product is not None:
                words = product.name.split()
                self._product_store.search_by_name(words[0] if words else product.name)
        elif action == "view_product":
            product = self._pick_product()
            if product is not None:
                self._product_store.get_by_id(product.id)  # type: ignore[arg-type]
        elif action == "browse_category":
            product = self._pick_product()
            if product is not None:
                self._product_store.list_by_category(product.category)
        elif action == "create_order":
            return self._place_order(user_number)
        return None

    def _place_order(self, user_number: int) -> str | None:
        product = self._pick_product()
        if product is None:
            return None

        order = self._order_ledger.create_order(
            customer_email=f"user{user_number}@example.com",
            customer_name=f"Customer {user_number}",
            product_id=product.id,  # type: ignore[arg-type]
            quantity=self._randint(1, MAX_ORDER_QUANTITY),
        )
        if self._random() >= PAYMENT_ATTEMPT_PROBABILITY:
            return "created"

        accepted = self._order_ledger.process_payment(order.id, self._choice(PAYMENT_METHODS))  # type: ignore[arg-type]
        return "paid" if accepted else "declined"

    @staticmethod
    def _tally(report: TrafficReport, outcome: str | None) -> None:
        if outcome is None:
            return
        report.orders_created += 1
        if outcome == "paid":
            report.payments_accepted += 1
        elif outcome == "declined":
            report.payments_declined += 1

    # --- Random helpers (shared rng, guarded by _rng_lock) --------------------

    def _pick_product(self) -> Product | None:
        products = self._product_store.list_products()
        if not products:
            return None
        return self._choice(products)

    def _choice(self, seq):
        with self._rng_lock:
            return self._rng.choice(seq)

    def _randint(self, low: int, high: int) -> int:
        with self._rng_lock:
            return self._rng.randint(low, high)

    def _random(self) -> float:
        with self._rng_lock:
            return self._rng.random()
