"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module receives its collaborators through its constructor.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path

from storefront.domain.service.order_ledger import OrderLedger
from storefront.domain.service.payment_simulator import (
    DEFAULT_DECLINE_PROBABILITY,
    PaymentSimulator,
)
from storefront.domain.service.product_store import ProductStore
from storefront.domain.service.revenue_aggregator import RevenueAggregator
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    decline_probability: float = DEFAULT_DECLINE_PROBABILITY
    seed: int | None = None


@dataclass(frozen=True)
class Container:
    """One shared instance of each service for the process lifetime."""

    product_store: ProductStore
    order_ledger: OrderLedger
    revenue: RevenueAggregator


def build_container(settings: Settings) -> Container:
    product_repo = JsonProductRepository(settings.data_dir / "products.json")
    order_repo = JsonOrderRepository(settings.data_dir / "orders.json")

    rng = random.Random(settings.seed) if settings.seed is not None else None
    payment = PaymentSimulator(settings.decline_probability, rng=rng)

    product_store = ProductStore(product_repo)
    return Container(
        product_store=product_store,
        order_ledger=OrderLedger(order_repo, product_store, payment),
        revenue=RevenueAggregator(order_repo),
    )
