"""Domain service: payment decisions.

``PaymentGateway`` is the seam OrderLedger talks to. ``PaymentSimulator``
is the local stochastic implementation; a real gateway client would
implement the same interface without touching the ledger.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order

DEFAULT_DECLINE_PROBABILITY = 0.10


class PaymentGateway(ABC):

    @abstractmethod
    def authorize(self, order: Order) -> bool:
        """Return True if the payment for *order* is accepted."""


class PaymentSimulator(PaymentGateway):
    """Accepts payments at random, declining with ``decline_probability``.

    Pass a seeded ``random.Random`` for reproducible decisions. Holds no
    state besides the random source.
    """

    def __init__(
        self,
        decline_probability: float = DEFAULT_DECLINE_PROBABILITY,
        rng: random.Random | None = None,
    ) -> None:
        _check_probability(decline_probability, "Decline probability")
        self.decline_probability = decline_probability
        self._rng = rng or random.Random()

    def decide(self, success_probability: float | None = None) -> bool:
        if success_probability is None:
            success_probability = 1.0 - self.decline_probability
        _check_probability(success_probability, "Success probability")
        return self._rng.random() < success_probability

    def authorize(self, order: Order) -> bool:
        return self.decide()


def _check_probability(value: float, label: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{label} must be between 0 and 1, got {value}")
