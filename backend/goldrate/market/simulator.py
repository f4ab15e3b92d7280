"""Simulated gold quote and currency rate providers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

import numpy as np

from .errors import RateTableUnavailable, SourceUnavailable
from .interface import QuoteProvider, RateProvider
from .models import Quote, RateTable
from .seed_prices import BASE_CURRENCY, CURRENCY_RATES, SOURCE_PARAMS

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _check_failure_rate(failure_rate: float) -> float:
    if not 0.0 <= failure_rate <= 1.0:
        raise ValueError(f"failure_rate must be in [0, 1], got {failure_rate}")
    return failure_rate


class SimulatedQuoteProvider(QuoteProvider):
    """QuoteProvider that draws prices around a fixed base value.

    Math:
        price = base + (U - 0.5) * spread,   U ~ Uniform[0, 1)

    so every quote lies within +/- spread/2 of base. The random generator and
    clock are injected so tests can fix both.
    """

    def __init__(
        self,
        name: str,
        base_price: float,
        spread: float,
        weight: float,
        rng: np.random.Generator | None = None,
        clock: Clock = time.time,
        failure_rate: float = 0.0,
        currency: str = BASE_CURRENCY,
    ) -> None:
        if spread < 0 or spread / 2 >= base_price:
            raise ValueError(f"{name}: spread must be >= 0 and keep prices positive")
        self.name = name
        self.weight = weight
        self.currency = currency
        self._base = base_price
        self._spread = spread
        self._rng = rng if rng is not None else np.random.default_rng()
        self._clock = clock
        self._failure_rate = _check_failure_rate(failure_rate)

    async def fetch_quote(self) -> Quote:
        if self._failure_rate and self._rng.random() < self._failure_rate:
            logger.debug("Simulated outage on %s", self.name)
            raise SourceUnavailable(self.name, "simulated outage")

        price = self._base + (float(self._rng.random()) - 0.5) * self._spread
        return Quote(
            source_name=self.name,
            price=price,
            weight=self.weight,
            currency=self.currency,
            observed_at=self._clock(),
        )

    def __repr__(self) -> str:
        return f"SimulatedQuoteProvider({self.name!r}, weight={self.weight})"


class SimulatedRateProvider(RateProvider):
    """RateProvider serving a fixed conversion table."""

    def __init__(
        self,
        rates: Mapping[str, float] | None = None,
        base: str = BASE_CURRENCY,
        rng: np.random.Generator | None = None,
        failure_rate: float = 0.0,
    ) -> None:
        super().__init__(base=base)
        self._rates = dict(CURRENCY_RATES if rates is None else rates)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._failure_rate = _check_failure_rate(failure_rate)

    async def _load_rates(self) -> RateTable:
        if self._failure_rate and self._rng.random() < self._failure_rate:
            raise RateTableUnavailable("simulated outage")
        return RateTable(base=self.base, rates=self._rates)


def create_default_providers(
    rng: np.random.Generator | None = None,
    clock: Clock = time.time,
    failure_rate: float = 0.0,
) -> list[SimulatedQuoteProvider]:
    """The four standard sources, in declaration (and weight) order.

    All providers share one generator so a single seed makes a whole cycle
    reproducible.
    """
    rng = rng if rng is not None else np.random.default_rng()
    return [
        SimulatedQuoteProvider(
            name=name,
            base_price=params["base"],
            spread=params["spread"],
            weight=params["weight"],
            rng=rng,
            clock=clock,
            failure_rate=failure_rate,
        )
        for name, params in SOURCE_PARAMS.items()
    ]
