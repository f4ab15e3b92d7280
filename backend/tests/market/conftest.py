"""Fixtures for gold price feed tests.

Static providers and a stub aggregator give deterministic prices and let
tests switch individual sources into failure.
"""

import asyncio

import pytest

from goldrate.market.errors import NoSourcesAvailable, RateTableUnavailable, SourceUnavailable
from goldrate.market.interface import QuoteProvider, RateProvider
from goldrate.market.models import AggregatedPrice, Quote, RateTable
from goldrate.market.seed_prices import CURRENCY_RATES

FIXED_TIME = 1_700_000_000.0

# Worked example: weighted base price 2651.15
EXAMPLE_QUOTES = [
    ("LBMA", 2650.0, 0.40),
    ("COMEX", 2655.0, 0.25),
    ("Forex (XAU/USD)", 2648.0, 0.20),
    ("Bullion Dealers", 2652.0, 0.15),
]


class StaticQuoteProvider(QuoteProvider):
    """Always returns the same price unless ``fail`` is set."""

    def __init__(self, name: str, price: float, weight: float, delay: float = 0.0) -> None:
        self.name = name
        self.price = price
        self.weight = weight
        self.delay = delay
        self.fail = False
        self.calls = 0

    async def fetch_quote(self) -> Quote:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise SourceUnavailable(self.name, "down for test")
        return Quote(source_name=self.name, price=self.price, weight=self.weight, observed_at=FIXED_TIME)


class StaticRateProvider(RateProvider):
    def __init__(self, rates: dict[str, float] | None = None) -> None:
        super().__init__(base="USD")
        self.rates = dict(CURRENCY_RATES if rates is None else rates)
        self.fail = False

    async def _load_rates(self) -> RateTable:
        if self.fail:
            raise RateTableUnavailable("down for test")
        return RateTable(base=self.base, rates=self.rates)


class StubAggregator:
    """Stands in for Aggregator in stream tests; records every call."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: list[str] = []
        self.completed = 0
        self.fail_next = 0

    async def aggregate(self, currency: str) -> AggregatedPrice:
        self.calls.append(currency)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_next:
            self.fail_next -= 1
            raise NoSourcesAvailable(["LBMA", "COMEX"])
        self.completed += 1
        return AggregatedPrice(
            price=2650.0 + len(self.calls),
            previous_price=2650.0,
            currency=currency,
            sources=(Quote(source_name="LBMA", price=2650.0, weight=0.4, observed_at=FIXED_TIME),),
            last_updated=FIXED_TIME,
        )


@pytest.fixture
def providers() -> list[StaticQuoteProvider]:
    """The four example sources with fixed prices."""
    return [StaticQuoteProvider(name, price, weight) for name, price, weight in EXAMPLE_QUOTES]


@pytest.fixture
def rate_provider() -> StaticRateProvider:
    return StaticRateProvider()


@pytest.fixture
def stub_aggregator() -> StubAggregator:
    return StubAggregator()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def slow_aggregator() -> StubAggregator:
    """Stub whose cycles take 200ms."""
    return StubAggregator(delay=0.2)
