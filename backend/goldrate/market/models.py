"""Data models for the gold price feed."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class Quote:
    """Immutable price observation from a single source."""

    source_name: str
    price: float
    weight: float
    currency: str = "USD"
    observed_at: float = field(default_factory=time.time)  # Unix seconds

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"Quote price must be positive, got {self.price}")
        if not 0 < self.weight <= 1:
            raise ValueError(f"Quote weight must be in (0, 1], got {self.weight}")

    def to_dict(self) -> dict:
        return {
            "name": self.source_name,
            "price": self.price,
            "currency": self.currency,
            "timestamp": self.observed_at,
            "weight": self.weight,
        }


@dataclass(frozen=True, slots=True)
class RateTable:
    """Snapshot of conversion factors relative to a base currency.

    The base currency always maps to 1.0. Codes missing from the table resolve
    to 1.0 as well, so a conversion never fails.
    """

    base: str
    rates: Mapping[str, float]

    def __post_init__(self) -> None:
        rates = dict(self.rates)
        rates[self.base] = 1.0
        # Read-only view so the snapshot can be shared between coroutines
        object.__setattr__(self, "rates", MappingProxyType(rates))

    @classmethod
    def degraded(cls, base: str = "USD") -> RateTable:
        """Minimal table holding only the base currency."""
        return cls(base=base, rates={base: 1.0})

    def factor(self, code: str) -> float:
        """Conversion factor for a currency code, or 1.0 if unknown."""
        return self.rates.get(code, 1.0)

    def __contains__(self, code: object) -> bool:
        return code in self.rates

    def to_dict(self) -> dict[str, float]:
        return dict(self.rates)


@dataclass(frozen=True, slots=True)
class AggregatedPrice:
    """One aggregation cycle's result, as handed to every subscriber."""

    price: float
    previous_price: float
    currency: str
    sources: tuple[Quote, ...]
    last_updated: float = field(default_factory=time.time)  # Unix seconds

    def __post_init__(self) -> None:
        if not self.sources:
            raise ValueError("AggregatedPrice requires at least one source")
        # Accept any sequence but store a tuple so the record stays immutable
        object.__setattr__(self, "sources", tuple(self.sources))

    @property
    def change(self) -> float:
        """Absolute change from the previous price."""
        return round(self.price - self.previous_price, 4)

    @property
    def change_percent(self) -> float:
        """Percentage change from the previous price."""
        if self.previous_price == 0:
            return 0.0
        return round((self.price - self.previous_price) / self.previous_price * 100, 4)

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat'."""
        if self.price > self.previous_price:
            return "up"
        elif self.price < self.previous_price:
            return "down"
        return "flat"

    @property
    def source_names(self) -> list[str]:
        return [q.source_name for q in self.sources]

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "price": self.price,
            "previous_price": self.previous_price,
            "change": self.change,
            "change_percent": self.change_percent,
            "direction": self.direction,
            "currency": self.currency,
            "sources": [q.to_dict() for q in self.sources],
            "last_updated": self.last_updated,
        }
