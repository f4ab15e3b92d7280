"""Thread-safe store of the last published price per display currency."""

from __future__ import annotations

from threading import Lock

from .models import AggregatedPrice


class PriceCache:
    """Thread-safe in-memory cache of the latest AggregatedPrice per currency.

    When handed to the Aggregator, the cached price becomes the previous price
    of the next cycle in the same currency, so change / change_percent are true
    cycle-to-cycle deltas instead of synthetic ones.
    """

    def __init__(self) -> None:
        self._prices: dict[str, AggregatedPrice] = {}
        self._lock = Lock()

    def record(self, update: AggregatedPrice) -> None:
        """Store a published price, replacing any earlier one for its currency."""
        with self._lock:
            self._prices[update.currency] = update

    def get(self, currency: str) -> AggregatedPrice | None:
        """Latest price for a currency, or None if none was published yet."""
        with self._lock:
            return self._prices.get(currency)

    def get_price(self, currency: str) -> float | None:
        update = self.get(currency)
        return update.price if update else None
