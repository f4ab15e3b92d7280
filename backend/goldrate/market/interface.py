"""Abstract interfaces for quote and currency rate providers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .models import Quote, RateTable
from .seed_prices import BASE_CURRENCY

logger = logging.getLogger(__name__)


class QuoteProvider(ABC):
    """Contract for a single market-data source.

    Each call is independent and produces a fresh Quote. The simulated
    providers compute prices locally; a real HTTP or WebSocket client can
    implement the same contract without changes to the Aggregator or Stream.

    Usage:
        quote = await provider.fetch_quote()
    """

    name: str
    weight: float

    @abstractmethod
    async def fetch_quote(self) -> Quote:
        """Produce one quote.

        Raises SourceUnavailable when the source cannot be reached. Must not
        touch state shared with other providers.
        """


class RateProvider(ABC):
    """Contract for currency conversion data.

    Subclasses implement ``_load_rates()``. The public ``fetch_rates()`` never
    fails: any error from the hook degrades to a table holding only the base
    currency, so the Aggregator can always finish its conversion step.
    """

    def __init__(self, base: str = BASE_CURRENCY) -> None:
        self.base = base

    async def fetch_rates(self) -> RateTable:
        try:
            return await self._load_rates()
        except Exception as e:
            logger.warning("Currency rates unavailable, falling back to %s only: %s", self.base, e)
            return RateTable.degraded(self.base)

    @abstractmethod
    async def _load_rates(self) -> RateTable:
        """Load the current conversion table. May raise RateTableUnavailable."""
