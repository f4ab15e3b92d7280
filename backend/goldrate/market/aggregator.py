"""Aggregator: weighted average of concurrently fetched quotes.

Algorithm:
    1. Fan out to every quote provider and the rate provider concurrently
       and wait for all of them to settle
    2. Keep the quotes that succeeded, in provider declaration order
    3. Fail with NoSourcesAvailable if none succeeded
    4. Weighted average over the surviving quotes only, so the weights of
       failed sources drop out of numerator and denominator alike
    5. Convert with the rate table (unknown currency -> factor 1.0)
    6. Derive the previous price (synthetic, or from a PriceCache)

.. code-block:: python

    >>> aggregator = Aggregator(create_default_providers(), SimulatedRateProvider())
    >>> result = await aggregator.aggregate("EUR")
    >>> result.currency
    'EUR'
    >>> [q.source_name for q in result.sources]
    ['LBMA', 'COMEX', 'Forex (XAU/USD)', 'Bullion Dealers']
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence

import numpy as np

from .cache import PriceCache
from .currencies import normalize_code
from .errors import NoSourcesAvailable, SourceUnavailable
from .interface import QuoteProvider, RateProvider
from .models import AggregatedPrice, Quote, RateTable
from .seed_prices import BASE_CURRENCY, CHANGE_JITTER

logger = logging.getLogger(__name__)


def weighted_average(quotes: Sequence[Quote]) -> float:
    """Sum(price * weight) / Sum(weight) over the given quotes.

    :raises NoSourcesAvailable: If ``quotes`` is empty.
    """
    if not quotes:
        raise NoSourcesAvailable()
    prices = [q.price for q in quotes]
    weights = [q.weight for q in quotes]
    return float(np.average(prices, weights=weights))


class Aggregator:
    """Combines quotes from several providers into one AggregatedPrice.

    :ivar providers: Quote providers, in declaration order.
    :ivar rate_provider: Source of the currency conversion table.
    :ivar provider_timeout: Upper bound in seconds on each provider call, or
        None to wait indefinitely.
    """

    DEFAULT_PROVIDER_TIMEOUT = 2.0

    def __init__(
        self,
        providers: Sequence[QuoteProvider],
        rate_provider: RateProvider,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.time,
        provider_timeout: float | None = DEFAULT_PROVIDER_TIMEOUT,
        previous_prices: PriceCache | None = None,
    ) -> None:
        """Initialize the aggregator.

        :param providers: Quote providers to fan out to on every cycle.
        :param rate_provider: Currency rate provider.
        :param rng: Random generator for the synthetic previous price.
        :param clock: Returns the current Unix time; stamps ``last_updated``.
        :param provider_timeout: Per-call bound; a timeout counts as an
            unavailable source.
        :param previous_prices: Optional store of published prices. When set,
            change metrics compare against the last published price in the
            same currency instead of a synthetic one.
        :raises ValueError: If parameters are invalid.
        """
        if not providers:
            raise ValueError("Aggregator needs at least one quote provider")
        if provider_timeout is not None and provider_timeout <= 0:
            raise ValueError("provider_timeout must be positive if specified")

        self._providers = tuple(providers)
        self.rate_provider = rate_provider
        self.provider_timeout = provider_timeout
        self._rng = rng if rng is not None else np.random.default_rng()
        self._clock = clock
        self._previous_prices = previous_prices

    @property
    def providers(self) -> tuple[QuoteProvider, ...]:
        return self._providers

    async def aggregate(self, currency: str = BASE_CURRENCY) -> AggregatedPrice:
        """Run one cycle and return the aggregated price in ``currency``.

        :param currency: Display currency code. Unknown codes are accepted and
            leave the base price unconverted.
        :raises NoSourcesAvailable: If every quote provider failed.
        """
        currency = normalize_code(currency)

        *quote_results, rate_result = await asyncio.gather(
            *(self._fetch_quote(p) for p in self._providers),
            self._fetch_rates(),
            return_exceptions=True,
        )

        sources: list[Quote] = []
        failed: list[str] = []
        for provider, result in zip(self._providers, quote_results):
            if isinstance(result, BaseException):
                failed.append(provider.name)
                logger.warning("Source %s unavailable: %s", provider.name, result)
            else:
                sources.append(result)

        if not sources:
            raise NoSourcesAvailable(failed)

        base_price = weighted_average(sources)

        if isinstance(rate_result, RateTable):
            rates = rate_result
        else:
            # fetch_rates() degrades on its own; this only covers a broken provider
            logger.warning("Rate provider raised, using %s only: %s", self.rate_provider.base, rate_result)
            rates = RateTable.degraded(self.rate_provider.base)

        price = base_price * rates.factor(currency)

        result = AggregatedPrice(
            price=price,
            previous_price=self._previous_price(currency, price),
            currency=currency,
            sources=tuple(sources),
            last_updated=self._clock(),
        )
        if self._previous_prices is not None:
            self._previous_prices.record(result)

        logger.debug(
            "Aggregated %s %.2f from %d/%d sources",
            currency,
            price,
            len(sources),
            len(self._providers),
        )
        return result

    # --- Internals ---

    async def _fetch_quote(self, provider: QuoteProvider) -> Quote:
        try:
            return await asyncio.wait_for(provider.fetch_quote(), self.provider_timeout)
        except asyncio.TimeoutError:
            raise SourceUnavailable(
                provider.name, f"timed out after {self.provider_timeout}s"
            ) from None

    async def _fetch_rates(self) -> RateTable:
        try:
            return await asyncio.wait_for(self.rate_provider.fetch_rates(), self.provider_timeout)
        except asyncio.TimeoutError:
            logger.warning("Currency rates timed out, falling back to %s only", self.rate_provider.base)
            return RateTable.degraded(self.rate_provider.base)

    def _previous_price(self, currency: str, price: float) -> float:
        """Price the change metrics are measured against.

        With a PriceCache: the last published price in this currency (flat on
        the first cycle). Without one: a random price within CHANGE_JITTER of
        the current price.
        """
        if self._previous_prices is not None:
            previous = self._previous_prices.get_price(currency)
            return previous if previous is not None else price
        return price * (1 + (float(self._rng.random()) - 0.5) * 2 * CHANGE_JITTER)
