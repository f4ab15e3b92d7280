"""Exception hierarchy for the gold price feed.

Only ``NoSourcesAvailable`` ever escapes the Aggregator. The other two are
recovered where they are raised: a failed source is dropped from the weighted
average, a failed rate table degrades to the base currency.
"""

from __future__ import annotations


class PriceFeedError(Exception):
    """Base exception for price feed errors."""

    pass


class SourceUnavailable(PriceFeedError):
    """Raised when a single quote provider cannot produce a quote.

    :ivar source: Name of the provider that failed.
    """

    def __init__(self, source: str, reason: str = "unavailable") -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class RateTableUnavailable(PriceFeedError):
    """Raised inside a rate provider when the conversion table cannot be loaded."""

    pass


class NoSourcesAvailable(PriceFeedError):
    """Raised when every quote provider failed in one aggregation cycle."""

    def __init__(self, failed: list[str] | None = None) -> None:
        self.failed = list(failed or [])
        detail = f" (failed: {', '.join(self.failed)})" if self.failed else ""
        super().__init__(f"No gold price sources available{detail}")
