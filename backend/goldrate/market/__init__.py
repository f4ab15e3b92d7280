"""Gold price aggregation subsystem.

Public API:
    Quote, RateTable, AggregatedPrice - Immutable data records
    QuoteProvider, RateProvider       - Abstract interfaces for data providers
    Aggregator                        - Concurrent fan-out and weighted average
    GoldPriceStream                   - Subscriber-driven periodic price stream
    PriceCache                        - Last published price per currency
    create_aggregator / create_price_stream - Environment-driven factories
    create_stream_router              - FastAPI router factory for the HTTP/SSE endpoints
"""

from .aggregator import Aggregator, weighted_average
from .cache import PriceCache
from .errors import NoSourcesAvailable, PriceFeedError, RateTableUnavailable, SourceUnavailable
from .factory import create_aggregator, create_price_stream
from .interface import QuoteProvider, RateProvider
from .models import AggregatedPrice, Quote, RateTable
from .price_stream import GoldPriceStream, StreamState
from .stream import create_stream_router

__all__ = [
    "Quote",
    "RateTable",
    "AggregatedPrice",
    "QuoteProvider",
    "RateProvider",
    "Aggregator",
    "weighted_average",
    "GoldPriceStream",
    "StreamState",
    "PriceCache",
    "PriceFeedError",
    "SourceUnavailable",
    "RateTableUnavailable",
    "NoSourcesAvailable",
    "create_aggregator",
    "create_price_stream",
    "create_stream_router",
]
