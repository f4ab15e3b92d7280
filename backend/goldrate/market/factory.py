"""Factory for wiring the gold price feed from environment variables."""

from __future__ import annotations

import logging
import os

import numpy as np

from .aggregator import Aggregator
from .cache import PriceCache
from .price_stream import GoldPriceStream
from .seed_prices import BASE_CURRENCY
from .simulator import SimulatedRateProvider, create_default_providers

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str) -> str | None:
    """Environment value, or None when unset or blank."""
    value = os.environ.get(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    value = _env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name: str) -> int | None:
    value = _env(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def default_currency() -> str:
    return (_env("GOLD_DEFAULT_CURRENCY") or BASE_CURRENCY).upper()


def stream_interval() -> float:
    return _env_float("GOLD_STREAM_INTERVAL", GoldPriceStream.DEFAULT_INTERVAL)


def log_level() -> str:
    """Root log level name from GOLD_LOG_LEVEL (default INFO)."""
    level = (_env("GOLD_LOG_LEVEL") or "INFO").upper()
    # getLevelName maps known names to their int value
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"GOLD_LOG_LEVEL must be a logging level name, got {level!r}")
    return level


def create_aggregator() -> Aggregator:
    """Create an Aggregator over the simulated sources.

    - GOLD_RANDOM_SEED set → reproducible simulation
    - GOLD_TRUE_DELTAS truthy → change metrics against the last published price
    - GOLD_SOURCE_FAILURE_RATE → simulated outage probability per source
    - GOLD_PROVIDER_TIMEOUT → per-provider call bound in seconds
    """
    seed = _env_int("GOLD_RANDOM_SEED")
    rng = np.random.default_rng(seed)
    failure_rate = _env_float("GOLD_SOURCE_FAILURE_RATE", 0.0)
    true_deltas = (_env("GOLD_TRUE_DELTAS") or "").lower() in _TRUTHY

    providers = create_default_providers(rng=rng, failure_rate=failure_rate)
    logger.info(
        "Gold price sources: %s (seed=%s, failure_rate=%.2f)",
        ", ".join(p.name for p in providers),
        seed,
        failure_rate,
    )
    if true_deltas:
        logger.info("Change metrics: previous published price")

    return Aggregator(
        providers=providers,
        rate_provider=SimulatedRateProvider(rng=rng, failure_rate=failure_rate),
        rng=rng,
        provider_timeout=_env_float("GOLD_PROVIDER_TIMEOUT", Aggregator.DEFAULT_PROVIDER_TIMEOUT),
        previous_prices=PriceCache() if true_deltas else None,
    )


def create_price_stream(
    currency: str | None = None,
    aggregator: Aggregator | None = None,
) -> GoldPriceStream:
    """Create an idle GoldPriceStream. Caller activates it with subscribe()."""
    return GoldPriceStream(
        aggregator=aggregator or create_aggregator(),
        currency=currency or default_currency(),
        interval=stream_interval(),
    )
