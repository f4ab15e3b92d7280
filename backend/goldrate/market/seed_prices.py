"""Seed prices and per-source parameters for the gold price simulator."""

BASE_CURRENCY = "USD"

# Per-source simulation parameters (USD per troy ounce)
# base:   centre of the simulated price distribution
# spread: full width of the uniform jitter around base
# weight: share of the source in the weighted average (weights sum to 1.0)
SOURCE_PARAMS: dict[str, dict[str, float]] = {
    "LBMA": {"base": 2650.0, "spread": 50.0, "weight": 0.40},  # Benchmark fix
    "COMEX": {"base": 2655.0, "spread": 40.0, "weight": 0.25},  # Futures
    "Forex (XAU/USD)": {"base": 2648.0, "spread": 45.0, "weight": 0.20},
    "Bullion Dealers": {"base": 2652.0, "spread": 35.0, "weight": 0.15},  # Kitco, APMEX, ...
}

# Conversion factors relative to BASE_CURRENCY
CURRENCY_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.0,
    "CAD": 1.25,
    "AUD": 1.35,
    "CHF": 0.92,
    "CNY": 6.45,
}

# Synthetic previous price lies within +/- this fraction of the current price
CHANGE_JITTER = 0.01
