"""Tests for Quote, RateTable and AggregatedPrice."""

import pytest

from goldrate.market.models import AggregatedPrice, Quote, RateTable


def _quote(price: float = 2650.0, weight: float = 0.4) -> Quote:
    return Quote(source_name="LBMA", price=price, weight=weight, observed_at=1234567890.0)


class TestQuote:
    """Unit tests for the Quote model."""

    def test_quote_creation(self):
        """Test basic Quote creation."""
        quote = _quote()
        assert quote.source_name == "LBMA"
        assert quote.price == 2650.0
        assert quote.weight == 0.4
        assert quote.currency == "USD"
        assert quote.observed_at == 1234567890.0

    def test_non_positive_price_rejected(self):
        """Prices must be strictly positive."""
        with pytest.raises(ValueError, match="price must be positive"):
            _quote(price=0.0)
        with pytest.raises(ValueError, match="price must be positive"):
            _quote(price=-1.0)

    def test_weight_bounds(self):
        """Weights must lie in (0, 1]."""
        assert _quote(weight=1.0).weight == 1.0
        with pytest.raises(ValueError, match="weight"):
            _quote(weight=0.0)
        with pytest.raises(ValueError, match="weight"):
            _quote(weight=1.5)

    def test_immutability(self):
        """Test that Quote is immutable."""
        quote = _quote()
        with pytest.raises(AttributeError):
            quote.price = 1.0

    def test_to_dict(self):
        """Test serialization to dictionary."""
        assert _quote().to_dict() == {
            "name": "LBMA",
            "price": 2650.0,
            "currency": "USD",
            "timestamp": 1234567890.0,
            "weight": 0.4,
        }


class TestRateTable:
    """Unit tests for the RateTable snapshot."""

    def test_factor_known_code(self):
        table = RateTable(base="USD", rates={"USD": 1.0, "EUR": 0.85})
        assert table.factor("EUR") == 0.85

    def test_factor_unknown_code_is_one(self):
        """Unknown codes convert as a no-op."""
        table = RateTable(base="USD", rates={"EUR": 0.85})
        assert table.factor("XYZ") == 1.0

    def test_base_always_present(self):
        """The base currency maps to 1.0 even if the input omits or overrides it."""
        assert RateTable(base="USD", rates={"EUR": 0.85}).factor("USD") == 1.0
        assert RateTable(base="USD", rates={"USD": 2.0}).factor("USD") == 1.0

    def test_degraded_table(self):
        """The degraded table holds exactly the base currency."""
        assert RateTable.degraded("USD").to_dict() == {"USD": 1.0}

    def test_contains(self):
        table = RateTable(base="USD", rates={"EUR": 0.85})
        assert "EUR" in table
        assert "GBP" not in table

    def test_rates_are_read_only(self):
        """Test that the rates mapping cannot be mutated."""
        table = RateTable(base="USD", rates={"EUR": 0.85})
        with pytest.raises(TypeError):
            table.rates["EUR"] = 1.0

    def test_input_mapping_is_copied(self):
        """Later changes to the source dict do not leak into the snapshot."""
        rates = {"EUR": 0.85}
        table = RateTable(base="USD", rates=rates)
        rates["EUR"] = 0.5
        assert table.factor("EUR") == 0.85


class TestAggregatedPrice:
    """Unit tests for the AggregatedPrice model."""

    def _price(self, price: float, previous: float) -> AggregatedPrice:
        return AggregatedPrice(
            price=price,
            previous_price=previous,
            currency="USD",
            sources=[_quote()],
            last_updated=1234567890.0,
        )

    def test_empty_sources_rejected(self):
        """An aggregated price without sources cannot exist."""
        with pytest.raises(ValueError, match="at least one source"):
            AggregatedPrice(price=1.0, previous_price=1.0, currency="USD", sources=())

    def test_sources_stored_as_tuple(self):
        assert isinstance(self._price(2650.0, 2650.0).sources, tuple)

    def test_change_calculation(self):
        assert self._price(2660.0, 2650.0).change == 10.0

    def test_change_negative(self):
        assert self._price(2640.0, 2650.0).change == -10.0

    def test_change_percent(self):
        """Test percentage change calculation."""
        assert self._price(2000.0, 1000.0).change_percent == 100.0
        assert self._price(500.0, 1000.0).change_percent == -50.0

    def test_change_percent_zero_previous(self):
        assert self._price(100.0, 0.0).change_percent == 0.0

    def test_direction(self):
        assert self._price(2660.0, 2650.0).direction == "up"
        assert self._price(2640.0, 2650.0).direction == "down"
        assert self._price(2650.0, 2650.0).direction == "flat"

    def test_source_names(self):
        assert self._price(2650.0, 2650.0).source_names == ["LBMA"]

    def test_to_dict(self):
        """Test serialization to dictionary."""
        result = self._price(2660.0, 2650.0).to_dict()

        assert result["price"] == 2660.0
        assert result["previous_price"] == 2650.0
        assert result["change"] == 10.0
        assert result["change_percent"] == 0.3774  # (10 / 2650) * 100
        assert result["direction"] == "up"
        assert result["currency"] == "USD"
        assert result["last_updated"] == 1234567890.0
        assert result["sources"][0]["name"] == "LBMA"

    def test_immutability(self):
        update = self._price(2650.0, 2650.0)
        with pytest.raises(AttributeError):
            update.price = 1.0
