"""
Catalog Tests.

Tests for market/currency building and the immutable snapshot.
"""

import dataclasses
from decimal import Decimal

import pytest

from tux_adapter import (
    CatalogSnapshot,
    UnknownMarket,
    build_currencies,
    build_markets,
)

from conftest import COINS_RAW, TICKERS_RAW


# ============================================================
# MARKET BUILDER TESTS
# ============================================================

class TestBuildMarkets:
    """Tests for build_markets."""

    def test_markets_from_ticker_keys(self):
        markets = {m.id: m for m in build_markets(TICKERS_RAW, COINS_RAW)}

        ltc = markets["BTC_LTC"]
        assert ltc.symbol == "BTC/LTC"
        assert ltc.base == "BTC"
        assert ltc.quote == "LTC"
        assert ltc.base_id == "BTC"
        assert ltc.quote_id == "LTC"

    def test_fees_from_quote_coin(self):
        markets = {m.id: m for m in build_markets(TICKERS_RAW, COINS_RAW)}

        assert markets["BTC_LTC"].maker_fee == Decimal("0.1")
        assert markets["BTC_LTC"].taker_fee == Decimal("0.2")
        assert markets["BTC_ETH"].maker_fee == Decimal("0.15")

    def test_active_from_is_frozen(self):
        markets = {m.id: m for m in build_markets(TICKERS_RAW, COINS_RAW)}

        assert markets["BTC_LTC"].active is True
        assert markets["BTC_ETH"].active is False

    def test_malformed_id_skipped(self):
        tickers = dict(TICKERS_RAW, BTCLTC={}, A_B_C={})

        ids = [m.id for m in build_markets(tickers, COINS_RAW)]

        assert sorted(ids) == ["BTC_ETH", "BTC_LTC"]

    def test_missing_quote_coin_skipped(self):
        tickers = dict(TICKERS_RAW, BTC_DOGE={"last": "1"})

        ids = [m.id for m in build_markets(tickers, COINS_RAW)]

        assert "BTC_DOGE" not in ids

    def test_empty_inputs(self):
        assert build_markets({}, {}) == []
        assert build_markets(None, None) == []


# ============================================================
# CURRENCY BUILDER TESTS
# ============================================================

class TestBuildCurrencies:
    """Tests for build_currencies."""

    def test_synthetic_btc_always_present(self):
        currencies = build_currencies({})

        btc = currencies["BTC"]
        assert btc.id == "BTC"
        assert btc.name == "bitcoin"
        assert btc.withdraw_fee is None

    def test_listed_coins(self):
        currencies = build_currencies(COINS_RAW)

        assert set(currencies) == {"BTC", "LTC", "ETH"}
        assert currencies["LTC"].name == "Litecoin"
        assert currencies["LTC"].withdraw_fee == Decimal("0.01")
        assert currencies["LTC"].is_fiat is False

    def test_upstream_btc_record_wins(self):
        coins = dict(COINS_RAW, BTC={"name": "Bitcoin", "withdrawfee": "0.0005"})

        btc = build_currencies(coins)["BTC"]

        assert btc.name == "Bitcoin"
        assert btc.withdraw_fee == Decimal("0.0005")

    def test_codes_canonicalized(self):
        currencies = build_currencies({"DRK": {"name": "Darkcoin"}})

        assert currencies["DASH"].id == "DRK"


# ============================================================
# SNAPSHOT TESTS
# ============================================================

class TestCatalogSnapshot:
    """Tests for CatalogSnapshot lookups and immutability."""

    def test_lookups(self, catalog):
        assert sorted(catalog.symbols) == ["BTC/ETH", "BTC/LTC"]
        assert catalog.market("BTC/LTC").id == "BTC_LTC"
        assert catalog.market_by_id("BTC_ETH").symbol == "BTC/ETH"
        assert catalog.currency("LTC").name == "Litecoin"
        assert catalog.currency("XYZ") is None

    def test_unknown_symbol(self, catalog):
        with pytest.raises(UnknownMarket):
            catalog.market("BTC/DOGE")

    def test_unknown_id(self, catalog):
        with pytest.raises(UnknownMarket):
            catalog.market_by_id("BTC_DOGE")

    def test_currency_id_falls_back_to_code(self, catalog):
        assert catalog.currency_id("LTC") == "LTC"
        assert catalog.currency_id("XYZ") == "XYZ"

    def test_trading_fees(self, catalog):
        fees = catalog.trading_fees()

        assert fees["BTC/LTC"].maker == Decimal("0.1")
        assert fees["BTC/LTC"].taker == Decimal("0.2")

    def test_snapshot_is_immutable(self, catalog):
        with pytest.raises(dataclasses.FrozenInstanceError):
            catalog.loaded_at = 0

        with pytest.raises(TypeError):
            catalog.markets["BTC/DOGE"] = catalog.market("BTC/LTC")

    def test_loaded_at(self, catalog):
        assert catalog.loaded_at == 1500000000000
