"""
Tux Exchange Adapter - Market/Currency Catalog.

============================================================
PURPOSE
============================================================
Builds the market and currency catalogs from the two raw
public listings and wraps them in an immutable snapshot.

UPSTREAM QUIRKS:
- Markets only exist as keys of getticker (BASE_QUOTE)
- Maker/taker fees are attached to the quote currency's
  getcoins record, not to the market
- getcoins never lists BTC, the base of every market
- getticker and getcoins are separate round trips, so a
  catalog may join two slightly different snapshots

============================================================
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Dict, Any, List, Mapping

from .errors import UnknownMarket
from .normalizer import common_currency_code, safe_decimal, safe_string, now_ms
from .types import IMPLICIT_BASE_ID, Market, Currency, TradingFee


logger = logging.getLogger(__name__)


# ============================================================
# BUILDERS
# ============================================================

def _is_active(ticker: Dict[str, Any]) -> bool:
    """isFrozen arrives as 0/1 or "0"/"1"."""
    return str(ticker.get("isFrozen", 0)) == "0"


def build_markets(
    tickers_raw: Dict[str, Any],
    coins_raw: Dict[str, Any],
) -> List[Market]:
    """
    Join getticker and getcoins into markets.

    Markets whose quote currency is missing from the coin listing are
    skipped with a warning.

    Args:
        tickers_raw: getticker response ({BASE_QUOTE: ticker})
        coins_raw: getcoins response ({coin id: coin})

    Returns:
        List of markets
    """
    coins_raw = coins_raw or {}
    markets = []

    for market_id, ticker in (tickers_raw or {}).items():
        parts = str(market_id).split("_")
        if len(parts) != 2 or not all(parts):
            logger.warning(f"Skipping market {market_id!r}: id is not BASE_QUOTE")
            continue

        base_id, quote_id = parts
        coin = coins_raw.get(quote_id)
        if not isinstance(coin, dict):
            logger.warning(
                f"Skipping market {market_id!r}: quote currency {quote_id!r} "
                f"missing from coin listing"
            )
            continue

        if base_id != IMPLICIT_BASE_ID:
            logger.debug(f"Market {market_id!r} has unexpected base {base_id!r}")

        base = common_currency_code(base_id)
        quote = common_currency_code(quote_id)
        ticker = ticker if isinstance(ticker, dict) else {}

        markets.append(Market(
            id=market_id,
            symbol=f"{base}/{quote}",
            base=base,
            quote=quote,
            base_id=base_id,
            quote_id=quote_id,
            active=_is_active(ticker),
            maker_fee=safe_decimal(coin, "makerfee"),
            taker_fee=safe_decimal(coin, "takerfee"),
            info=ticker,
        ))

    return markets


def build_currencies(coins_raw: Dict[str, Any]) -> Dict[str, Currency]:
    """
    Parse getcoins into currencies keyed by canonical code.

    The implicit base (BTC) is always present even though upstream never
    lists it; an upstream record for it, should one appear, wins.
    """
    base_code = common_currency_code(IMPLICIT_BASE_ID)
    result: Dict[str, Currency] = {
        base_code: Currency(
            id=IMPLICIT_BASE_ID,
            code=base_code,
            name="bitcoin",
            is_fiat=False,
            withdraw_fee=None,
        ),
    }

    for coin_id, coin in (coins_raw or {}).items():
        coin = coin if isinstance(coin, dict) else {}
        code = common_currency_code(coin_id)
        result[code] = Currency(
            id=coin_id,
            code=code,
            name=safe_string(coin, "name"),
            is_fiat=False,
            withdraw_fee=safe_decimal(coin, "withdrawfee"),
            info=coin,
        )

    return result


# ============================================================
# SNAPSHOT
# ============================================================

@dataclass(frozen=True)
class CatalogSnapshot:
    """
    Immutable market + currency reference data.

    A refresh builds a new snapshot; existing ones never change.
    """

    markets: Mapping[str, Market] = field(default_factory=dict)
    """Markets by symbol."""

    markets_by_id: Mapping[str, Market] = field(default_factory=dict)
    """Markets by raw BASE_QUOTE id."""

    currencies: Mapping[str, Currency] = field(default_factory=dict)
    """Currencies by canonical code."""

    loaded_at: Optional[int] = None
    """Build time in ms."""

    @classmethod
    def from_records(
        cls,
        markets: List[Market],
        currencies: Dict[str, Currency],
        loaded_at: Optional[int] = None,
    ) -> "CatalogSnapshot":
        """Create snapshot from already built records."""
        return cls(
            markets=MappingProxyType({m.symbol: m for m in markets}),
            markets_by_id=MappingProxyType({m.id: m for m in markets}),
            currencies=MappingProxyType(dict(currencies)),
            loaded_at=loaded_at if loaded_at is not None else now_ms(),
        )

    @classmethod
    def build(
        cls,
        tickers_raw: Dict[str, Any],
        coins_raw: Dict[str, Any],
        loaded_at: Optional[int] = None,
    ) -> "CatalogSnapshot":
        """Create snapshot from the raw getticker and getcoins responses."""
        return cls.from_records(
            build_markets(tickers_raw, coins_raw),
            build_currencies(coins_raw),
            loaded_at,
        )

    # --------------------------------------------------------
    # LOOKUPS
    # --------------------------------------------------------

    @property
    def symbols(self) -> List[str]:
        """All market symbols."""
        return list(self.markets.keys())

    def market(self, symbol: str) -> Market:
        """
        Get market by symbol.

        Raises:
            UnknownMarket: symbol not in catalog
        """
        market = self.markets.get(symbol)
        if market is None:
            raise UnknownMarket(
                f"no market for symbol {symbol!r}",
                details={"symbol": symbol},
            )
        return market

    def market_by_id(self, market_id: Optional[str]) -> Market:
        """
        Get market by raw id.

        Raises:
            UnknownMarket: id not in catalog
        """
        market = self.markets_by_id.get(market_id)
        if market is None:
            raise UnknownMarket(
                f"no market for id {market_id!r}",
                details={"market_id": market_id},
            )
        return market

    def currency(self, code: str) -> Optional[Currency]:
        """Get currency by canonical code."""
        return self.currencies.get(code)

    def currency_id(self, code: str) -> str:
        """Upstream id for a canonical code (the code itself when unknown)."""
        currency = self.currencies.get(code)
        return currency.id if currency else code

    def trading_fees(self) -> Dict[str, TradingFee]:
        """Maker/taker fees per symbol."""
        return {
            symbol: TradingFee(symbol=symbol, maker=m.maker_fee, taker=m.taker_fee)
            for symbol, m in self.markets.items()
        }
