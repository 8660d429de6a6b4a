"""
Tux Exchange Adapter - Schema Normalizer.

============================================================
PURPOSE
============================================================
Pure functions turning one raw Tux record into one unified
record. No I/O.

UPSTREAM QUIRKS HANDLED HERE:
- Numbers arrive as strings, ints or JSON decimals
- Public trades carry the price under "rate", private ones
  under "price" together with orderId and fee data
- Markets are keyed as BASE_QUOTE strings
- Dates are "YYYY-MM-DD HH:MM:SS" strings without zone (UTC)

============================================================
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional, Dict, Any, List, Iterable, Tuple, TypeVar, TYPE_CHECKING
import time

from .errors import (
    ArgumentError,
    MalformedTimestamp,
    NormalizationError,
    InconsistentData,
)
from .types import (
    EXCHANGE_ID,
    SIDE_BUY,
    TRANSACTION_TYPES,
    TradeShape,
    Market,
    Ticker,
    OrderBook,
    OrderBookLevel,
    Trade,
    TradeFee,
    Order,
    Balance,
    BalanceSheet,
    Transaction,
)

if TYPE_CHECKING:
    from .catalog import CatalogSnapshot


logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Record = TypeVar("Record")


# ============================================================
# FIELD HELPERS
# ============================================================

# Upstream code -> canonical code
COMMON_CURRENCIES: Dict[str, str] = {
    "XBT": "BTC",
    "BCC": "BCH",
    "DRK": "DASH",
}


def common_currency_code(code: Optional[str]) -> Optional[str]:
    """Canonicalize an upstream currency code."""
    if code is None:
        return None
    return COMMON_CURRENCIES.get(code, code)


def safe_string(mapping: Dict[str, Any], key: str) -> Optional[str]:
    """Get a field as string, None when missing or null."""
    value = mapping.get(key) if isinstance(mapping, dict) else None
    if value is None:
        return None
    return str(value)


def safe_decimal(mapping: Dict[str, Any], key: str) -> Optional[Decimal]:
    """
    Get a field as Decimal.

    Missing, null, empty and unparseable values give None so that an
    absent number is never mistaken for zero.
    """
    value = mapping.get(key) if isinstance(mapping, dict) else None
    return to_decimal(value)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a raw scalar to Decimal (None when not a finite number)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    if not result.is_finite():
        return None
    return result


def now_ms() -> int:
    """Current time in milliseconds."""
    return int(time.time() * 1000)


def iso8601(timestamp_ms: Optional[int]) -> Optional[str]:
    """Format milliseconds as YYYY-MM-DDTHH:MM:SS.mmmZ."""
    if timestamp_ms is None:
        return None
    moment = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp_ms % 1000:03d}Z"


def parse_datetime_ms(
    value: Any,
    field_name: str = "date",
    exchange_id: str = EXCHANGE_ID,
) -> int:
    """
    Parse an upstream date string to milliseconds.

    Accepts "YYYY-MM-DD HH:MM:SS" and ISO-8601; naive values are UTC.

    Raises:
        MalformedTimestamp: value missing or unparseable
    """
    if not isinstance(value, str) or not value.strip():
        raise MalformedTimestamp(
            f"missing or non-string {field_name!r}",
            exchange_id=exchange_id,
            details={field_name: value},
        )

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedTimestamp(
            f"unparseable {field_name!r}: {value!r}",
            exchange_id=exchange_id,
            details={field_name: value},
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    delta = parsed - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def filter_by_since_limit(
    records: Iterable[Record],
    since: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Record]:
    """Keep records with timestamp >= since, then the first `limit`."""
    result = list(records)
    if since is not None:
        result = [
            r for r in result
            if r.timestamp is not None and r.timestamp >= since
        ]
    if limit is not None:
        result = result[:limit]
    return result


# ============================================================
# TICKER
# ============================================================

def normalize_ticker(
    raw_pair: Tuple[str, Dict[str, Any]],
    catalog: "CatalogSnapshot",
    captured_at: Optional[int] = None,
) -> Ticker:
    """
    Normalize one getticker entry.

    Args:
        raw_pair: (market id, raw ticker fields)
        catalog: Catalog used to resolve the market id
        captured_at: Capture time in ms (default: now)

    Returns:
        Ticker

    Raises:
        UnknownMarket: market id not in catalog
    """
    market_id, ticker = raw_pair
    market = catalog.market_by_id(market_id)

    timestamp = captured_at if captured_at is not None else now_ms()
    last = safe_decimal(ticker, "last")

    return Ticker(
        symbol=market.symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        close=last,
        last=last,
        high=safe_decimal(ticker, "high24hr"),
        low=safe_decimal(ticker, "low24hr"),
        percentage=safe_decimal(ticker, "percentChange"),
        base_volume=safe_decimal(ticker, "baseVolume"),
        quote_volume=safe_decimal(ticker, "quoteVolume"),
        bid=safe_decimal(ticker, "highestBid"),
        ask=safe_decimal(ticker, "lowestAsk"),
        info=ticker if isinstance(ticker, dict) else {},
    )


# ============================================================
# ORDER BOOK
# ============================================================

def _parse_levels(raw_levels: Any, side: str, symbol: str) -> Dict[Decimal, Decimal]:
    """Parse [price, amount] entries, merging equal prices."""
    merged: Dict[Decimal, Decimal] = {}
    if not raw_levels:
        return merged

    for entry in raw_levels:
        if isinstance(entry, dict):
            price = to_decimal(entry.get("price", entry.get("rate")))
            amount = to_decimal(entry.get("amount", entry.get("quantity")))
        elif isinstance(entry, (list, tuple)) and len(entry) >= 2:
            price = to_decimal(entry[0])
            amount = to_decimal(entry[1])
        else:
            price = amount = None

        if price is None or amount is None:
            raise NormalizationError(
                f"malformed {side} level for {symbol}",
                details={"level": entry},
            )

        merged[price] = merged.get(price, Decimal("0")) + amount

    return merged


def normalize_order_book(raw: Dict[str, Any], symbol: str) -> OrderBook:
    """
    Normalize a getorders response.

    Output bids are strictly descending and asks strictly ascending by
    price regardless of input order.
    """
    raw = raw if isinstance(raw, dict) else {}

    bids = _parse_levels(raw.get("bids"), "bid", symbol)
    asks = _parse_levels(raw.get("asks"), "ask", symbol)

    return OrderBook(
        symbol=symbol,
        bids=[OrderBookLevel(p, bids[p]) for p in sorted(bids, reverse=True)],
        asks=[OrderBookLevel(p, asks[p]) for p in sorted(asks)],
    )


# ============================================================
# TRADES
# ============================================================

def trade_shape(raw: Dict[str, Any]) -> TradeShape:
    """Decide whether a raw trade came from the private or public feed."""
    if isinstance(raw, dict) and raw.get("orderId") is not None:
        return TradeShape.PRIVATE
    return TradeShape.PUBLIC


def normalize_trade(raw: Dict[str, Any], market: Market) -> Trade:
    """
    Normalize a public or private trade.

    Private trades get a fee block. The fee is charged in the currency
    received: the quote asset on buys, the base asset on sells.

    Raises:
        MalformedTimestamp: "date" missing or unparseable
    """
    shape = trade_shape(raw)
    timestamp = parse_datetime_ms(raw.get("date"))
    side = safe_string(raw, "type")

    if shape is TradeShape.PRIVATE:
        price = safe_decimal(raw, "price")
        fee = TradeFee(
            cost=safe_decimal(raw, "fee"),
            currency=market.quote if side == SIDE_BUY else market.base,
            rate=safe_decimal(raw, "feepercent"),
        )
        order_id = safe_string(raw, "orderId")
    else:
        price = safe_decimal(raw, "rate")
        fee = None
        order_id = None

    return Trade(
        id=safe_string(raw, "tradeid"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol,
        side=side,
        price=price,
        amount=safe_decimal(raw, "amount"),
        cost=safe_decimal(raw, "total"),
        order_id=order_id,
        fee=fee,
        info=raw,
    )


def sort_by_timestamp(records: Iterable[Record]) -> List[Record]:
    """Sort ascending by timestamp (upstream lists are unordered)."""
    return sorted(records, key=lambda r: r.timestamp)


# ============================================================
# ORDERS
# ============================================================

def normalize_order(raw: Dict[str, Any], catalog: "CatalogSnapshot") -> Order:
    """
    Normalize a getmyopenorders entry.

    Status is always "open": upstream exposes no closed-order endpoint.

    Raises:
        UnknownMarket: market_pair not in catalog
        InconsistentData: filled amount exceeds order amount
    """
    market = catalog.market_by_id(safe_string(raw, "market_pair"))
    timestamp = parse_datetime_ms(raw.get("date"))

    amount = safe_decimal(raw, "amount")
    filled = safe_decimal(raw, "filledamount")

    remaining = None
    if amount is not None and filled is not None:
        remaining = amount - filled
        if remaining < 0:
            raise InconsistentData(
                f"order {raw.get('id')} filled {filled} exceeds amount {amount}",
                details={"id": raw.get("id"), "amount": str(amount), "filled": str(filled)},
            )

    return Order(
        id=safe_string(raw, "id"),
        symbol=market.symbol,
        side=safe_string(raw, "type"),
        price=safe_decimal(raw, "price"),
        amount=amount,
        filled=filled,
        remaining=remaining,
        status="open",
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        info=raw,
    )


# ============================================================
# TRANSACTIONS
# ============================================================

def normalize_transaction(raw: Dict[str, Any], transaction_type: str) -> Transaction:
    """
    Normalize a deposit or withdrawal.

    Upstream payloads do not say which of the two they are, so the
    caller supplies `transaction_type`.
    """
    if transaction_type not in TRANSACTION_TYPES:
        raise ArgumentError(f"transaction type must be one of {TRANSACTION_TYPES}, got {transaction_type!r}")

    txid = safe_string(raw, "txid")
    if txid is None:
        raise NormalizationError("transaction without txid", details={"record": raw})

    timestamp = parse_datetime_ms(raw.get("date"))
    upstream_status = safe_string(raw, "status")

    return Transaction(
        id=txid,
        txid=txid,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        address=safe_string(raw, "address"),
        type=transaction_type,
        amount=safe_decimal(raw, "amount"),
        currency=common_currency_code(safe_string(raw, "coin")),
        status="ok" if upstream_status == "success" else upstream_status,
        info=raw,
    )


# ============================================================
# BALANCES
# ============================================================

def normalize_balances(raw: Dict[str, Any]) -> BalanceSheet:
    """Normalize getmybalances ({coin: {balance, frozen}})."""
    balances: Dict[str, Balance] = {}

    for coin, data in (raw or {}).items():
        code = common_currency_code(str(coin).upper())
        total = safe_decimal(data, "balance")
        used = safe_decimal(data, "frozen")
        free = total - used if total is not None and used is not None else None

        balances[code] = Balance(currency=code, free=free, used=used, total=total)

    return BalanceSheet(balances=balances, info=raw or {})
