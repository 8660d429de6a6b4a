"""
Tux Exchange Adapter - Unified Records.

============================================================
PURPOSE
============================================================
Exchange-agnostic record shapes produced by the adapter.

CONVENTIONS:
- All monetary and quantity fields are Decimal, never float
- Unavailable values are None, never zero
- Timestamps are integer milliseconds since epoch (UTC)
- Records are immutable once returned

============================================================
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any, List


# ============================================================
# CONSTANTS
# ============================================================

EXCHANGE_ID = "tuxexchange"

# Every upstream market is quoted against this base; getcoins never lists it.
IMPLICIT_BASE_ID = "BTC"

ORDER_TYPE_LIMIT = "limit"

SIDE_BUY = "buy"
SIDE_SELL = "sell"
ORDER_SIDES = (SIDE_BUY, SIDE_SELL)

TRANSACTION_DEPOSIT = "deposit"
TRANSACTION_WITHDRAWAL = "withdrawal"
TRANSACTION_TYPES = (TRANSACTION_DEPOSIT, TRANSACTION_WITHDRAWAL)


class TradeShape(Enum):
    """Raw trade payload shape."""

    PUBLIC = "PUBLIC"
    """gettradehistory record: price under "rate", no fee data."""

    PRIVATE = "PRIVATE"
    """getmytradehistory record: price under "price", orderId and fee data."""


# ============================================================
# CATALOG RECORDS
# ============================================================

@dataclass(frozen=True)
class Market:
    """Tradable pair."""

    id: str
    """Raw pair key (BASE_QUOTE)."""

    symbol: str
    """Canonical BASE/QUOTE symbol."""

    base: str
    quote: str
    base_id: str
    quote_id: str

    active: bool = True
    """False when upstream reports the pair as frozen."""

    maker_fee: Optional[Decimal] = None
    taker_fee: Optional[Decimal] = None

    info: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Currency:
    """Currency reference data."""

    id: str
    code: str
    name: Optional[str] = None
    is_fiat: bool = False

    withdraw_fee: Optional[Decimal] = None
    """None when upstream gives no fee (always None for the implicit base)."""

    info: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class TradingFee:
    """Maker/taker fee for one market."""

    symbol: str
    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None


# ============================================================
# MARKET DATA RECORDS
# ============================================================

@dataclass(frozen=True)
class Ticker:
    """
    24h ticker snapshot.

    Upstream tickers carry no timestamp, so `timestamp` is the capture
    time of the response, an approximation rather than the exchange's
    own clock.
    """

    symbol: str
    timestamp: int
    datetime: str

    close: Optional[Decimal] = None
    last: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None

    # Never provided upstream
    bid_volume: Optional[Decimal] = None
    ask_volume: Optional[Decimal] = None
    vwap: Optional[Decimal] = None
    open: Optional[Decimal] = None
    previous_close: Optional[Decimal] = None
    change: Optional[Decimal] = None
    average: Optional[Decimal] = None

    info: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class OrderBookLevel:
    """Single price level."""

    price: Decimal
    amount: Decimal


@dataclass(frozen=True)
class OrderBook:
    """
    Full-depth order book.

    Bids are strictly descending by price, asks strictly ascending.
    """

    symbol: str
    bids: List[OrderBookLevel] = field(default_factory=list)
    asks: List[OrderBookLevel] = field(default_factory=list)
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    nonce: Optional[int] = None


@dataclass(frozen=True)
class TradeFee:
    """Fee charged on a private trade."""

    cost: Optional[Decimal]
    currency: str
    rate: Optional[Decimal] = None


@dataclass(frozen=True)
class Trade:
    """Executed trade, public or private."""

    id: Optional[str]
    timestamp: int
    datetime: str
    symbol: str
    side: Optional[str]
    price: Optional[Decimal]
    amount: Optional[Decimal]
    cost: Optional[Decimal]
    type: str = ORDER_TYPE_LIMIT

    order_id: Optional[str] = None
    """Only set on private trades."""

    fee: Optional[TradeFee] = None
    """Only set on private trades."""

    info: Dict[str, Any] = field(default_factory=dict, compare=False)


# ============================================================
# ACCOUNT RECORDS
# ============================================================

@dataclass(frozen=True)
class Order:
    """Limit order."""

    id: Optional[str]
    symbol: str
    side: Optional[str]
    price: Optional[Decimal]
    amount: Optional[Decimal]
    type: str = ORDER_TYPE_LIMIT

    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None

    status: Optional[str] = None
    """Always "open" for listed orders; None right after placement."""

    timestamp: Optional[int] = None
    datetime: Optional[str] = None

    info: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Balance:
    """Balance of one currency."""

    currency: str
    free: Optional[Decimal]
    used: Optional[Decimal]
    total: Optional[Decimal]


@dataclass(frozen=True)
class BalanceSheet:
    """All balances keyed by canonical currency code."""

    balances: Dict[str, Balance] = field(default_factory=dict)
    info: Dict[str, Any] = field(default_factory=dict, compare=False)

    def get(self, code: str) -> Optional[Balance]:
        """Get balance for currency code."""
        return self.balances.get(code)


@dataclass(frozen=True)
class Transaction:
    """Deposit or withdrawal."""

    id: str
    txid: str
    timestamp: int
    datetime: str
    address: Optional[str]
    type: str
    amount: Optional[Decimal]
    currency: Optional[str]
    status: Optional[str]
    info: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class DepositAddress:
    """Deposit address for a currency."""

    currency: str
    address: str
    info: Any = None


@dataclass(frozen=True)
class CancelOrderResponse:
    """Response from order cancellation."""

    success: bool
    exchange_order_id: str
    symbol: str
    raw_response: Any = None


@dataclass(frozen=True)
class WithdrawResponse:
    """Response from a withdrawal request."""

    currency: str
    amount: Decimal
    address: str
    raw_response: Any = None
