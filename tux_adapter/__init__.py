"""
Tux Exchange Adapter Package.

============================================================
PURPOSE
============================================================
Async REST adapter for Tux Exchange exposing the unified
market-data, trading and funding records.

COMPONENTS:
- TuxExchangeAdapter: Operations (ticker, book, trades, orders,
  balances, funding)
- CatalogSnapshot: Immutable markets + currencies
- RequestSigner: Nonce + HMAC-SHA512 signing
- Normalizer functions: Raw record -> unified record
- AdapterMetrics / AdapterLogger: Observability

ERROR HANDLING:
- AdapterError and subclasses
- TUX_ERROR_MAP / classify_response: Upstream phrase mapping

============================================================
"""

# Types
from .types import (
    EXCHANGE_ID,
    IMPLICIT_BASE_ID,
    TradeShape,
    Market,
    Currency,
    TradingFee,
    Ticker,
    OrderBookLevel,
    OrderBook,
    TradeFee,
    Trade,
    Order,
    Balance,
    BalanceSheet,
    Transaction,
    DepositAddress,
    CancelOrderResponse,
    WithdrawResponse,
)

# Errors
from .errors import (
    ErrorCategory,
    AdapterError,
    ArgumentError,
    MissingCredentials,
    UnsupportedOperation,
    UnsupportedParameter,
    UnsupportedMarket,
    NormalizationError,
    MalformedTimestamp,
    UnknownMarket,
    InconsistentData,
    ExchangeError,
    AuthenticationError,
    InsufficientFunds,
    OrderNotFound,
    InvalidAddress,
    WithdrawalPendingEmailConfirmation,
    ExchangeTransportError,
    TUX_ERROR_MAP,
    map_tux_error,
    classify_response,
)

# Catalog
from .catalog import CatalogSnapshot, build_markets, build_currencies

# Normalizer
from .normalizer import (
    common_currency_code,
    normalize_ticker,
    normalize_order_book,
    normalize_trade,
    normalize_order,
    normalize_transaction,
    normalize_balances,
    trade_shape,
)

# Signing / transport
from .signer import TUX_API_URL, RequestSigner, SignedRequest
from .transport import HttpTransport

# Config
from .config import AdapterConfig

# Observability
from .metrics import AdapterMetrics
from .logging_utils import AdapterLogger, mask_value, mask_headers, mask_params, mask_url

# Adapter
from .adapter import TuxExchangeAdapter


__all__ = [
    # Types
    "EXCHANGE_ID",
    "IMPLICIT_BASE_ID",
    "TradeShape",
    "Market",
    "Currency",
    "TradingFee",
    "Ticker",
    "OrderBookLevel",
    "OrderBook",
    "TradeFee",
    "Trade",
    "Order",
    "Balance",
    "BalanceSheet",
    "Transaction",
    "DepositAddress",
    "CancelOrderResponse",
    "WithdrawResponse",
    # Errors
    "ErrorCategory",
    "AdapterError",
    "ArgumentError",
    "MissingCredentials",
    "UnsupportedOperation",
    "UnsupportedParameter",
    "UnsupportedMarket",
    "NormalizationError",
    "MalformedTimestamp",
    "UnknownMarket",
    "InconsistentData",
    "ExchangeError",
    "AuthenticationError",
    "InsufficientFunds",
    "OrderNotFound",
    "InvalidAddress",
    "WithdrawalPendingEmailConfirmation",
    "ExchangeTransportError",
    "TUX_ERROR_MAP",
    "map_tux_error",
    "classify_response",
    # Catalog
    "CatalogSnapshot",
    "build_markets",
    "build_currencies",
    # Normalizer
    "common_currency_code",
    "normalize_ticker",
    "normalize_order_book",
    "normalize_trade",
    "normalize_order",
    "normalize_transaction",
    "normalize_balances",
    "trade_shape",
    # Signing / transport
    "TUX_API_URL",
    "RequestSigner",
    "SignedRequest",
    "HttpTransport",
    # Config
    "AdapterConfig",
    # Observability
    "AdapterMetrics",
    "AdapterLogger",
    "mask_value",
    "mask_headers",
    "mask_params",
    "mask_url",
    # Adapter
    "TuxExchangeAdapter",
]
