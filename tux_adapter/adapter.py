"""
Tux Exchange Adapter.

============================================================
PURPOSE
============================================================
Async adapter exposing Tux Exchange through the unified
record contract.

EXCHANGE SPECIFICS:
- Single endpoint, remote operation chosen by "method"
- Public calls are GET, private calls POST with nonce and
  HMAC-SHA512 Key/Sign headers
- Every market is BTC_<COIN>; order book and public trade
  endpoints take the coin only
- Errors come back as HTTP 200 {"success": 0, "error": ...}

Every operation validates its arguments before any network
call, loads the catalog if needed, issues one call and
normalizes the result. Nothing is retried.

============================================================
API DOCUMENTATION
============================================================
https://www.tuxexchange.com/docs

============================================================
"""

import functools
import logging
import time
from decimal import Decimal
from typing import Optional, Dict, Any, List, Callable, Tuple

from .catalog import CatalogSnapshot, build_markets, build_currencies
from .config import AdapterConfig
from .errors import (
    AdapterError,
    ArgumentError,
    ExchangeError,
    InvalidAddress,
    MissingCredentials,
    UnknownMarket,
    UnsupportedMarket,
    UnsupportedOperation,
    UnsupportedParameter,
    classify_response,
)
from .logging_utils import AdapterLogger
from .metrics import AdapterMetrics
from .normalizer import (
    common_currency_code,
    filter_by_since_limit,
    normalize_balances,
    normalize_order,
    normalize_order_book,
    normalize_ticker,
    normalize_trade,
    normalize_transaction,
    sort_by_timestamp,
    to_decimal,
)
from .signer import RequestSigner
from .transport import HttpTransport
from .types import (
    EXCHANGE_ID,
    IMPLICIT_BASE_ID,
    ORDER_SIDES,
    ORDER_TYPE_LIMIT,
    TRANSACTION_DEPOSIT,
    TRANSACTION_WITHDRAWAL,
    Market,
    Currency,
    TradingFee,
    Ticker,
    OrderBook,
    Trade,
    Order,
    BalanceSheet,
    Transaction,
    DepositAddress,
    CancelOrderResponse,
    WithdrawResponse,
)


logger = logging.getLogger(__name__)


# ============================================================
# REMOTE METHODS
# ============================================================

# Public
TUX_GET_TICKER = "getticker"
TUX_GET_COINS = "getcoins"
TUX_GET_ORDERS = "getorders"
TUX_GET_TRADE_HISTORY = "gettradehistory"

# Private
TUX_GET_BALANCES = "getmybalances"
TUX_GET_OPEN_ORDERS = "getmyopenorders"
TUX_GET_MY_TRADES = "getmytradehistory"
TUX_GET_ADDRESSES = "getmyaddresses"
TUX_GET_DEPOSITS = "getmydeposithistory"
TUX_GET_WITHDRAWALS = "getmywithdrawhistory"
TUX_CANCEL_ORDER = "cancelorder"
TUX_WITHDRAW = "withdraw"


def _plain(value: Decimal) -> str:
    """Decimal without exponent notation."""
    return format(value, "f")


def _operation_scope(func):
    """Name the operation on adapter errors raised without one."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except AdapterError as e:
            e.with_operation(func.__name__)
            raise

    return wrapper


# ============================================================
# TUX ADAPTER
# ============================================================

class TuxExchangeAdapter:
    """
    Tux Exchange adapter.

    Holds no state besides an optionally cached catalog snapshot.
    Every operation also accepts an explicit `catalog` to work
    against a caller-held snapshot.
    """

    def __init__(
        self,
        api_key: str = None,
        api_secret: str = None,
        base_url: str = None,
        timeout_seconds: float = None,
        config: AdapterConfig = None,
        transport: Any = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize Tux adapter.

        Args:
            api_key: Tux API key (or from config / TUX_API_KEY env)
            api_secret: Tux API secret (or from config / TUX_API_SECRET env)
            base_url: Endpoint override
            timeout_seconds: Request timeout
            config: Explicit config (default: from environment)
            transport: Object with async get/post(SignedRequest) -> (status, text)
            clock: Seconds-since-epoch source for nonces and timestamps
        """
        config = config or AdapterConfig.from_env()

        self._clock = clock
        self._signer = RequestSigner(
            base_url=base_url or config.base_url,
            api_key=api_key or config.api_key,
            api_secret=api_secret or config.api_secret,
            clock=clock,
        )
        self._transport = transport or HttpTransport(
            timeout_seconds=timeout_seconds or config.timeout_seconds,
            exchange_id=EXCHANGE_ID,
        )

        self._catalog: Optional[CatalogSnapshot] = None

        self._metrics = AdapterMetrics(EXCHANGE_ID)
        self._logger = AdapterLogger(EXCHANGE_ID)

    # --------------------------------------------------------
    # PROPERTIES
    # --------------------------------------------------------

    @property
    def exchange_id(self) -> str:
        """Exchange identifier."""
        return EXCHANGE_ID

    @property
    def metrics(self) -> AdapterMetrics:
        return self._metrics

    @property
    def catalog(self) -> Optional[CatalogSnapshot]:
        """Cached catalog, None until loaded."""
        return self._catalog

    # --------------------------------------------------------
    # CONNECTION
    # --------------------------------------------------------

    async def connect(self) -> None:
        """Open transport and load the catalog."""
        if hasattr(self._transport, "connect"):
            await self._transport.connect()
        await self.load_catalog()
        self._logger.info("Connected to Tux Exchange")

    async def disconnect(self) -> None:
        """Close transport."""
        if hasattr(self._transport, "close"):
            await self._transport.close()
        self._logger.info("Disconnected from Tux Exchange")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    # --------------------------------------------------------
    # REQUEST HANDLING
    # --------------------------------------------------------

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def _call(
        self,
        params: Dict[str, Any],
        private: bool = False,
        operation: str = None,
    ) -> Any:
        """
        Sign, send and classify one request.

        Args:
            params: Query parameters including "method"
            private: Signed call
            operation: Caller operation name for logs and errors

        Returns:
            Decoded payload (None for empty bodies)
        """
        remote_method = params["method"]
        operation = operation or remote_method

        request = self._signer.build(params, private=private)

        request_id = self._logger.log_request(
            operation=operation,
            method=request.method,
            url=request.url,
            headers=request.headers,
            body=request.body,
        )

        start_time = time.monotonic()
        status = None
        body = None

        try:
            if request.method == "POST":
                status, body = await self._transport.post(request)
            else:
                status, body = await self._transport.get(request)
            payload = classify_response(status, body, EXCHANGE_ID, operation)
        except AdapterError as e:
            latency_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_request(
                method=remote_method,
                latency_ms=latency_ms,
                success=False,
                status_code=status,
                error_type=type(e).__name__,
            )
            self._logger.log_response(
                operation=operation,
                request_id=request_id,
                status_code=status,
                latency_ms=latency_ms,
                success=False,
                error_type=type(e).__name__,
                error_message=e.message,
            )
            raise

        latency_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_request(
            method=remote_method,
            latency_ms=latency_ms,
            success=True,
            status_code=status,
        )
        self._logger.log_response(
            operation=operation,
            request_id=request_id,
            status_code=status,
            latency_ms=latency_ms,
            success=True,
            response_body=body,
        )

        return payload

    @staticmethod
    def _expect_dict(payload: Any, operation: str) -> Dict[str, Any]:
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ExchangeError(
                f"expected a JSON object, got {type(payload).__name__}",
                operation=operation,
            )
        return payload

    @staticmethod
    def _expect_list(payload: Any, operation: str) -> List[Any]:
        if payload is None:
            return []
        if isinstance(payload, dict):
            return list(payload.values())
        if not isinstance(payload, list):
            raise ExchangeError(
                f"expected a JSON array, got {type(payload).__name__}",
                operation=operation,
            )
        return payload

    @staticmethod
    def _require(operation: str, **arguments: Any) -> None:
        """Raise ArgumentError for the first argument that is None."""
        for name, value in arguments.items():
            if value is None:
                raise ArgumentError(
                    f"requires a {name!r} argument",
                    operation=operation,
                )

    def _require_credentials(self, operation: str) -> None:
        """Fail a private operation before any request, catalog loads included."""
        if not self._signer.has_credentials:
            raise MissingCredentials(
                "private call requires api_key and api_secret",
                operation=operation,
            )

    @staticmethod
    def _split_symbol(symbol: str, operation: str) -> Tuple[str, str]:
        parts = symbol.split("/") if isinstance(symbol, str) else []
        if len(parts) != 2 or not all(parts):
            raise ArgumentError(
                f"symbol must look like BASE/QUOTE, got {symbol!r}",
                operation=operation,
            )
        return parts[0], parts[1]

    def _require_implicit_base(self, symbol: str, operation: str) -> None:
        base, _ = self._split_symbol(symbol, operation)
        if base != common_currency_code(IMPLICIT_BASE_ID):
            raise UnsupportedMarket(
                f"only markets with {IMPLICIT_BASE_ID} as base are served, got {symbol!r}",
                operation=operation,
                details={"symbol": symbol},
            )

    @staticmethod
    def _positive_decimal(value: Any, name: str, operation: str) -> Decimal:
        result = to_decimal(value)
        if result is None or result <= 0:
            raise ArgumentError(
                f"{name!r} must be a positive number, got {value!r}",
                operation=operation,
            )
        return result

    # --------------------------------------------------------
    # CATALOG
    # --------------------------------------------------------

    async def _fetch_catalog_sources(self, operation: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        tickers = await self._call({"method": TUX_GET_TICKER}, operation=operation)
        coins = await self._call({"method": TUX_GET_COINS}, operation=operation)
        return self._expect_dict(tickers, operation), self._expect_dict(coins, operation)

    @_operation_scope
    async def fetch_markets(self) -> List[Market]:
        """Build markets from getticker + getcoins."""
        tickers, coins = await self._fetch_catalog_sources("fetch_markets")
        return build_markets(tickers, coins)

    @_operation_scope
    async def fetch_currencies(self) -> Dict[str, Currency]:
        """Build currencies from getcoins (BTC always included)."""
        coins = await self._call({"method": TUX_GET_COINS}, operation="fetch_currencies")
        return build_currencies(self._expect_dict(coins, "fetch_currencies"))

    @_operation_scope
    async def refresh_catalog(self) -> CatalogSnapshot:
        """Build a new catalog snapshot and cache it."""
        tickers, coins = await self._fetch_catalog_sources("refresh_catalog")
        snapshot = CatalogSnapshot.build(tickers, coins, loaded_at=self._now_ms())
        self._catalog = snapshot
        logger.info(
            f"Catalog loaded: {len(snapshot.markets)} markets, "
            f"{len(snapshot.currencies)} currencies"
        )
        return snapshot

    @_operation_scope
    async def load_catalog(self, reload: bool = False) -> CatalogSnapshot:
        """Cached catalog, built on first use or when reload is set."""
        if self._catalog is None or reload:
            return await self.refresh_catalog()
        return self._catalog

    async def _resolve_catalog(self, catalog: Optional[CatalogSnapshot]) -> CatalogSnapshot:
        if catalog is not None:
            return catalog
        return await self.load_catalog()

    @_operation_scope
    async def fetch_trading_fees(
        self,
        catalog: CatalogSnapshot = None,
    ) -> Dict[str, TradingFee]:
        """Maker/taker fees per symbol (sourced from getcoins)."""
        catalog = await self._resolve_catalog(catalog)
        return catalog.trading_fees()

    # --------------------------------------------------------
    # MARKET DATA
    # --------------------------------------------------------

    @_operation_scope
    async def fetch_ticker(
        self,
        symbol: str,
        catalog: CatalogSnapshot = None,
    ) -> Ticker:
        """
        Get ticker for symbol.

        There is no single-ticker endpoint; the full listing is filtered.

        Raises:
            UnknownMarket: symbol not in catalog or not in the listing
        """
        operation = "fetch_ticker"
        self._require(operation, symbol=symbol)

        catalog = await self._resolve_catalog(catalog)
        market = catalog.market(symbol)

        payload = self._expect_dict(
            await self._call({"method": TUX_GET_TICKER}, operation=operation),
            operation,
        )

        raw = payload.get(market.id)
        if raw is None:
            raise UnknownMarket(
                f"no ticker returned for {symbol!r}",
                operation=operation,
                details={"symbol": symbol, "market_id": market.id},
            )

        return normalize_ticker((market.id, raw), catalog, self._now_ms())

    @_operation_scope
    async def fetch_tickers(
        self,
        symbols: List[str] = None,
        catalog: CatalogSnapshot = None,
    ) -> Dict[str, Ticker]:
        """Get tickers keyed by symbol; ids missing from the catalog are skipped."""
        operation = "fetch_tickers"
        catalog = await self._resolve_catalog(catalog)

        payload = self._expect_dict(
            await self._call({"method": TUX_GET_TICKER}, operation=operation),
            operation,
        )
        captured_at = self._now_ms()

        result = {}
        for market_id, raw in payload.items():
            try:
                ticker = normalize_ticker((market_id, raw), catalog, captured_at)
            except UnknownMarket:
                logger.warning(f"Skipping ticker {market_id!r}: not in catalog")
                continue
            if symbols is None or ticker.symbol in symbols:
                result[ticker.symbol] = ticker

        return result

    @_operation_scope
    async def fetch_order_book(
        self,
        symbol: str,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> OrderBook:
        """
        Get full-depth order book.

        Raises:
            UnsupportedMarket: base is not BTC
            UnsupportedParameter: limit given (upstream returns full depth)
        """
        operation = "fetch_order_book"
        self._require(operation, symbol=symbol)
        self._require_implicit_base(symbol, operation)
        if limit is not None:
            raise UnsupportedParameter(
                "does not support a 'limit' argument",
                operation=operation,
                details={"limit": limit},
            )

        catalog = await self._resolve_catalog(catalog)
        market = catalog.market(symbol)

        payload = await self._call(
            {"method": TUX_GET_ORDERS, "coin": market.quote_id},
            operation=operation,
        )

        return normalize_order_book(self._expect_dict(payload, operation), market.symbol)

    @_operation_scope
    async def fetch_trades(
        self,
        symbol: str,
        since: int = None,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> List[Trade]:
        """
        Get public trade history, ascending by timestamp.

        Args:
            symbol: BTC-based symbol
            since: Earliest timestamp in ms
            limit: Max trades
        """
        operation = "fetch_trades"
        self._require(operation, symbol=symbol)
        self._require_implicit_base(symbol, operation)

        catalog = await self._resolve_catalog(catalog)
        market = catalog.market(symbol)

        params = {"method": TUX_GET_TRADE_HISTORY, "coin": market.quote_id}
        if since is not None:
            params["start"] = since // 1000
        params["end"] = int(self._clock())

        payload = self._expect_list(await self._call(params, operation=operation), operation)

        trades = sort_by_timestamp(normalize_trade(raw, market) for raw in payload)
        return filter_by_since_limit(trades, since, limit)

    # --------------------------------------------------------
    # ORDER OPERATIONS
    # --------------------------------------------------------

    @_operation_scope
    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Any,
        price: Any,
        catalog: CatalogSnapshot = None,
    ) -> Order:
        """
        Place a limit order.

        Upstream answers with the order id only, so fill and status
        fields of the returned order are None.

        Raises:
            ArgumentError: missing symbol/amount/price, side not buy/sell
            UnsupportedOperation: type other than "limit"
        """
        operation = "create_order"
        self._require(operation, symbol=symbol, amount=amount, price=price)
        if type != ORDER_TYPE_LIMIT:
            raise UnsupportedOperation(
                f"only limit orders are supported, got {type!r}",
                operation=operation,
            )
        if side not in ORDER_SIDES:
            raise ArgumentError(
                f"'side' must be either 'buy' or 'sell', got {side!r}",
                operation=operation,
            )
        amount = self._positive_decimal(amount, "amount", operation)
        price = self._positive_decimal(price, "price", operation)
        self._require_credentials(operation)

        catalog = await self._resolve_catalog(catalog)
        market = catalog.market(symbol)

        payload = self._expect_dict(
            await self._call(
                {
                    "method": side,
                    "market": market.base_id,
                    "coin": market.quote_id,
                    "amount": _plain(amount),
                    "price": _plain(price),
                },
                private=True,
                operation=operation,
            ),
            operation,
        )

        # "success" carries the new order id here
        order_id = payload.get("success")
        if order_id is None:
            raise ExchangeError(
                "order response carries no order id",
                operation=operation,
                details={"response": payload},
            )

        self._logger.log_order(
            operation="submit",
            symbol=market.symbol,
            side=side,
            amount=_plain(amount),
            price=_plain(price),
            exchange_order_id=str(order_id),
        )

        return Order(
            id=str(order_id),
            symbol=market.symbol,
            side=side,
            price=price,
            amount=amount,
            info=payload,
        )

    @_operation_scope
    async def cancel_order(
        self,
        id: str,
        symbol: str,
        catalog: CatalogSnapshot = None,
    ) -> CancelOrderResponse:
        """
        Cancel an order.

        Raises:
            OrderNotFound: id unknown for the symbol's base
        """
        operation = "cancel_order"
        self._require(operation, id=id, symbol=symbol)
        self._require_credentials(operation)

        catalog = await self._resolve_catalog(catalog)
        market = catalog.market(symbol)

        payload = await self._call(
            {"method": TUX_CANCEL_ORDER, "id": id, "market": market.base_id},
            private=True,
            operation=operation,
        )

        self._logger.log_order(
            operation="cancel",
            symbol=market.symbol,
            exchange_order_id=str(id),
        )

        return CancelOrderResponse(
            success=True,
            exchange_order_id=str(id),
            symbol=market.symbol,
            raw_response=payload,
        )

    @_operation_scope
    async def fetch_open_orders(
        self,
        symbol: str = None,
        since: int = None,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> List[Order]:
        """
        Get open orders, optionally for one symbol.

        Orders whose market is missing from the catalog are skipped.
        """
        operation = "fetch_open_orders"
        self._require_credentials(operation)
        catalog = await self._resolve_catalog(catalog)
        if symbol is not None:
            catalog.market(symbol)

        payload = self._expect_list(
            await self._call({"method": TUX_GET_OPEN_ORDERS}, private=True, operation=operation),
            operation,
        )

        orders = []
        for raw in payload:
            try:
                order = normalize_order(raw, catalog)
            except UnknownMarket:
                logger.warning(
                    f"Skipping order {raw.get('id')!r}: market {raw.get('market_pair')!r} not in catalog"
                )
                continue
            if symbol is None or order.symbol == symbol:
                orders.append(order)

        return filter_by_since_limit(orders, since, limit)

    # --------------------------------------------------------
    # ACCOUNT OPERATIONS
    # --------------------------------------------------------

    @_operation_scope
    async def fetch_balance(self, catalog: CatalogSnapshot = None) -> BalanceSheet:
        """Get balances keyed by currency code."""
        operation = "fetch_balance"
        self._require_credentials(operation)
        await self._resolve_catalog(catalog)

        payload = await self._call({"method": TUX_GET_BALANCES}, private=True, operation=operation)
        return normalize_balances(self._expect_dict(payload, operation))

    @_operation_scope
    async def fetch_my_trades(
        self,
        symbol: str = None,
        since: int = None,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> List[Trade]:
        """
        Get own trade history, ascending by timestamp.

        Records whose market is missing from the catalog are skipped.
        """
        operation = "fetch_my_trades"
        self._require_credentials(operation)
        catalog = await self._resolve_catalog(catalog)
        if symbol is not None:
            catalog.market(symbol)

        payload = self._expect_list(
            await self._call({"method": TUX_GET_MY_TRADES}, private=True, operation=operation),
            operation,
        )

        trades = []
        for raw in payload:
            market_id = f"{str(raw.get('market', '')).upper()}_{str(raw.get('coin', '')).upper()}"
            try:
                market = catalog.market_by_id(market_id)
            except UnknownMarket:
                logger.warning(f"Skipping trade {raw.get('tradeid')!r}: market {market_id!r} not in catalog")
                continue
            if symbol is None or market.symbol == symbol:
                trades.append(normalize_trade(raw, market))

        return filter_by_since_limit(sort_by_timestamp(trades), since, limit)

    # --------------------------------------------------------
    # FUNDING
    # --------------------------------------------------------

    @_operation_scope
    async def fetch_deposit_address(
        self,
        code: str,
        catalog: CatalogSnapshot = None,
    ) -> DepositAddress:
        """
        Get deposit address for currency.

        Raises:
            InvalidAddress: upstream has no usable address for the code
        """
        operation = "fetch_deposit_address"
        self._require(operation, code=code)
        self._require_credentials(operation)

        catalog = await self._resolve_catalog(catalog)

        payload = self._expect_dict(
            await self._call({"method": TUX_GET_ADDRESSES}, private=True, operation=operation),
            operation,
        )
        addresses = payload.get("addresses") or {}
        address = addresses.get(catalog.currency_id(code)) if isinstance(addresses, dict) else None

        if not isinstance(address, str) or not address.strip() or " " in address.strip():
            raise InvalidAddress(
                f"no valid deposit address for {code!r}",
                operation=operation,
                details={"code": code, "address": address},
            )

        return DepositAddress(currency=code, address=address.strip(), info=address)

    async def _fetch_transactions(
        self,
        remote_method: str,
        transaction_type: str,
        operation: str,
        code: Optional[str],
        since: Optional[int],
        limit: Optional[int],
        catalog: Optional[CatalogSnapshot],
    ) -> List[Transaction]:
        self._require_credentials(operation)
        await self._resolve_catalog(catalog)

        payload = self._expect_list(
            await self._call({"method": remote_method}, private=True, operation=operation),
            operation,
        )

        # Upstream pads the history with records that have no txid
        valid = [raw for raw in payload if isinstance(raw, dict) and raw.get("txid") is not None]
        dropped = len(payload) - len(valid)
        if dropped:
            logger.debug(f"{operation}: dropped {dropped} records without txid")

        transactions = [normalize_transaction(raw, transaction_type) for raw in valid]
        if code is not None:
            transactions = [t for t in transactions if t.currency == code]

        return filter_by_since_limit(sort_by_timestamp(transactions), since, limit)

    @_operation_scope
    async def fetch_deposits(
        self,
        code: str = None,
        since: int = None,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> List[Transaction]:
        """Get deposit history."""
        return await self._fetch_transactions(
            TUX_GET_DEPOSITS, TRANSACTION_DEPOSIT, "fetch_deposits",
            code, since, limit, catalog,
        )

    @_operation_scope
    async def fetch_withdrawals(
        self,
        code: str = None,
        since: int = None,
        limit: int = None,
        catalog: CatalogSnapshot = None,
    ) -> List[Transaction]:
        """Get withdrawal history."""
        return await self._fetch_transactions(
            TUX_GET_WITHDRAWALS, TRANSACTION_WITHDRAWAL, "fetch_withdrawals",
            code, since, limit, catalog,
        )

    @_operation_scope
    async def withdraw(
        self,
        code: str,
        amount: Any,
        address: str,
        catalog: CatalogSnapshot = None,
    ) -> WithdrawResponse:
        """
        Request a withdrawal.

        A leading "0x" is stripped from the address; upstream expects
        bare hex for such coins.

        Raises:
            WithdrawalPendingEmailConfirmation: email confirmations enabled
        """
        operation = "withdraw"
        self._require(operation, code=code, amount=amount, address=address)
        amount = self._positive_decimal(amount, "amount", operation)
        if address.startswith("0x"):
            address = address[2:]
        self._require_credentials(operation)

        catalog = await self._resolve_catalog(catalog)

        payload = await self._call(
            {
                "method": TUX_WITHDRAW,
                "coin": catalog.currency_id(code),
                "address": address,
                "amount": _plain(amount),
            },
            private=True,
            operation=operation,
        )

        return WithdrawResponse(
            currency=code,
            amount=amount,
            address=address,
            raw_response=payload,
        )
