"""
Tux Exchange Adapter - Error Handling and Classification.

============================================================
PURPOSE
============================================================
Unified error taxonomy for the adapter and the classifier
that turns raw Tux responses into it.

ERROR CATEGORIES:
1. ARGUMENT        - Caller misuse, raised before any network call
2. UNSUPPORTED     - Upstream cannot satisfy the request as shaped
3. CREDENTIALS     - Private call without key/secret
4. NORMALIZATION   - Payload could not be mapped to a unified record
5. AUTHENTICATION  - Key or signature rejected
6. INSUFFICIENT    - Not enough funds
7. ORDER_NOT_FOUND - Unknown order id
8. TRANSPORT       - Non-2xx status or network failure
9. EXCHANGE_ERROR  - Any other upstream failure

============================================================
UPSTREAM ERROR ENVELOPE
============================================================
Tux always answers 200. Failures are bodies of the form
{"success": 0, "error": "<free text>"}; the phrases are not
enumerated upstream and are matched literally.

============================================================
"""

import json
import logging
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any, Tuple, Type

from .types import EXCHANGE_ID


logger = logging.getLogger(__name__)


# ============================================================
# ERROR TAXONOMY
# ============================================================

class ErrorCategory(Enum):
    """Standardized error categories."""

    ARGUMENT = "ARGUMENT"
    UNSUPPORTED = "UNSUPPORTED"
    CREDENTIALS = "CREDENTIALS"
    NORMALIZATION = "NORMALIZATION"
    AUTHENTICATION = "AUTHENTICATION"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    WITHDRAWAL_PENDING = "WITHDRAWAL_PENDING"
    TRANSPORT = "TRANSPORT"
    EXCHANGE_ERROR = "EXCHANGE_ERROR"


class AdapterError(Exception):
    """
    Base class for every error the adapter raises.

    The message is always prefixed with the exchange id so failures
    are identifiable without the raw payload.
    """

    category = ErrorCategory.EXCHANGE_ERROR

    def __init__(
        self,
        message: str,
        exchange_id: str = EXCHANGE_ID,
        operation: str = None,
        details: Dict[str, Any] = None,
    ):
        self.message = message
        self.exchange_id = exchange_id
        self.operation = operation
        self.details = details or {}
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = self.exchange_id
        if self.operation:
            prefix = f"{prefix} {self.operation}()"
        text = f"{prefix}: {self.message}"
        if self.details:
            text = f"{text} | Details: {self.details}"
        return text

    def with_operation(self, operation: str) -> "AdapterError":
        """
        Attach the operation to an error raised without one.

        Normalizer and catalog helpers do not know which operation
        called them; the adapter fills it in on the way out.
        """
        if self.operation is None:
            self.operation = operation
            self.args = (self._format(),)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
            "exchange_id": self.exchange_id,
            "operation": self.operation,
            "details": self.details,
        }


class ArgumentError(AdapterError):
    """Required argument missing or invalid."""

    category = ErrorCategory.ARGUMENT


class MissingCredentials(AdapterError):
    """Private call attempted without API key/secret."""

    category = ErrorCategory.CREDENTIALS


class UnsupportedOperation(AdapterError):
    """Upstream has no way to serve the request."""

    category = ErrorCategory.UNSUPPORTED


class UnsupportedParameter(UnsupportedOperation):
    """Request shaped with a parameter upstream ignores or rejects."""


class UnsupportedMarket(UnsupportedOperation):
    """Market outside the ones the endpoint serves."""


class NormalizationError(AdapterError):
    """Raw payload could not be mapped to a unified record."""

    category = ErrorCategory.NORMALIZATION


class MalformedTimestamp(NormalizationError):
    """Date field missing or unparseable."""


class UnknownMarket(NormalizationError):
    """Market id or symbol absent from the catalog."""


class InconsistentData(NormalizationError):
    """Payload values contradict each other (e.g. filled > amount)."""


class ExchangeError(AdapterError):
    """Generic upstream failure carrying the raw message."""

    category = ErrorCategory.EXCHANGE_ERROR


class AuthenticationError(ExchangeError):
    """Key or signature rejected."""

    category = ErrorCategory.AUTHENTICATION


class InsufficientFunds(ExchangeError):
    """Balance too low for the request."""

    category = ErrorCategory.INSUFFICIENT_FUNDS


class OrderNotFound(ExchangeError):
    """Order id unknown to upstream."""

    category = ErrorCategory.ORDER_NOT_FOUND


class InvalidAddress(ExchangeError):
    """Upstream returned no usable address."""

    category = ErrorCategory.INVALID_ADDRESS


class WithdrawalPendingEmailConfirmation(ExchangeError):
    """
    Withdrawal accepted but parked until confirmed by email.

    API withdrawals keep failing this way until email confirmations are
    disabled in the Tux UI under "Notifications".
    """

    category = ErrorCategory.WITHDRAWAL_PENDING


class ExchangeTransportError(ExchangeError):
    """Non-2xx response or network failure (status_code is None then)."""

    category = ErrorCategory.TRANSPORT

    def __init__(
        self,
        message: str,
        status_code: int = None,
        exchange_id: str = EXCHANGE_ID,
        operation: str = None,
        details: Dict[str, Any] = None,
    ):
        self.status_code = status_code
        super().__init__(message, exchange_id, operation, details)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


# ============================================================
# TUX ERROR MAPPING
# ============================================================

# Exact upstream phrase -> (error class, message override or None for raw)
TUX_ERROR_MAP: Dict[str, Tuple[Type[ExchangeError], Optional[str]]] = {
    # Authentication
    "Authentication failed.": (AuthenticationError, None),
    "Invalid public key.": (AuthenticationError, None),

    # Orders
    "Order not found.": (
        OrderNotFound,
        "no order found. Check that the order id and the base currency "
        "of the symbol are correct",
    ),

    # Funds (the misspelling is upstream's)
    "Inssuficient funds.": (InsufficientFunds, "insufficient funds"),
    "NSF.": (InsufficientFunds, "insufficient funds"),

    # Withdrawals
    "A request to withdraw has been made. Please check your email to "
    "complete this request.": (
        WithdrawalPendingEmailConfirmation,
        "withdraw requests via the api will fail unless email "
        "confirmations are disabled in the UI under \"Notifications\"",
    ),
}


def map_tux_error(
    error_message: Any,
    exchange_id: str = EXCHANGE_ID,
    operation: str = None,
) -> ExchangeError:
    """
    Map a Tux error phrase to an exception instance.

    Unrecognized phrases map to the generic ExchangeError.

    Args:
        error_message: Value of the "error" field
        exchange_id: Exchange identifier
        operation: Operation that produced the error

    Returns:
        Exception instance (not raised)
    """
    phrase = error_message if isinstance(error_message, str) else str(error_message)
    details = {"upstream_error": phrase}

    if phrase in TUX_ERROR_MAP:
        error_class, message = TUX_ERROR_MAP[phrase]
        return error_class(
            message or phrase,
            exchange_id=exchange_id,
            operation=operation,
            details=details,
        )

    return ExchangeError(
        phrase,
        exchange_id=exchange_id,
        operation=operation,
        details=details,
    )


# ============================================================
# RESPONSE CLASSIFIER
# ============================================================

def _is_error_envelope(payload: Any) -> bool:
    """Check for {"success": 0, ...}; JSON booleans do not count."""
    if not isinstance(payload, dict):
        return False
    success = payload.get("success")
    return (
        isinstance(success, (int, Decimal))
        and not isinstance(success, bool)
        and success == 0
    )


def classify_response(
    status: int,
    body: Optional[str],
    exchange_id: str = EXCHANGE_ID,
    operation: str = None,
) -> Any:
    """
    Classify a raw HTTP response.

    Args:
        status: HTTP status code
        body: Raw response text
        exchange_id: Exchange identifier
        operation: Operation name, for error context

    Returns:
        Decoded JSON payload (floats as Decimal), or None for bodies that
        are not a JSON object/array

    Raises:
        ExchangeTransportError: status >= 400
        ExchangeError: error envelope, or a subclass from TUX_ERROR_MAP
    """
    if status >= 400:
        raise ExchangeTransportError(
            f"unexpected exchange error with code: {status}",
            status_code=status,
            exchange_id=exchange_id,
            operation=operation,
        )

    text = body.strip() if isinstance(body, str) else ""
    if len(text) < 2 or text[0] not in "{[":
        # Void calls sometimes come back empty
        return None

    try:
        payload = json.loads(text, parse_float=Decimal)
    except ValueError as e:
        raise ExchangeError(
            f"malformed response: {e}",
            exchange_id=exchange_id,
            operation=operation,
            details={"body_preview": text[:200]},
        ) from e

    if _is_error_envelope(payload):
        error = map_tux_error(payload.get("error"), exchange_id, operation)
        logger.debug(f"Classified {type(error).__name__} for {operation}: {error.message}")
        raise error

    return payload
