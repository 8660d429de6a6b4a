"""
Tux Exchange Adapter - Secure Logging Utilities.

============================================================
PURPOSE
============================================================
Structured request/response/order logging with credential
masking.

SECURITY REQUIREMENTS:
1. NEVER log raw API keys, secrets or signatures
2. Mask the Key and Sign headers
3. Log a hash of request bodies, not the body

============================================================
"""

import hashlib
import json
import logging
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .types import EXCHANGE_ID


logger = logging.getLogger(__name__)


# ============================================================
# SENSITIVE DATA PATTERNS
# ============================================================

SENSITIVE_HEADERS = {
    "key",
    "sign",
    "authorization",
}

SENSITIVE_PARAMS = {
    "key",
    "apikey",
    "api_key",
    "secret",
    "api_secret",
    "sign",
    "signature",
}

# Hex digests (HMAC-SHA512 is 128 chars)
_HEX_DIGEST = re.compile(r"\b[a-f0-9]{64,}\b", re.IGNORECASE)


# ============================================================
# MASKING FUNCTIONS
# ============================================================

def mask_value(value: str, show_chars: int = 4) -> str:
    """
    Mask a sensitive value, showing only first few chars.

    Args:
        value: Value to mask
        show_chars: Number of chars to show at start

    Returns:
        Masked value
    """
    if not value or len(value) <= show_chars:
        return "***"
    return f"{value[:show_chars]}...***"


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Mask sensitive headers."""
    if not headers:
        return {}
    return {
        key: mask_value(str(value)) if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def mask_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive parameters, recursing into nested dicts."""
    if not params:
        return {}

    masked = {}
    for key, value in params.items():
        if key.lower() in SENSITIVE_PARAMS:
            masked[key] = mask_value(str(value)) if value else value
        elif isinstance(value, dict):
            masked[key] = mask_params(value)
        elif isinstance(value, str):
            masked[key] = _HEX_DIGEST.sub("***HMAC***", value)
        else:
            masked[key] = value
    return masked


def mask_url(url: str) -> str:
    """Mask sensitive query parameters in a URL."""
    if not url:
        return url
    for param in SENSITIVE_PARAMS:
        pattern = re.compile(f"([?&]{param}=)([^&]+)", re.IGNORECASE)
        url = pattern.sub(lambda m: f"{m.group(1)}***", url)
    return url


# ============================================================
# LOG ENTRY STRUCTURES
# ============================================================

def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RequestLogEntry:
    """Structured log entry for requests."""

    timestamp: str
    exchange_id: str
    operation: str
    method: str
    url: str
    request_id: str
    headers: Dict[str, str] = None
    body_hash: str = None

    def to_json(self) -> str:
        return json.dumps({k: v for k, v in asdict(self).items() if v is not None})


@dataclass
class ResponseLogEntry:
    """Structured log entry for responses."""

    timestamp: str
    exchange_id: str
    operation: str
    request_id: str
    status_code: Optional[int]
    latency_ms: float
    success: bool
    error_type: str = None
    error_message: str = None
    response_preview: str = None

    def to_json(self) -> str:
        return json.dumps({k: v for k, v in asdict(self).items() if v is not None})


# ============================================================
# ADAPTER LOGGER
# ============================================================

class AdapterLogger:
    """
    Secure logger for adapter operations.

    Request/response entries go out at DEBUG, failures at WARNING.
    """

    def __init__(self, exchange_id: str = EXCHANGE_ID, logger_name: str = None):
        self._exchange_id = exchange_id
        self._logger = logging.getLogger(logger_name or f"exchange_adapter.{exchange_id}")
        self._request_counter = 0

    def _generate_request_id(self) -> str:
        self._request_counter += 1
        return f"{self._exchange_id}-{self._request_counter}"

    @staticmethod
    def _hash_body(body: Any) -> Optional[str]:
        if not body:
            return None
        return hashlib.sha256(str(body).encode()).hexdigest()[:16]

    def log_request(
        self,
        operation: str,
        method: str,
        url: str,
        headers: Dict[str, str] = None,
        body: Any = None,
    ) -> str:
        """
        Log outgoing request.

        Returns:
            Request ID for correlation
        """
        request_id = self._generate_request_id()

        entry = RequestLogEntry(
            timestamp=_utc_now(),
            exchange_id=self._exchange_id,
            operation=operation,
            method=method,
            url=mask_url(url),
            request_id=request_id,
            headers=mask_headers(headers) if headers else None,
            body_hash=self._hash_body(body),
        )

        self._logger.debug(f"REQUEST: {entry.to_json()}")
        return request_id

    def log_response(
        self,
        operation: str,
        request_id: str,
        status_code: Optional[int],
        latency_ms: float,
        success: bool,
        error_type: str = None,
        error_message: str = None,
        response_body: str = None,
    ) -> None:
        """Log incoming response (body truncated to a preview)."""
        entry = ResponseLogEntry(
            timestamp=_utc_now(),
            exchange_id=self._exchange_id,
            operation=operation,
            request_id=request_id,
            status_code=status_code,
            latency_ms=round(latency_ms, 3),
            success=success,
            error_type=error_type,
            error_message=error_message[:200] if error_message else None,
            response_preview=response_body[:200] if response_body else None,
        )

        if success:
            self._logger.debug(f"RESPONSE: {entry.to_json()}")
        else:
            self._logger.warning(f"RESPONSE_ERROR: {entry.to_json()}")

    def log_order(
        self,
        operation: str,
        symbol: str,
        side: str = None,
        amount: str = None,
        price: str = None,
        exchange_order_id: str = None,
    ) -> None:
        """Log order placement or cancellation."""
        fields = {
            "exchange_id": self._exchange_id,
            "operation": operation,
            "symbol": symbol,
            "side": side,
            "amount": amount,
            "price": price,
            "exchange_order_id": exchange_order_id,
        }
        self._logger.info(f"ORDER: {json.dumps({k: v for k, v in fields.items() if v is not None})}")

    def info(self, message: str) -> None:
        self._logger.info(f"[{self._exchange_id}] {message}")

