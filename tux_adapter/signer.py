"""
Tux Exchange Adapter - Request Signing.

============================================================
PURPOSE
============================================================
Builds the outbound request descriptor for public and private
calls.

SIGNING SCHEME:
- Single endpoint, remote operation selected by the "method"
  query parameter
- Private calls append "&nonce=<seconds since epoch>" to the
  url-encoded query string
- Sign = hex(HMAC-SHA512(secret, query string incl. nonce))
- Key and Sign travel as headers

The signature covers the exact query string placed in the URL.
Re-encoding the parameters after signing (ordering, escaping)
invalidates it upstream.

============================================================
"""

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Callable
from urllib.parse import urlencode

from .errors import MissingCredentials
from .types import EXCHANGE_ID


logger = logging.getLogger(__name__)


TUX_API_URL = "https://www.tuxexchange.com/api"


@dataclass(frozen=True)
class SignedRequest:
    """Outbound request descriptor."""

    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    @property
    def remote_method(self) -> Optional[str]:
        """Value of the "method" query parameter."""
        _, _, query = self.url.partition("?")
        for pair in query.split("&"):
            key, _, value = pair.partition("=")
            if key == "method":
                return value
        return None


class RequestSigner:
    """
    Builds public and signed private requests.

    Nonces are seconds since epoch and strictly increasing for the
    lifetime of one signer, even when two calls share a second.
    """

    def __init__(
        self,
        base_url: str = TUX_API_URL,
        api_key: str = None,
        api_secret: str = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            base_url: API endpoint
            api_key: Tux API key
            api_secret: Tux API secret
            clock: Seconds-since-epoch source
        """
        self._base_url = base_url
        self._api_key = api_key
        self._api_secret = api_secret
        self._clock = clock
        self._last_nonce = 0

    @property
    def has_credentials(self) -> bool:
        """Whether key and secret are configured."""
        return bool(self._api_key and self._api_secret)

    def nonce(self) -> int:
        """Next nonce."""
        candidate = int(self._clock())
        if candidate <= self._last_nonce:
            candidate = self._last_nonce + 1
        self._last_nonce = candidate
        return candidate

    def sign(self, payload: str) -> str:
        """Lower-case hex HMAC-SHA512 of payload."""
        return hmac.new(
            self._api_secret.encode(),
            payload.encode(),
            hashlib.sha512,
        ).hexdigest()

    def build(
        self,
        params: Dict[str, Any] = None,
        private: bool = False,
    ) -> SignedRequest:
        """
        Build request descriptor.

        Args:
            params: Query parameters (must include "method")
            private: Sign the request

        Returns:
            SignedRequest

        Raises:
            MissingCredentials: private call without key/secret
        """
        params = params or {}
        query = urlencode(params)

        if not private:
            url = f"{self._base_url}?{query}" if query else self._base_url
            return SignedRequest(url=url, method="GET")

        if not self.has_credentials:
            raise MissingCredentials(
                "private call requires api_key and api_secret",
                exchange_id=EXCHANGE_ID,
                operation=params.get("method"),
            )

        nonce = self.nonce()
        query = f"{query}&nonce={nonce}" if query else f"nonce={nonce}"

        headers = {
            "Key": self._api_key,
            "Sign": self.sign(query),
        }

        return SignedRequest(
            url=f"{self._base_url}?{query}",
            method="POST",
            headers=headers,
        )
