"""
Tux Exchange Adapter - HTTP Transport.

============================================================
PURPOSE
============================================================
Thin aiohttp transport returning (status, body text).

The URL goes out byte for byte as signed; yarl must not
re-quote it.

No retries, no rate limiting. Network failures and timeouts
surface as ExchangeTransportError, never as raw aiohttp
exceptions.

============================================================
"""

import asyncio
import logging
from typing import Optional, Tuple

import aiohttp
from yarl import URL

from .errors import ExchangeTransportError
from .signer import SignedRequest
from .types import EXCHANGE_ID


logger = logging.getLogger(__name__)


class HttpTransport:
    """aiohttp-backed transport."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        exchange_id: str = EXCHANGE_ID,
    ):
        """
        Args:
            timeout_seconds: Total request timeout
            session: Externally owned session (not closed by close())
            exchange_id: Exchange identifier for error context
        """
        self._timeout = timeout_seconds
        self._session = session
        self._owns_session = session is None
        self._exchange_id = exchange_id

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._session.closed

    async def connect(self) -> None:
        """Create the session if needed."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def get(self, request: SignedRequest) -> Tuple[int, str]:
        return await self._send("GET", request)

    async def post(self, request: SignedRequest) -> Tuple[int, str]:
        return await self._send("POST", request)

    async def _send(self, method: str, request: SignedRequest) -> Tuple[int, str]:
        await self.connect()
        try:
            async with self._session.request(
                method,
                URL(request.url, encoded=True),
                headers=request.headers or None,
                data=request.body,
            ) as resp:
                return resp.status, await resp.text()
        except asyncio.TimeoutError as e:
            raise ExchangeTransportError(
                f"request timed out after {self._timeout}s",
                exchange_id=self._exchange_id,
                operation=request.remote_method,
            ) from e
        except aiohttp.ClientError as e:
            raise ExchangeTransportError(
                f"network error: {e}",
                exchange_id=self._exchange_id,
                operation=request.remote_method,
            ) from e
