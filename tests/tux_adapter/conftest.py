"""
Shared fixtures for Tux adapter tests.

FakeTransport stands in for HttpTransport: it records every
SignedRequest and answers from canned (status, body) pairs keyed
by remote method.
"""

import json
from typing import Any, Dict, List

import pytest

from tux_adapter import AdapterConfig, CatalogSnapshot, TuxExchangeAdapter


FIXED_NOW = 1500000000.0
"""2017-07-14 02:40:00 UTC."""

FIXED_DATE = "2017-07-14 02:40:00"


TICKERS_RAW = {
    "BTC_LTC": {
        "id": 1,
        "last": "0.0125",
        "lowestAsk": "0.0126",
        "highestBid": "0.0124",
        "percentChange": "1.5",
        "baseVolume": "12.5",
        "quoteVolume": "1000",
        "isFrozen": "0",
        "high24hr": "0.013",
        "low24hr": "0.012",
    },
    "BTC_ETH": {
        "id": 2,
        "last": "0.07",
        "lowestAsk": "0.071",
        "highestBid": "0.069",
        "percentChange": "-0.5",
        "baseVolume": "40",
        "quoteVolume": "570",
        "isFrozen": 1,
        "high24hr": "0.072",
        "low24hr": "0.068",
    },
}

COINS_RAW = {
    "LTC": {
        "name": "Litecoin",
        "withdrawfee": "0.01",
        "makerfee": "0.1",
        "takerfee": "0.2",
    },
    "ETH": {
        "name": "Ethereum",
        "withdrawfee": "0.005",
        "makerfee": "0.15",
        "takerfee": "0.25",
    },
}


def dump(payload: Any) -> str:
    return json.dumps(payload)


class FakeTransport:
    """Records requests and replays canned responses."""

    def __init__(self, responses: Dict[str, Any] = None):
        self.responses: Dict[str, Any] = dict(responses or {})
        self.requests: List[Any] = []
        self.connected = False
        self.closed = False

    def respond(self, remote_method: str, payload: Any, status: int = 200) -> None:
        """Queue a JSON payload (or raw text when given a str)."""
        body = payload if isinstance(payload, str) else dump(payload)
        self.responses[remote_method] = (status, body)

    def fail(self, remote_method: str, error: Exception) -> None:
        self.responses[remote_method] = error

    @property
    def remote_methods(self) -> List[str]:
        return [r.remote_method for r in self.requests]

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.closed = True

    async def get(self, request):
        return self._answer(request)

    async def post(self, request):
        return self._answer(request)

    def _answer(self, request):
        self.requests.append(request)
        response = self.responses[request.remote_method]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> FakeTransport:
    fake = FakeTransport()
    fake.respond("getticker", TICKERS_RAW)
    fake.respond("getcoins", COINS_RAW)
    return fake


@pytest.fixture
def adapter(transport) -> TuxExchangeAdapter:
    return TuxExchangeAdapter(
        api_key="test-key",
        api_secret="test-secret",
        config=AdapterConfig(),
        transport=transport,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def public_adapter(transport) -> TuxExchangeAdapter:
    """Adapter without credentials."""
    return TuxExchangeAdapter(
        config=AdapterConfig(),
        transport=transport,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def catalog() -> CatalogSnapshot:
    return CatalogSnapshot.build(TICKERS_RAW, COINS_RAW, loaded_at=int(FIXED_NOW * 1000))
