"""
Request Signing Tests.

============================================================
PURPOSE
============================================================
Tests for public/private request building, nonce ordering and
HMAC-SHA512 signatures.

============================================================
"""

import hashlib
import hmac

import pytest

from tux_adapter import MissingCredentials, RequestSigner, TUX_API_URL


def expected_signature(secret: str, query: str) -> str:
    return hmac.new(secret.encode(), query.encode(), hashlib.sha512).hexdigest()


@pytest.fixture
def signer():
    return RequestSigner(api_key="key-123", api_secret="secret-456", clock=lambda: 1500000000.7)


# ============================================================
# PUBLIC REQUEST TESTS
# ============================================================

class TestPublicRequests:
    """Tests for unsigned requests."""

    def test_get_with_query(self, signer):
        request = signer.build({"method": "getorders", "coin": "LTC"})

        assert request.method == "GET"
        assert request.url == f"{TUX_API_URL}?method=getorders&coin=LTC"
        assert request.headers == {}
        assert request.body is None
        assert request.remote_method == "getorders"

    def test_public_call_needs_no_credentials(self):
        request = RequestSigner().build({"method": "getticker"})

        assert request.remote_method == "getticker"


# ============================================================
# PRIVATE REQUEST TESTS
# ============================================================

class TestPrivateRequests:
    """Tests for signed requests."""

    def test_post_with_nonce_and_headers(self, signer):
        request = signer.build({"method": "getmybalances"}, private=True)

        assert request.method == "POST"
        assert request.url == f"{TUX_API_URL}?method=getmybalances&nonce=1500000000"
        assert request.headers["Key"] == "key-123"

    def test_signature_covers_exact_query(self, signer):
        request = signer.build({"method": "buy", "market": "BTC", "coin": "LTC", "amount": "1.5"}, private=True)

        query = request.url.partition("?")[2]
        assert query == "method=buy&market=BTC&coin=LTC&amount=1.5&nonce=1500000000"
        assert request.headers["Sign"] == expected_signature("secret-456", query)

    def test_signature_is_lowercase_hex(self, signer):
        signature = signer.sign("nonce=1")

        assert len(signature) == 128
        assert signature == signature.lower()

    @pytest.mark.parametrize("key,secret", [(None, "s"), ("k", None), ("", "")])
    def test_missing_credentials(self, key, secret):
        signer = RequestSigner(api_key=key, api_secret=secret)

        assert signer.has_credentials is False
        with pytest.raises(MissingCredentials) as exc_info:
            signer.build({"method": "getmybalances"}, private=True)

        assert exc_info.value.operation == "getmybalances"


# ============================================================
# NONCE TESTS
# ============================================================

class TestNonce:
    """Tests for nonce ordering."""

    def test_seconds_since_epoch(self, signer):
        assert signer.nonce() == 1500000000

    def test_strictly_increasing_within_one_second(self, signer):
        nonces = [signer.nonce() for _ in range(5)]

        assert nonces == sorted(set(nonces))
        assert nonces[-1] == 1500000004

    def test_follows_clock_when_it_advances(self):
        now = [100.0]
        signer = RequestSigner(api_key="k", api_secret="s", clock=lambda: now[0])

        assert signer.nonce() == 100
        now[0] = 200.0
        assert signer.nonce() == 200

    def test_clock_going_backwards(self):
        now = [200.0]
        signer = RequestSigner(api_key="k", api_secret="s", clock=lambda: now[0])

        signer.nonce()
        now[0] = 150.0
        assert signer.nonce() == 201
