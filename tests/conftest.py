"""
Pytest configuration and fixtures for barkpush tests.

Provides signing keys, client configuration and a recording mock
transport standing in for APNs.
"""

from typing import Callable

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from barkpush.config import BarkConfig


# ============================================================================
# Key Fixtures
# ============================================================================


def _pem(key) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_private_pem(ec_private_key) -> str:
    """PKCS8 PEM like the .p8 files Apple hands out."""
    return _pem(ec_private_key)


@pytest.fixture(scope="session")
def rsa_private_pem() -> str:
    return _pem(rsa.generate_private_key(public_exponent=65537, key_size=2048))


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def bark_config(ec_private_pem) -> BarkConfig:
    return BarkConfig(
        team_id="TEAM123456",
        auth_key_id="KEY1234567",
        private_key=ec_private_pem,
        topic="me.fin.bark",
    )


class FakeClock:
    """Settable replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Transport Fixtures
# ============================================================================


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Build a recording transport from a per-device response table.

    Devices missing from the table answer 200 with an empty body.
    """

    def factory(responses: dict = None) -> RecordingTransport:
        responses = responses or {}

        def handler(request: httpx.Request) -> httpx.Response:
            device = request.url.path.rsplit("/", 1)[-1]
            response = responses.get(device)
            if isinstance(response, Exception):
                raise response
            if callable(response):
                return response(request)
            if response is None:
                return httpx.Response(200)
            return response

        return RecordingTransport(handler)

    return factory
