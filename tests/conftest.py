"""Shared test fixtures for py-microstellar test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

import httpx
import pytest
from stellar_sdk import Keypair, Network, TransactionEnvelope
from stellar_sdk.exceptions import BadSignatureError

from microstellar.assets import Asset
from microstellar.client import StellarClient
from microstellar.horizon.client import HorizonClient

if TYPE_CHECKING:
    from collections.abc import Iterator

HORIZON_URL = "https://horizon.test"
PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE


class FakeHorizon:
    """Minimal Horizon stand-in for ``httpx.MockTransport``.

    Records every submitted envelope and every request so tests can assert
    on what did (and did not) reach the network.
    """

    def __init__(self) -> None:
        self.sequence = 100
        self.path_records: list[dict[str, Any]] = []
        self.paths_status = 200
        self.submit_status = 200
        self.submit_body: dict[str, Any] | None = None
        self.submitted: list[str] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "GET" and path.startswith("/accounts/"):
            address = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json=account_json(address, sequence=self.sequence))

        if request.method == "GET" and path == "/paths/strict-receive":
            if self.paths_status != 200:
                return httpx.Response(self.paths_status, json={"title": "Internal Server Error"})
            return httpx.Response(200, json={"_embedded": {"records": self.path_records}})

        if request.method == "POST" and path == "/transactions":
            form = parse_qs(request.content.decode())
            envelope_xdr = form["tx"][0]
            self.submitted.append(envelope_xdr)
            body = self.submit_body or {
                "hash": "ab" * 32,
                "ledger": 4242,
                "envelope_xdr": envelope_xdr,
                "result_xdr": "AAAAAAAAAGQAAAAAAAAAAQAAAAAAAAABAAAAAAAAAAA=",
                "successful": True,
            }
            return httpx.Response(self.submit_status, json=body)

        return httpx.Response(404, json={"title": "Resource Missing", "status": 404})

    @property
    def envelopes(self) -> list[TransactionEnvelope]:
        """Submitted envelopes, decoded."""
        return [decode(xdr) for xdr in self.submitted]

    @property
    def path_queries(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/paths/strict-receive"]


def account_json(address: str, *, sequence: int = 100) -> dict[str, Any]:
    """A Horizon ``/accounts/{id}`` body with a native balance and master signer."""
    return {
        "id": address,
        "account_id": address,
        "sequence": str(sequence),
        "balances": [{"balance": "100.0000000", "asset_type": "native"}],
        "signers": [{"key": address, "weight": 1, "type": "ed25519_public_key"}],
        "thresholds": {"low_threshold": 0, "med_threshold": 0, "high_threshold": 0},
        "flags": {"auth_required": False, "auth_revocable": False, "auth_immutable": False},
        "data": {},
    }


def decode(envelope_xdr: str) -> TransactionEnvelope:
    return TransactionEnvelope.from_xdr(envelope_xdr, PASSPHRASE)


def signed_by(envelope: TransactionEnvelope, keypair: Keypair) -> bool:
    """Check whether *keypair* produced one of the envelope's signatures."""
    tx_hash = envelope.hash()
    for sig in envelope.signatures:
        if sig.signature_hint != keypair.signature_hint():
            continue
        try:
            keypair.verify(tx_hash, sig.signature)
        except BadSignatureError:
            continue
        return True
    return False


@pytest.fixture(name="signed_by")
def signed_by_fixture():
    return signed_by


@pytest.fixture(name="decode")
def decode_fixture():
    return decode


@pytest.fixture
def funder() -> Keypair:
    return Keypair.random()


@pytest.fixture
def alice() -> Keypair:
    return Keypair.random()


@pytest.fixture
def bob() -> Keypair:
    return Keypair.random()


@pytest.fixture
def issuer() -> Keypair:
    return Keypair.random()


@pytest.fixture
def usd(issuer: Keypair) -> Asset:
    return Asset.credit("USD", issuer.public_key)


@pytest.fixture
def eur(issuer: Keypair) -> Asset:
    return Asset.credit("EUR", issuer.public_key)


@pytest.fixture
def fake_horizon() -> FakeHorizon:
    return FakeHorizon()


@pytest.fixture
def horizon(fake_horizon: FakeHorizon) -> HorizonClient:
    return HorizonClient(HORIZON_URL, transport=httpx.MockTransport(fake_horizon))


@pytest.fixture
def client(horizon: HorizonClient) -> Iterator[StellarClient]:
    """A client on a custom network backed by :class:`FakeHorizon`."""
    c = StellarClient("custom", url=HORIZON_URL, passphrase=PASSPHRASE, horizon=horizon)
    yield c
    c.close()


@pytest.fixture
def sim_client() -> Iterator[StellarClient]:
    """A client on the simulated network."""
    c = StellarClient("simulated")
    yield c
    c.close()
