"""Tests for StellarClient construction, accounts, federation and error tracking."""

from __future__ import annotations

import httpx
import pytest
from stellar_sdk import Network

from microstellar.client import StellarClient
from microstellar.config.network import CustomNetwork, PresetNetwork, SimulatedNetwork
from microstellar.config.settings import ClientSettings
from microstellar.errors.network_errors import FederationError, HorizonError, TransportError
from microstellar.errors.stellar_errors import ValidationError
from microstellar.federation.client import FederationClient
from microstellar.horizon.client import HorizonClient
from microstellar.keys import valid_address, valid_seed

# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestClientConstruction:
    def test_default_is_testnet(self):
        with StellarClient() as client:
            assert isinstance(client.network, PresetNetwork)
            assert client.network.name == "test"

    def test_simulated(self, sim_client):
        assert isinstance(sim_client.network, SimulatedNetwork)

    def test_simulated_ignores_injected_horizon(self, fake_horizon, horizon, funder, alice):
        with StellarClient("fake", horizon=horizon) as client:
            client.fund_account(funder.secret, alice.public_key, "10")
        assert fake_horizon.requests == []

    def test_custom(self):
        client = StellarClient("custom", url="https://h.example.com", passphrase="private")
        assert isinstance(client.network, CustomNetwork)
        client.close()

    def test_custom_requires_parameters(self):
        with pytest.raises(ValidationError, match="url and passphrase"):
            StellarClient("custom", url="https://h.example.com")

    def test_unknown_network(self):
        with pytest.raises(ValidationError, match="unknown network"):
            StellarClient("mainnet")

    def test_from_spec(self):
        with StellarClient.from_spec("custom;https://h.example.com;private") as client:
            assert client.network.url == "https://h.example.com"
            assert client.network.passphrase == "private"

    def test_from_settings(self, funder, alice, decode):
        settings = ClientSettings(network="simulated", base_fee=300)
        with StellarClient.from_settings(settings) as client:
            response = client.pay_native(funder.secret, alice.public_key, "1")
        assert decode(response.envelope_xdr).transaction.fee == 300

    def test_close_disconnects(self, horizon):
        client = StellarClient(
            "custom",
            url="https://horizon.test",
            passphrase=Network.TESTNET_NETWORK_PASSPHRASE,
            horizon=horizon,
        )
        assert horizon.is_connected
        client.close()
        assert not horizon.is_connected


# ---------------------------------------------------------------------------
# Keys and accounts
# ---------------------------------------------------------------------------


class TestKeysAndAccounts:
    def test_create_key_pair(self, sim_client):
        pair = sim_client.create_key_pair()
        assert valid_address(pair.address)
        assert valid_seed(pair.seed)

    def test_load_account(self, client, funder):
        account = client.load_account(funder.secret)
        assert account.address == funder.public_key
        assert account.sequence == 100
        assert account.get_native_balance() == "100.0000000"

    def test_load_account_simulated(self, sim_client, funder):
        account = sim_client.load_account(funder.public_key)
        assert account.address == funder.public_key
        assert account.balances == []

    def test_load_account_invalid(self, client, fake_horizon):
        with pytest.raises(ValidationError):
            client.load_account("GNOPE")
        assert fake_horizon.requests == []

    def test_load_account_not_found(self, funder):
        def handler(request: httpx.Request):
            return httpx.Response(404, json={"title": "Resource Missing", "status": 404})

        horizon = HorizonClient("https://horizon.test", transport=httpx.MockTransport(handler))
        with StellarClient(
            "custom", url="https://horizon.test", passphrase="p", horizon=horizon
        ) as client, pytest.raises(HorizonError, match="^could not load account") as exc_info:
            client.load_account(funder.public_key)
        assert exc_info.value.status_code == 404

    def test_load_account_transport_error(self, funder):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("down", request=request)

        horizon = HorizonClient("https://horizon.test", transport=httpx.MockTransport(handler))
        with StellarClient(
            "custom", url="https://horizon.test", passphrase="p", horizon=horizon
        ) as client, pytest.raises(TransportError):
            client.load_account(funder.public_key)


# ---------------------------------------------------------------------------
# Federation
# ---------------------------------------------------------------------------


class TestResolve:
    @pytest.fixture
    def fed_client(self, bob):
        def handler(request: httpx.Request):
            if request.url.path == "/.well-known/stellar.toml":
                return httpx.Response(
                    200, text='FEDERATION_SERVER = "https://fed.example.com/federation"\n'
                )
            if request.url.params["q"] == "bob*example.com":
                return httpx.Response(200, json={"account_id": bob.public_key})
            if request.url.params["q"] == "html*example.com":
                return httpx.Response(200, text="<html>oops</html>")
            return httpx.Response(404)

        federation = FederationClient(transport=httpx.MockTransport(handler))
        with StellarClient("simulated", federation=federation) as client:
            yield client

    def test_resolve(self, fed_client, bob):
        assert fed_client.resolve("bob*example.com") == bob.public_key

    def test_not_federated(self, fed_client, bob):
        with pytest.raises(ValidationError, match="not a federation address"):
            fed_client.resolve(bob.public_key)

    def test_unknown(self, fed_client):
        with pytest.raises(FederationError, match="^resolve error: federation address not found"):
            fed_client.resolve("carol*example.com")

    def test_malformed_reply_is_tracked(self, fed_client):
        pattern = "^resolve error: malformed federation reply"
        with pytest.raises(FederationError, match=pattern) as exc_info:
            fed_client.resolve("html*example.com")
        assert fed_client.last_error is exc_info.value


# ---------------------------------------------------------------------------
# Error tracking
# ---------------------------------------------------------------------------


class TestLastError:
    def test_cleared_by_success(self, sim_client, funder, alice):
        with pytest.raises(ValidationError):
            sim_client.pay_native(funder.secret, alice.public_key, "0")
        assert isinstance(sim_client.last_error, ValidationError)
        assert sim_client.err() is sim_client.last_error

        sim_client.pay_native(funder.secret, alice.public_key, "1")
        assert sim_client.last_error is None
        assert sim_client.err() is None

    def test_last_tx(self, sim_client, funder, alice):
        assert sim_client.last_tx is None
        assert sim_client.response is None
        sim_client.pay_native(funder.secret, alice.public_key, "1")
        assert sim_client.last_tx.closed
        assert sim_client.response is sim_client.last_tx.response


# ---------------------------------------------------------------------------
# Simulated network
# ---------------------------------------------------------------------------


class TestSimulatedNetwork:
    def test_fund_account(self, sim_client, funder, alice, decode, signed_by):
        response = sim_client.fund_account(funder.secret, alice.public_key, "10")
        assert response.simulated
        assert response.ledger == 0
        env = decode(response.envelope_xdr)
        assert response.hash == env.hash_hex()
        assert env.transaction.sequence == 1
        assert signed_by(env, funder)

        account = sim_client.load_account(alice.secret)
        assert account.address == alice.public_key
        assert account.get_native_balance() == "0.0000000"
