"""Tests for single-operation client calls — one signed envelope per call."""

from __future__ import annotations

from decimal import Decimal

import pytest
from stellar_sdk import Asset as SdkAsset
from stellar_sdk import (
    ChangeTrust,
    CreateAccount,
    ManageData,
    Payment,
    SetOptions,
    SetTrustLineFlags,
)
from stellar_sdk.operation.set_trust_line_flags import TrustLineFlags

from microstellar.account import AccountFlags
from microstellar.assets import NATIVE_ASSET, Asset
from microstellar.errors.stellar_errors import SigningError, ValidationError
from microstellar.options import Options


def _only_op(fake_horizon):
    (env,) = fake_horizon.envelopes
    (op,) = env.transaction.operations
    return op


# ---------------------------------------------------------------------------
# Accounts and payments
# ---------------------------------------------------------------------------


class TestFundAndPay:
    def test_fund_account(self, client, fake_horizon, funder, alice, signed_by):
        response = client.fund_account(funder.secret, alice.secret, "10")

        assert response.ledger == 4242
        op = _only_op(fake_horizon)
        assert isinstance(op, CreateAccount)
        assert op.destination == alice.public_key
        assert Decimal(op.starting_balance) == Decimal("10")
        assert signed_by(fake_horizon.envelopes[0], funder)

    def test_pay_native(self, client, fake_horizon, funder, bob, signed_by):
        response = client.pay_native(funder.secret, bob.public_key, "2.5")

        assert client.response is response
        assert client.last_error is None
        op = _only_op(fake_horizon)
        assert isinstance(op, Payment)
        assert op.destination.account_id == bob.public_key
        assert op.asset == SdkAsset.native()
        assert Decimal(op.amount) == Decimal("2.5")
        env = fake_horizon.envelopes[0]
        assert env.transaction.source.account_id == funder.public_key
        assert env.transaction.sequence == 101
        assert op.source is None

    def test_pay_credit(self, client, fake_horizon, funder, bob, usd):
        client.pay(funder.secret, bob.secret, "3", usd)
        op = _only_op(fake_horizon)
        assert op.asset == usd.to_sdk()
        assert op.destination.account_id == bob.public_key

    def test_each_call_is_its_own_envelope(self, client, fake_horizon, funder, bob):
        client.pay_native(funder.secret, bob.public_key, "1")
        client.pay_native(funder.secret, bob.public_key, "1")
        assert len(fake_horizon.submitted) == 2

    def test_options_signers_replace_source(
        self, client, fake_horizon, funder, alice, bob, signed_by
    ):
        opts = Options().with_signer(alice.secret)
        client.pay_native(funder.public_key, bob.public_key, "1", opts)

        env = fake_horizon.envelopes[0]
        assert env.transaction.source.account_id == funder.public_key
        assert len(env.signatures) == 1
        assert signed_by(env, alice)
        assert not signed_by(env, funder)

    def test_multiple_signers(self, client, fake_horizon, funder, alice, bob, signed_by):
        opts = Options().with_signer(funder.secret).with_signer(alice.secret)
        client.pay_native(funder.secret, bob.public_key, "1", opts)
        env = fake_horizon.envelopes[0]
        assert len(env.signatures) == 2
        assert signed_by(env, funder)
        assert signed_by(env, alice)

    def test_envelope_overrides(self, client, fake_horizon, funder, bob):
        opts = Options().with_base_fee(250).with_sequence(41).with_memo_id(7)
        client.pay_native(funder.secret, bob.public_key, "1", opts)

        tx = fake_horizon.envelopes[0].transaction
        assert tx.fee == 250
        assert tx.sequence == 42
        assert tx.memo.memo_id == 7
        assert not any(r.url.path.startswith("/accounts/") for r in fake_horizon.requests)

    @pytest.mark.parametrize(
        ("source", "target", "amount"),
        [
            ("SNOTASEED", None, "1"),
            (None, "GNOPE", "1"),
            (None, None, "0"),
            (None, None, "-1"),
            (None, None, "1.12345678"),
            (None, None, "lots"),
        ],
    )
    def test_invalid_input_never_reaches_network(
        self, client, fake_horizon, funder, bob, source, target, amount
    ):
        with pytest.raises(ValidationError):
            client.pay_native(source or funder.secret, target or bob.public_key, amount)
        assert fake_horizon.requests == []
        assert isinstance(client.last_error, ValidationError)

    def test_invalid_asset(self, client, fake_horizon, funder, bob):
        with pytest.raises(ValidationError, match="can't pay: invalid asset code"):
            client.pay(funder.secret, bob.public_key, "1", Asset.credit("U$D", bob.public_key))
        assert fake_horizon.requests == []

    def test_address_source_cannot_sign(self, client, fake_horizon, funder, bob):
        with pytest.raises(SigningError, match="not a valid seed"):
            client.pay_native(funder.public_key, bob.public_key, "1")
        assert fake_horizon.submitted == []


# ---------------------------------------------------------------------------
# Trust lines
# ---------------------------------------------------------------------------


class TestTrustLines:
    def test_create_with_limit(self, client, fake_horizon, alice, usd):
        client.create_trust_line(alice.secret, usd, "1000")
        op = _only_op(fake_horizon)
        assert isinstance(op, ChangeTrust)
        assert op.asset == usd.to_sdk()
        assert Decimal(op.limit) == Decimal("1000")

    def test_create_without_limit(self, client, fake_horizon, alice, usd):
        client.create_trust_line(alice.secret, usd)
        assert Decimal(_only_op(fake_horizon).limit) == Decimal("922337203685.4775807")

    def test_remove(self, client, fake_horizon, alice, usd):
        client.remove_trust_line(alice.secret, usd)
        assert Decimal(_only_op(fake_horizon).limit) == 0

    def test_native_rejected(self, client, alice):
        with pytest.raises(ValidationError, match="native"):
            client.create_trust_line(alice.secret, NATIVE_ASSET)
        with pytest.raises(ValidationError, match="native"):
            client.remove_trust_line(alice.secret, NATIVE_ASSET)

    def test_allow_trust(self, client, fake_horizon, issuer, alice, usd):
        client.allow_trust(issuer.secret, alice.public_key, "USD", True)
        op = _only_op(fake_horizon)
        assert isinstance(op, SetTrustLineFlags)
        assert op.trustor == alice.public_key
        assert op.asset == usd.to_sdk()
        assert int(op.set_flags or 0) & TrustLineFlags.AUTHORIZED_FLAG
        assert not int(op.clear_flags or 0) & TrustLineFlags.AUTHORIZED_FLAG

    def test_revoke_trust(self, client, fake_horizon, issuer, alice):
        client.allow_trust(issuer.secret, alice.public_key, "USD", False)
        op = _only_op(fake_horizon)
        assert int(op.clear_flags or 0) & TrustLineFlags.AUTHORIZED_FLAG
        assert not int(op.set_flags or 0) & TrustLineFlags.AUTHORIZED_FLAG

    def test_allow_trust_needs_account_address(self, client, issuer, alice):
        with pytest.raises(ValidationError, match="trust line: invalid address"):
            client.allow_trust(issuer.secret, alice.secret, "USD", True)


# ---------------------------------------------------------------------------
# Account options
# ---------------------------------------------------------------------------


class TestAccountOptions:
    def test_master_weight(self, client, fake_horizon, funder):
        client.set_master_weight(funder.secret, 0)
        op = _only_op(fake_horizon)
        assert isinstance(op, SetOptions)
        assert op.master_weight == 0

    @pytest.mark.parametrize("weight", [-1, 256])
    def test_weight_bounds(self, client, fake_horizon, funder, weight):
        with pytest.raises(ValidationError, match="between 0 and 255"):
            client.set_master_weight(funder.secret, weight)
        assert fake_horizon.requests == []

    def test_set_flags(self, client, fake_horizon, issuer):
        client.set_flags(issuer.secret, AccountFlags.AUTH_REQUIRED | AccountFlags.AUTH_REVOCABLE)
        assert int(_only_op(fake_horizon).set_flags) == 3

    def test_clear_flags(self, client, fake_horizon, issuer):
        client.clear_flags(issuer.secret, AccountFlags.AUTH_REVOCABLE)
        assert int(_only_op(fake_horizon).clear_flags) == 2

    def test_home_domain(self, client, fake_horizon, funder):
        client.set_home_domain(funder.secret, "example.com")
        assert _only_op(fake_horizon).home_domain == "example.com"

    def test_home_domain_too_long(self, client, funder):
        with pytest.raises(ValidationError, match="at most 32 bytes"):
            client.set_home_domain(funder.secret, "x" * 33)

    def test_add_and_remove_signer(self, client, fake_horizon, funder, alice):
        client.add_signer(funder.secret, alice.public_key, 5)
        client.remove_signer(funder.secret, alice.secret)
        added, removed = (env.transaction.operations[0] for env in fake_horizon.envelopes)
        assert added.signer.weight == 5
        assert removed.signer.weight == 0

    def test_add_signer_rejects_garbage(self, client, funder):
        with pytest.raises(ValidationError, match="invalid signer"):
            client.add_signer(funder.secret, "GNOPE", 1)

    def test_thresholds(self, client, fake_horizon, funder):
        client.set_thresholds(funder.secret, 1, 2, 3)
        op = _only_op(fake_horizon)
        assert (op.low_threshold, op.med_threshold, op.high_threshold) == (1, 2, 3)

    def test_threshold_bounds(self, client, funder):
        with pytest.raises(ValidationError, match="high threshold"):
            client.set_thresholds(funder.secret, 1, 2, 256)


# ---------------------------------------------------------------------------
# Data entries
# ---------------------------------------------------------------------------


class TestDataEntries:
    def test_set_data(self, client, fake_horizon, funder):
        client.set_data(funder.secret, "greeting", b"hello")
        op = _only_op(fake_horizon)
        assert isinstance(op, ManageData)
        assert op.data_name == "greeting"
        assert op.data_value == b"hello"

    def test_maximum_sizes(self, client, fake_horizon, funder):
        client.set_data(funder.secret, "k" * 64, b"v" * 64)
        op = _only_op(fake_horizon)
        assert len(op.data_name) == 64
        assert len(op.data_value) == 64

    def test_key_too_long(self, client, fake_horizon, funder):
        with pytest.raises(ValidationError, match="data key must be at most 64 bytes"):
            client.set_data(funder.secret, "k" * 65, b"v")
        assert fake_horizon.requests == []

    def test_value_too_long(self, client, fake_horizon, funder):
        with pytest.raises(ValidationError, match="data value must be at most 64 bytes"):
            client.set_data(funder.secret, "k", b"v" * 65)
        assert fake_horizon.requests == []

    def test_empty_key(self, client, funder):
        with pytest.raises(ValidationError, match="must not be empty"):
            client.set_data(funder.secret, "", b"v")
        with pytest.raises(ValidationError, match="must not be empty"):
            client.clear_data(funder.secret, "")

    def test_clear_data(self, client, fake_horizon, funder):
        client.clear_data(funder.secret, "greeting")
        op = _only_op(fake_horizon)
        assert op.data_name == "greeting"
        assert op.data_value is None
