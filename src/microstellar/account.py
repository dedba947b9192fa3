"""Account snapshot — balances, signers, thresholds, flags and data entries."""

from __future__ import annotations

import base64
import enum
from dataclasses import dataclass, field
from typing import Any

from microstellar.amount import parse_amount, to_amount_string
from microstellar.assets import NATIVE_ASSET, Asset


class AccountFlags(enum.IntFlag):
    """Issuer flags; combine with ``|``."""

    NONE = 0
    # Holders need the issuer's permission to hold the asset.
    AUTH_REQUIRED = 1
    # The issuer may revoke a holder's authorization.
    AUTH_REVOCABLE = 2
    # Auth flags can never change and the account can never be merged.
    AUTH_IMMUTABLE = 4


@dataclass(frozen=True)
class Balance:
    asset: Asset
    amount: str
    limit: str = ""


@dataclass(frozen=True)
class Signer:
    public_key: str
    weight: int
    type: str = "ed25519_public_key"


@dataclass(frozen=True)
class Thresholds:
    low: int = 0
    medium: int = 0
    high: int = 0


@dataclass
class Account:
    """Snapshot of an account as reported by Horizon.

    Attributes:
        address: The account ID.
        sequence: Current sequence number.
        balances: One entry per trust line plus native.
        signers: Signers including the master key.
        thresholds: Low / medium / high signing thresholds.
        flags: Issuer flags currently set.
        data: Data entries, base64-decoded.
        home_domain: Home domain, empty if unset.
    """

    address: str = ""
    sequence: int = 0
    balances: list[Balance] = field(default_factory=list)
    signers: list[Signer] = field(default_factory=list)
    thresholds: Thresholds = field(default_factory=Thresholds)
    flags: AccountFlags = AccountFlags.NONE
    data: dict[str, bytes] = field(default_factory=dict)
    home_domain: str = ""

    @classmethod
    def from_horizon(cls, data: dict[str, Any]) -> Account:
        """Create an Account from a Horizon ``/accounts/{id}`` JSON dict."""
        flag_data = data.get("flags", {})
        flags = AccountFlags.NONE
        if flag_data.get("auth_required"):
            flags |= AccountFlags.AUTH_REQUIRED
        if flag_data.get("auth_revocable"):
            flags |= AccountFlags.AUTH_REVOCABLE
        if flag_data.get("auth_immutable"):
            flags |= AccountFlags.AUTH_IMMUTABLE

        thresholds = data.get("thresholds", {})
        return cls(
            address=data.get("account_id", data.get("id", "")),
            sequence=int(data.get("sequence", 0)),
            balances=[
                Balance(
                    asset=Asset.from_horizon(b),
                    amount=b.get("balance", "0"),
                    limit=b.get("limit", ""),
                )
                for b in data.get("balances", [])
            ],
            signers=[
                Signer(
                    public_key=s.get("key", s.get("public_key", "")),
                    weight=int(s.get("weight", 0)),
                    type=s.get("type", "ed25519_public_key"),
                )
                for s in data.get("signers", [])
            ],
            thresholds=Thresholds(
                low=int(thresholds.get("low_threshold", 0)),
                medium=int(thresholds.get("med_threshold", 0)),
                high=int(thresholds.get("high_threshold", 0)),
            ),
            flags=flags,
            data={k: base64.b64decode(v) for k, v in data.get("data", {}).items()},
            home_domain=data.get("home_domain", ""),
        )

    def get_balance(self, asset: Asset) -> str:
        """Return the balance held in *asset*, ``"0.0000000"`` when there is no trust line."""
        for balance in self.balances:
            if balance.asset.is_native and asset.is_native:
                return balance.amount
            if balance.asset.code == asset.code and balance.asset.issuer == asset.issuer:
                return balance.amount
        return to_amount_string(0)

    def get_native_balance(self) -> str:
        return self.get_balance(NATIVE_ASSET)

    def get_native_stroops(self) -> int:
        return parse_amount(self.get_native_balance())

    def get_master_weight(self) -> int:
        """Weight of the master key, i.e. the signer whose key is the account address."""
        for signer in self.signers:
            if signer.public_key == self.address:
                return signer.weight
        return 0

    def get_data(self, key: str) -> bytes | None:
        return self.data.get(key)
