"""py-microstellar — an easy-to-use client for the Stellar network."""

from microstellar.account import Account, AccountFlags, Balance
from microstellar.amount import parse_amount, to_amount_string
from microstellar.assets import NATIVE_ASSET, Asset, AssetType
from microstellar.client import StellarClient
from microstellar.errors.network_errors import error_string
from microstellar.errors.stellar_errors import StellarError, find_cause
from microstellar.keys import KeyPair, valid_address, valid_address_or_seed, valid_seed
from microstellar.options import Options
from microstellar.paths import Path
from microstellar.session import Session

__all__ = [
    "NATIVE_ASSET",
    "Account",
    "AccountFlags",
    "Asset",
    "AssetType",
    "Balance",
    "KeyPair",
    "Options",
    "Path",
    "Session",
    "StellarClient",
    "StellarError",
    "error_string",
    "find_cause",
    "parse_amount",
    "to_amount_string",
    "valid_address",
    "valid_address_or_seed",
    "valid_seed",
]
