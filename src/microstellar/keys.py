"""Key helpers — strkey validation and random keypair generation.

Stellar keys are base32 "strkeys" with a version byte and a CRC16 checksum:
- Seeds (secret keys) start with ``S``
- Addresses (public keys) start with ``G``

The encoding and ed25519 primitives come from ``stellar_sdk``.
"""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import Keypair, StrKey

from microstellar.errors.stellar_errors import ValidationError


@dataclass(frozen=True, slots=True)
class KeyPair:
    """A seed and its matching public address."""

    seed: str
    address: str

    def __repr__(self) -> str:
        return f"KeyPair(seed=<redacted>, address={self.address!r})"


def create_key_pair() -> KeyPair:
    """Generate a new random ed25519 keypair."""
    pair = Keypair.random()
    return KeyPair(seed=pair.secret, address=pair.public_key)


def valid_address(address: str) -> bool:
    """Check whether *address* is a well-formed public key strkey."""
    return isinstance(address, str) and StrKey.is_valid_ed25519_public_key(address)


def valid_seed(seed: str) -> bool:
    """Check whether *seed* is a well-formed secret seed strkey."""
    return isinstance(seed, str) and StrKey.is_valid_ed25519_secret_seed(seed)


def valid_address_or_seed(value: str) -> bool:
    """Check whether *value* is either a valid address or a valid seed."""
    return valid_address(value) or valid_seed(value)


def ensure_address(address: str) -> str:
    """Return *address* unchanged, raising if it is not a public key strkey.

    Raises:
        ValidationError: If *address* is not a valid address.
    """
    if not valid_address(address):
        msg = f"invalid address: {address}"
        raise ValidationError(msg)
    return address


def address_of(address_or_seed: str) -> str:
    """Return the public address for an address or a seed.

    Raises:
        ValidationError: If the input is neither.
    """
    if valid_address(address_or_seed):
        return address_or_seed
    if valid_seed(address_or_seed):
        return Keypair.from_secret(address_or_seed).public_key
    msg = f"invalid address or seed: {address_or_seed}"
    raise ValidationError(msg)
