"""Options — optional per-call modifiers for client operations.

Options are built fluently and passed as the last argument of most client
methods::

    client.pay(
        "SOURCE_SEED", "TARGET_ADDRESS", "2000", inr,
        options=Options().with_asset(xlm, "20").through(usd, eur).with_memo_text("rent"),
    )

Signer semantics: when an options bundle carries explicit signers, the
operation source is NOT added as a signer. This lets a multisig account pay
from its public address while a delegated key signs.
"""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from stellar_sdk import HashMemo, IdMemo, Memo as SdkMemo, ReturnHashMemo, TextMemo

from microstellar.amount import parse_amount
from microstellar.errors.definitions import ErrPathOptionsNotAllowed
from microstellar.errors.stellar_errors import ValidationError

if TYPE_CHECKING:
    from microstellar.assets import Asset

_MAX_MEMO_TEXT_BYTES = 28
_MAX_MEMO_ID = 2**64 - 1


class MemoType(enum.StrEnum):
    TEXT = "text"
    ID = "id"
    HASH = "hash"
    RETURN = "return"


@dataclass(frozen=True, slots=True)
class Memo:
    """Envelope memo; exactly one kind is ever attached to a transaction."""

    type: MemoType
    value: str | int | bytes

    def to_sdk(self) -> SdkMemo:
        if self.type == MemoType.TEXT:
            return TextMemo(self.value)
        if self.type == MemoType.ID:
            return IdMemo(self.value)
        if self.type == MemoType.HASH:
            return HashMemo(self.value)
        return ReturnHashMemo(self.value)


def _hash_bytes(value: bytes | str) -> bytes:
    raw = bytes.fromhex(value) if isinstance(value, str) else value
    if len(raw) != 32:
        msg = f"memo hash must be 32 bytes, got {len(raw)}"
        raise ValidationError(msg)
    return raw


class Options:
    """Optional parameters for a single client call or a multi-op session."""

    def __init__(self) -> None:
        self.signers: list[str] = []
        self.memo: Memo | None = None
        self.multi_op_source: str = ""

        # Path payments
        self.send_asset: Asset | None = None
        self.max_amount: str = ""
        self.path: list[Asset] = []
        self.source_address: str = ""

        # Envelope overrides
        self.base_fee: int | None = None
        self.sequence: int | None = None
        self.timeout: int | None = None

    def __repr__(self) -> str:
        return (
            f"Options(signers={len(self.signers)}, memo={self.memo!r}, "
            f"send_asset={self.send_asset!s}, path={[str(a) for a in self.path]})"
        )

    # ------------------------------------------------------------------
    # Memos
    # ------------------------------------------------------------------

    def with_memo_text(self, text: str) -> Self:
        """Attach a text memo of at most 28 bytes."""
        if len(text.encode("utf-8")) > _MAX_MEMO_TEXT_BYTES:
            msg = f"memo text must be at most {_MAX_MEMO_TEXT_BYTES} bytes: {text}"
            raise ValidationError(msg)
        self.memo = Memo(MemoType.TEXT, text)
        return self

    def with_memo_id(self, memo_id: int) -> Self:
        """Attach an unsigned 64-bit ID memo."""
        if not 0 <= memo_id <= _MAX_MEMO_ID:
            msg = f"memo id out of range: {memo_id}"
            raise ValidationError(msg)
        self.memo = Memo(MemoType.ID, memo_id)
        return self

    def with_memo_hash(self, memo_hash: bytes | str) -> Self:
        """Attach a 32-byte hash memo (raw bytes or hex)."""
        self.memo = Memo(MemoType.HASH, _hash_bytes(memo_hash))
        return self

    def with_memo_return(self, memo_hash: bytes | str) -> Self:
        """Attach a 32-byte return-hash memo (raw bytes or hex)."""
        self.memo = Memo(MemoType.RETURN, _hash_bytes(memo_hash))
        return self

    # ------------------------------------------------------------------
    # Signers and envelope overrides
    # ------------------------------------------------------------------

    def with_signer(self, seed: str) -> Self:
        """Sign with *seed* instead of the operation source."""
        if seed not in self.signers:
            self.signers.append(seed)
        return self

    def with_base_fee(self, stroops: int) -> Self:
        if stroops < 100:
            msg = f"base fee must be at least 100 stroops: {stroops}"
            raise ValidationError(msg)
        self.base_fee = stroops
        return self

    def with_sequence(self, sequence: int) -> Self:
        """Use *sequence* as the source account's current sequence instead of loading it."""
        if sequence < 0:
            msg = f"sequence must not be negative: {sequence}"
            raise ValidationError(msg)
        self.sequence = sequence
        return self

    def with_timeout(self, seconds: int) -> Self:
        """Bound transaction validity to *seconds* from now; 0 means no upper bound."""
        if seconds < 0:
            msg = f"timeout must not be negative: {seconds}"
            raise ValidationError(msg)
        self.timeout = seconds
        return self

    def multi_op(self, source: str) -> Self:
        """Bind the envelope source account for a multi-op session."""
        self.multi_op_source = source
        return self

    # ------------------------------------------------------------------
    # Path payments
    # ------------------------------------------------------------------

    def with_asset(self, asset: Asset, max_amount: str) -> Self:
        """Pay with *asset*, spending at most *max_amount* of it."""
        asset.validate()
        parse_amount(max_amount)
        self.send_asset = asset
        self.max_amount = max_amount
        return self

    def through(self, *assets: Asset) -> Self:
        """Route the path payment through *assets*, in order."""
        for asset in assets:
            asset.validate()
            self.path.append(asset)
        return self

    def find_path_from(self, source_address: str) -> Self:
        """Search for a path funded by *source_address* when no hops are given."""
        self.source_address = source_address
        return self

    @property
    def has_path_params(self) -> bool:
        return self.send_asset is not None or bool(self.path) or bool(self.source_address)

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def signers_for(self, source: str) -> list[str]:
        """Signer context for an operation sourced from *source*.

        Explicit signers replace the source; otherwise the source signs.
        """
        return list(self.signers) if self.signers else [source]

    def merge(self, other: Options) -> None:
        """Fold *other*'s envelope fields into this bundle.

        Signers are appended without duplicates. A memo that conflicts with
        one already set raises instead of silently replacing it.
        """
        if other.memo is not None and self.memo is not None and self.memo != other.memo:
            msg = f"conflicting memos in one transaction: {self.memo!r} vs {other.memo!r}"
            raise ValidationError(msg)
        for seed in other.signers:
            self.with_signer(seed)
        if other.memo is not None:
            self.memo = other.memo
        for name in ("base_fee", "sequence", "timeout"):
            value = getattr(other, name)
            if value is not None:
                setattr(self, name, value)


def merge_options(options: Options | None) -> Options:
    """Return a private copy of *options*, or defaults if none were supplied."""
    if options is None:
        return Options()
    return copy.deepcopy(options)


def reject_path_params(options: Options | None) -> None:
    """Raise if *options* carries path-payment parameters.

    Raises:
        ValidationError: If path parameters are present.
    """
    if options is not None and options.has_path_params:
        raise ErrPathOptionsNotAllowed
