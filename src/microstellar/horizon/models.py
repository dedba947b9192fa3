"""Horizon data models — submission responses, problems, path records.

Data classes representing Horizon REST response objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from microstellar.assets import NATIVE_ASSET, Asset

# ---------------------------------------------------------------------------
# Transaction submission
# ---------------------------------------------------------------------------


@dataclass
class TxResponse:
    """Result of a successful ``POST /transactions``.

    Attributes:
        hash: Transaction hash (hex).
        ledger: Ledger sequence the transaction was included in; 0 if simulated.
        envelope_xdr: The submitted envelope.
        result_xdr: Transaction result XDR.
        result_meta_xdr: Ledger changes XDR.
        successful: Whether the ledger applied the transaction.
    """

    hash: str = ""
    ledger: int = 0
    envelope_xdr: str = ""
    result_xdr: str = ""
    result_meta_xdr: str = ""
    successful: bool = True

    @property
    def simulated(self) -> bool:
        return self.ledger == 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TxResponse:
        """Create TxResponse from a Horizon JSON response dict."""
        return cls(
            hash=data.get("hash", data.get("id", "")),
            ledger=int(data.get("ledger", 0) or 0),
            envelope_xdr=data.get("envelope_xdr", ""),
            result_xdr=data.get("result_xdr", ""),
            result_meta_xdr=data.get("result_meta_xdr", ""),
            successful=bool(data.get("successful", True)),
        )


# ---------------------------------------------------------------------------
# Problem documents
# ---------------------------------------------------------------------------


@dataclass
class HorizonProblem:
    """RFC 7807 problem document returned by Horizon on errors.

    Attributes:
        type: Problem type URL.
        title: Short summary, e.g. ``Transaction Failed``.
        status: HTTP status.
        detail: Longer description.
        transaction_code: ``extras.result_codes.transaction`` (e.g. ``tx_failed``).
        operation_codes: ``extras.result_codes.operations`` in operation order.
        result_xdr: ``extras.result_xdr`` if present.
    """

    type: str = ""
    title: str = ""
    status: int = 0
    detail: str = ""
    transaction_code: str = ""
    operation_codes: list[str] = field(default_factory=list)
    result_xdr: str = ""

    @property
    def has_result_codes(self) -> bool:
        return bool(self.transaction_code or self.operation_codes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HorizonProblem:
        extras = data.get("extras") or {}
        codes = extras.get("result_codes") or {}
        return cls(
            type=data.get("type", ""),
            title=data.get("title", ""),
            status=int(data.get("status", 0) or 0),
            detail=data.get("detail", ""),
            transaction_code=codes.get("transaction", ""),
            operation_codes=list(codes.get("operations") or []),
            result_xdr=extras.get("result_xdr", ""),
        )


# ---------------------------------------------------------------------------
# Path search
# ---------------------------------------------------------------------------


@dataclass
class PathRecord:
    """One record from ``GET /paths/strict-receive``."""

    source_asset: Asset = NATIVE_ASSET
    source_amount: str = "0"
    destination_asset: Asset = NATIVE_ASSET
    destination_amount: str = "0"
    path: list[Asset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PathRecord:
        return cls(
            source_asset=Asset.from_horizon(data, prefix="source_"),
            source_amount=data.get("source_amount", "0"),
            destination_asset=Asset.from_horizon(data, prefix="destination_"),
            destination_amount=data.get("destination_amount", "0"),
            path=[Asset.from_horizon(hop) for hop in data.get("path", [])],
        )
