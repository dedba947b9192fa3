"""Asset value objects.

An asset is either native lumens (XLM) or a credit issued by an account.
Credit codes of 1-4 characters are ``credit_alphanum4``, 5-12 characters
are ``credit_alphanum12``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

from stellar_sdk import Asset as SdkAsset

from microstellar.errors.stellar_errors import ValidationError
from microstellar.keys import valid_address

_CODE_REGEX = re.compile(r"^[a-zA-Z0-9]{1,12}$")


class AssetType(enum.StrEnum):
    """Horizon asset type names."""

    NATIVE = "native"
    CREDIT4 = "credit_alphanum4"
    CREDIT12 = "credit_alphanum12"


@dataclass(frozen=True, slots=True)
class Asset:
    """An asset descriptor.

    Attributes:
        code: Asset code, ``XLM`` for native.
        issuer: Issuer address; empty for native.
        type: One of :class:`AssetType`.
    """

    code: str
    issuer: str = ""
    type: AssetType = AssetType.CREDIT4

    @classmethod
    def credit(cls, code: str, issuer: str) -> Asset:
        """Build a credit asset, picking the alphanum4/12 type from the code length."""
        kind = AssetType.CREDIT4 if len(code) <= 4 else AssetType.CREDIT12
        return cls(code=code, issuer=issuer, type=kind)

    @classmethod
    def native(cls) -> Asset:
        return NATIVE_ASSET

    @classmethod
    def from_horizon(cls, data: dict[str, Any], prefix: str = "") -> Asset:
        """Create an Asset from Horizon ``asset_type``/``asset_code``/``asset_issuer`` fields.

        Args:
            data: A Horizon JSON record.
            prefix: Field prefix, e.g. ``"source_"`` for path records.
        """
        kind = data.get(f"{prefix}asset_type", AssetType.NATIVE.value)
        if kind == AssetType.NATIVE:
            return NATIVE_ASSET
        return cls(
            code=data.get(f"{prefix}asset_code", ""),
            issuer=data.get(f"{prefix}asset_issuer", ""),
            type=AssetType(kind),
        )

    @property
    def is_native(self) -> bool:
        return self.type == AssetType.NATIVE

    def validate(self) -> None:
        """Check the asset is well formed.

        Raises:
            ValidationError: On an empty/invalid code or an invalid issuer.
        """
        if self.is_native:
            return
        if not self.code or not _CODE_REGEX.match(self.code):
            msg = f"invalid asset code: {self.code!r}"
            raise ValidationError(msg)
        if self.type == AssetType.CREDIT4 and len(self.code) > 4:
            msg = f"asset code too long for credit_alphanum4: {self.code}"
            raise ValidationError(msg)
        if self.type == AssetType.CREDIT12 and len(self.code) < 5:
            msg = f"asset code too short for credit_alphanum12: {self.code}"
            raise ValidationError(msg)
        if not valid_address(self.issuer):
            msg = f"invalid issuer address for {self.code}: {self.issuer}"
            raise ValidationError(msg)

    def to_sdk(self) -> SdkAsset:
        """Convert to a ``stellar_sdk.Asset`` for operation construction."""
        if self.is_native:
            return SdkAsset.native()
        return SdkAsset(self.code, self.issuer)

    def horizon_params(self, prefix: str) -> dict[str, str]:
        """Render the asset as Horizon query parameters under *prefix*."""
        params = {f"{prefix}_asset_type": self.type.value}
        if not self.is_native:
            params[f"{prefix}_asset_code"] = self.code
            params[f"{prefix}_asset_issuer"] = self.issuer
        return params

    def __str__(self) -> str:
        return "XLM" if self.is_native else f"{self.code}:{self.issuer}"


NATIVE_ASSET = Asset(code="XLM", issuer="", type=AssetType.NATIVE)
