"""Federation protocol data models.

- FederatedAddress — parsed and validated ``name*domain``
- FederationRecord — federation server response
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_DOMAIN_REGEX = re.compile(r"^[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)+$")

FEDERATION_SEPARATOR = "*"


def is_federated(address: str) -> bool:
    return FEDERATION_SEPARATOR in address


@dataclass(frozen=True, slots=True)
class FederatedAddress:
    """A validated federation address.

    Attributes:
        name: The part before the last ``*``; may itself contain ``@``.
        domain: The domain after the last ``*``, lowercased.
        address: The full ``name*domain`` string.
    """

    name: str
    domain: str
    address: str

    @classmethod
    def from_string(cls, raw: str) -> FederatedAddress:
        """Parse a federation address like ``bob*example.com``.

        Raises:
            ValueError: If the address format is invalid.
        """
        raw = raw.strip()
        name, sep, domain = raw.rpartition(FEDERATION_SEPARATOR)
        domain = domain.lower()
        if not sep or not name or not _DOMAIN_REGEX.match(domain):
            msg = f"invalid federation address: {raw}"
            raise ValueError(msg)
        return cls(name=name, domain=domain, address=f"{name}*{domain}")


@dataclass(slots=True)
class FederationRecord:
    """Federation server response for a ``type=name`` query."""

    stellar_address: str = ""
    account_id: str = ""
    memo_type: str = ""
    memo: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FederationRecord:
        return cls(
            stellar_address=data.get("stellar_address", ""),
            account_id=data.get("account_id", ""),
            memo_type=data.get("memo_type", ""),
            memo=str(data.get("memo", "")),
        )
