"""Network configuration variants.

Each network kind carries only the fields it needs:

- ``simulated`` — no Horizon at all; builds and signs locally
- ``public`` / ``test`` — named presets with well-known Horizon URL and passphrase
- ``custom`` — caller-supplied Horizon URL and passphrase
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from stellar_sdk import Network

from microstellar.errors.stellar_errors import ValidationError


class NetworkName(enum.StrEnum):
    """Supported network names."""

    PUBLIC = "public"
    TEST = "test"
    SIMULATED = "simulated"
    CUSTOM = "custom"


_PRESETS: dict[NetworkName, tuple[str, str]] = {
    NetworkName.PUBLIC: ("https://horizon.stellar.org", Network.PUBLIC_NETWORK_PASSPHRASE),
    NetworkName.TEST: ("https://horizon-testnet.stellar.org", Network.TESTNET_NETWORK_PASSPHRASE),
}

# Older callers spell the simulated network "fake".
_ALIASES = {"fake": NetworkName.SIMULATED}


class SimulatedNetwork(BaseModel):
    """Offline network: transactions are signed but never submitted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["simulated"] = "simulated"
    passphrase: str = Network.TESTNET_NETWORK_PASSPHRASE

    @property
    def url(self) -> str:
        return ""

    @property
    def simulated(self) -> bool:
        return True


class PresetNetwork(BaseModel):
    """One of the well-known SDF networks."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["preset"] = "preset"
    name: Literal["public", "test"]

    @property
    def url(self) -> str:
        return _PRESETS[NetworkName(self.name)][0]

    @property
    def passphrase(self) -> str:
        return _PRESETS[NetworkName(self.name)][1]

    @property
    def simulated(self) -> bool:
        return False


class CustomNetwork(BaseModel):
    """A private Horizon deployment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    url: str = Field(min_length=1)
    passphrase: str = Field(min_length=1)

    @property
    def simulated(self) -> bool:
        return False


NetworkConfig = Annotated[
    SimulatedNetwork | PresetNetwork | CustomNetwork,
    Field(discriminator="kind"),
]

_NETWORK_ADAPTER: TypeAdapter[SimulatedNetwork | PresetNetwork | CustomNetwork] = TypeAdapter(
    NetworkConfig
)


def network_from_name(
    name: str,
    *,
    url: str | None = None,
    passphrase: str | None = None,
) -> SimulatedNetwork | PresetNetwork | CustomNetwork:
    """Build the network variant for *name*.

    Args:
        name: ``public``, ``test``, ``simulated`` (or ``fake``), or ``custom``.
        url: Horizon URL, required for ``custom``.
        passphrase: Network passphrase, required for ``custom``.

    Raises:
        ValidationError: On an unknown name or a custom network missing fields.
    """
    key = name.strip().lower()
    try:
        kind = _ALIASES.get(key) or NetworkName(key)
    except ValueError as exc:
        msg = f"unknown network: {name!r}"
        raise ValidationError(msg) from exc

    if kind == NetworkName.SIMULATED:
        data: dict[str, str] = {"kind": "simulated"}
    elif kind == NetworkName.CUSTOM:
        data = {"kind": "custom", "url": url or "", "passphrase": passphrase or ""}
    else:
        data = {"kind": "preset", "name": kind.value}

    try:
        return _NETWORK_ADAPTER.validate_python(data)
    except PydanticValidationError as exc:
        msg = f"invalid {kind.value} network configuration: url and passphrase are required"
        raise ValidationError(msg) from exc


def network_from_spec(spec: str) -> SimulatedNetwork | PresetNetwork | CustomNetwork:
    """Build a network from a semicolon-separated spec string.

    Examples::

        network_from_spec("test")
        network_from_spec("public")
        network_from_spec("custom;https://horizon.example.com;my passphrase")

    An empty spec selects the test network.
    """
    parts = spec.split(";", 2)
    name = parts[0] or NetworkName.TEST.value
    if len(parts) == 3:
        return network_from_name(name, url=parts[1], passphrase=parts[2])
    return network_from_name(name)
