"""Client settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``MICROSTELLAR_``)
2. YAML config file (``MICROSTELLAR_CONFIG_PATH`` env var or ``from_yaml``)
3. Defaults defined here
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from microstellar.config.network import NetworkName, network_from_name

if TYPE_CHECKING:
    from microstellar.config.network import CustomNetwork, PresetNetwork, SimulatedNetwork


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class ClientSettings(BaseSettings):
    """Settings for a :class:`~microstellar.client.StellarClient`."""

    model_config = SettingsConfigDict(
        env_prefix="MICROSTELLAR_",
        case_sensitive=False,
    )

    network: NetworkName = Field(
        default=NetworkName.TEST,
        description="public, test, simulated or custom",
    )
    horizon_url: str = ""
    passphrase: str = ""
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    base_fee: int = Field(default=100, ge=100, description="Base fee per operation in stroops")
    tx_timeout: int = Field(default=300, ge=0, description="Transaction validity window")
    config_path: str = ""

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``ClientSettings`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def to_network(self) -> SimulatedNetwork | PresetNetwork | CustomNetwork:
        """Build the network variant these settings describe."""
        return network_from_name(
            self.network.value,
            url=self.horizon_url or None,
            passphrase=self.passphrase or None,
        )
