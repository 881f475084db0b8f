"""govgen configuration.

Centralised, typed configuration for the generator. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.

Nothing here is module-level mutable state: a ``Settings`` instance is built
once by the CLI or the service layer and passed down explicitly.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DAY = 86400


class GeneratorOptions(BaseModel):
    """Constants the emitters bake into generated source text."""

    pragma: str = Field(default="^0.8.22", description="Solidity version pragma")
    default_license: str = Field(default="MIT", description="SPDX license identifier")
    default_min_timelock_delay: int = Field(
        default=2 * DAY, ge=0, description="Minimum timelock delay in seconds"
    )
    grace_period: int = Field(
        default=14 * DAY, ge=0, description="Queued-timelock grace period in seconds"
    )
    maximum_delay: int = Field(
        default=30 * DAY, ge=0, description="Queued-timelock maximum delay in seconds"
    )
    default_block_time_seconds: int = Field(default=12, ge=1)
    default_token_decimals: int = Field(default=18, ge=0, le=18)


class NetworkConfig(BaseModel):
    """Block-explorer endpoint for one network."""

    api_url: str
    api_key: str | None = None


def _default_networks() -> dict[str, NetworkConfig]:
    return {
        "arbitrum": NetworkConfig(api_url="https://api.arbiscan.io/api"),
        "mainnet": NetworkConfig(api_url="https://api.etherscan.io/api"),
        "sepolia": NetworkConfig(api_url="https://api-sepolia.etherscan.io/api"),
        "goerli": NetworkConfig(api_url="https://api-goerli.etherscan.io/api"),
        "polygon": NetworkConfig(api_url="https://api.polygonscan.com/api"),
        "optimism": NetworkConfig(api_url="https://api-optimistic.etherscan.io/api"),
        "arbitrum-sepolia": NetworkConfig(api_url="https://api-sepolia.arbiscan.io/api"),
    }


# Which environment variable carries the API key for each network.
_NETWORK_KEY_ENV: dict[str, str] = {
    "arbitrum": "ARBISCAN_API_KEY",
    "mainnet": "ETHERSCAN_API_KEY",
    "sepolia": "ETHERSCAN_API_KEY",
    "goerli": "ETHERSCAN_API_KEY",
    "polygon": "POLYGONSCAN_API_KEY",
    "optimism": "OPTIMISM_SCAN_API_KEY",
    "arbitrum-sepolia": "ARBISCAN_API_KEY",
}


class Settings(BaseModel):
    """Global govgen configuration.

    Holds the emitter options, the explorer network table and the output
    directory used when generated contracts are persisted.
    """

    output_dir: Path = Field(default=Path("./generated-contracts"))
    options: GeneratorOptions = Field(default_factory=GeneratorOptions)
    networks: dict[str, NetworkConfig] = Field(default_factory=_default_networks)

    def network(self, name: str) -> NetworkConfig | None:
        """Look up a network by case-insensitive name."""
        return self.networks.get(name.lower())

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the settings to a JSON file.

        Args:
            path: Destination file. Defaults to ``<output_dir>/govgen.json``.

        Returns:
            The resolved path where the file was written.
        """
        target = path or (self.output_dir / "govgen.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            CONTRACT_OUTPUT_DIR, GOVGEN_PRAGMA, GOVGEN_LICENSE,
            ETHERSCAN_API_KEY, ARBISCAN_API_KEY, POLYGONSCAN_API_KEY,
            OPTIMISM_SCAN_API_KEY.
        """
        option_kwargs: dict[str, Any] = {}
        if os.environ.get("GOVGEN_PRAGMA"):
            option_kwargs["pragma"] = os.environ["GOVGEN_PRAGMA"]
        if os.environ.get("GOVGEN_LICENSE"):
            option_kwargs["default_license"] = os.environ["GOVGEN_LICENSE"]

        networks = _default_networks()
        for name, env_var in _NETWORK_KEY_ENV.items():
            if os.environ.get(env_var):
                networks[name] = networks[name].model_copy(
                    update={"api_key": os.environ[env_var]}
                )

        output_dir = os.environ.get("CONTRACT_OUTPUT_DIR")
        return cls(
            output_dir=Path(output_dir) if output_dir else Path.cwd() / "generated-contracts",
            options=GeneratorOptions(**option_kwargs),
            networks=networks,
        )
