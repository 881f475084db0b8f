"""Unit tests for the Pydantic settings models (govgen.config).

Tests cover:
- GeneratorOptions defaults and bounds
- NetworkConfig / default network table
- Settings.network lookup
- Settings save/load round-trip
- Settings.from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from govgen.config import DAY, GeneratorOptions, NetworkConfig, Settings


# ---------------------------------------------------------------------------
# GeneratorOptions
# ---------------------------------------------------------------------------


class TestGeneratorOptions:
    @pytest.mark.unit
    def test_defaults(self):
        opts = GeneratorOptions()
        assert opts.pragma == "^0.8.22"
        assert opts.default_license == "MIT"
        assert opts.default_min_timelock_delay == 172800
        assert opts.grace_period == 14 * DAY
        assert opts.maximum_delay == 30 * DAY
        assert opts.default_block_time_seconds == 12
        assert opts.default_token_decimals == 18

    @pytest.mark.unit
    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            GeneratorOptions(default_min_timelock_delay=-1)

    @pytest.mark.unit
    def test_block_time_must_be_positive(self):
        with pytest.raises(ValidationError):
            GeneratorOptions(default_block_time_seconds=0)

    @pytest.mark.unit
    def test_token_decimals_bounded(self):
        with pytest.raises(ValidationError):
            GeneratorOptions(default_token_decimals=19)


# ---------------------------------------------------------------------------
# Networks
# ---------------------------------------------------------------------------


class TestNetworks:
    @pytest.mark.unit
    def test_default_network_table(self):
        settings = Settings()
        assert set(settings.networks) == {
            "arbitrum", "mainnet", "sepolia", "goerli",
            "polygon", "optimism", "arbitrum-sepolia",
        }
        assert settings.networks["mainnet"].api_url == "https://api.etherscan.io/api"
        assert settings.networks["mainnet"].api_key is None

    @pytest.mark.unit
    def test_lookup_is_case_insensitive(self):
        settings = Settings()
        assert settings.network("Sepolia") is settings.networks["sepolia"]

    @pytest.mark.unit
    def test_unknown_network(self):
        assert Settings().network("solana") is None

    @pytest.mark.unit
    def test_network_config_requires_url(self):
        with pytest.raises(ValidationError):
            NetworkConfig()


# ---------------------------------------------------------------------------
# Save / load
# ---------------------------------------------------------------------------


class TestSettingsSaveLoad:
    @pytest.mark.unit
    def test_save_default_path(self, tmp_path: Path):
        settings = Settings(output_dir=tmp_path)
        saved = settings.save()
        assert saved == tmp_path / "govgen.json"
        assert saved.exists()

    @pytest.mark.unit
    def test_load_roundtrip(self, tmp_path: Path):
        settings = Settings(
            output_dir=tmp_path,
            options=GeneratorOptions(pragma="0.8.24", default_license="Apache-2.0"),
        )
        settings.networks["mainnet"] = NetworkConfig(
            api_url="https://example.test/api", api_key="k"
        )
        path = settings.save(tmp_path / "custom.json")

        loaded = Settings.load(path)
        assert loaded.output_dir == tmp_path
        assert loaded.options.pragma == "0.8.24"
        assert loaded.options.default_license == "Apache-2.0"
        assert loaded.networks["mainnet"].api_key == "k"


# ---------------------------------------------------------------------------
# from_env
# ---------------------------------------------------------------------------


class TestSettingsFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings.from_env()
        assert settings.output_dir == Path.cwd() / "generated-contracts"
        assert settings.options == GeneratorOptions()
        assert all(n.api_key is None for n in settings.networks.values())

    @pytest.mark.unit
    def test_output_dir_from_env(self):
        with patch.dict(os.environ, {"CONTRACT_OUTPUT_DIR": "/custom/out"}, clear=True):
            settings = Settings.from_env()
        assert settings.output_dir == Path("/custom/out")

    @pytest.mark.unit
    def test_pragma_and_license_from_env(self):
        env = {"GOVGEN_PRAGMA": "0.8.20", "GOVGEN_LICENSE": "GPL-3.0"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.options.pragma == "0.8.20"
        assert settings.options.default_license == "GPL-3.0"

    @pytest.mark.unit
    def test_api_keys_from_env(self):
        env = {"ETHERSCAN_API_KEY": "eth", "ARBISCAN_API_KEY": "arb"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.from_env()
        assert settings.networks["mainnet"].api_key == "eth"
        assert settings.networks["sepolia"].api_key == "eth"
        assert settings.networks["arbitrum"].api_key == "arb"
        assert settings.networks["arbitrum-sepolia"].api_key == "arb"
        assert settings.networks["polygon"].api_key is None
