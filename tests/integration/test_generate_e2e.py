"""Integration tests for the validate-assemble-persist pipeline.

These tests run the real service end-to-end from a JSON configuration file
on disk to ``.sol`` files in a temporary directory and check that every
written source is well formed.

No external services (explorers, compilers, chains) are required.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pytest

from govgen.config import Settings
from govgen.service import GenerationService
from govgen.utils import load_json


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _generate_from_file(payload: dict[str, Any], tmp_path: Path) -> tuple[Path, Any]:
    """Write *payload* to disk, reload it and run the service with saving."""
    config_path = tmp_path / "dao.json"
    config_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    out = tmp_path / "contracts"
    service = GenerationService(Settings(output_dir=out))
    response = await service.generate(load_json(config_path), save_to_file=True)
    return out, response


def _assert_well_formed(code: str) -> None:
    lines = code.splitlines()
    assert lines[0].startswith("// SPDX-License-Identifier: ")
    assert re.match(r"pragma solidity \^?\d+\.\d+\.\d+;", lines[1])
    assert code.count("{") == code.count("}")
    assert code.count("(") == code.count(")")
    assert "\n\n\n" not in code
    body = [line for line in lines if line and not line.startswith("//")]
    assert body[-1] == "}"
    assert len(re.findall(r"^(contract|interface) \w+", code, flags=re.M)) == 1


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestGenerateEndToEnd:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_full_featured_dao(self, tmp_path: Path, base_payload):
        payload = {
            **base_payload,
            "name": "Grants Council",
            "votesType": "NonFungibleVotes",
            "tokenClockMode": "Timestamp",
            "timelockType": "ControllerStyle",
            "minTimelockDelay": 86400,
            "upgradeability": "UUPSProxy",
            "updatableSettings": True,
            "adminAddress": "0x00000000000000000000000000000000000000a1",
            "securityContact": "security@example.org",
        }
        out, response = await _generate_from_file(payload, tmp_path)

        assert response.success is True, response.errors
        written = sorted(p.name for p in out.glob("*.sol"))
        assert written == ["GrantsCouncilGovernance.sol", "GrantsCouncilTimelock.sol", "TSTToken.sol"]
        for path in out.glob("*.sol"):
            _assert_well_formed(path.read_text(encoding="utf-8"))

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_existing_token_with_queued_timelock(self, tmp_path: Path, base_payload):
        payload = {
            **base_payload,
            "hasExistingToken": "yes",
            "tokenAddress": "0x1234567890abcdef1234567890abcdef12345678",
            "timelockType": "QueuedStyle",
        }
        out, response = await _generate_from_file(payload, tmp_path)

        assert response.success is True, response.errors
        interface = (out / "TSTTokenInterface.sol").read_text(encoding="utf-8")
        _assert_well_formed(interface)
        assert "interface IExistingERC20VotesToken" in interface
        _assert_well_formed((out / "TestDAOTimelock.sol").read_text(encoding="utf-8"))

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_legacy_axis_names(self, tmp_path: Path, base_payload):
        payload = {
            **base_payload,
            "votesType": "ERC20Votes",
            "timelockType": "Compound",
            "upgradeability": "Transparent",
        }
        out, response = await _generate_from_file(payload, tmp_path)

        assert response.success is True, response.errors
        governance = (out / "TestDAOGovernance.sol").read_text(encoding="utf-8")
        assert "GovernorTimelockCompoundUpgradeable" in governance
        _assert_well_formed(governance)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_invalid_file_writes_nothing(self, tmp_path: Path, base_payload):
        payload = {**base_payload, "hasExistingToken": "yes"}
        out, response = await _generate_from_file(payload, tmp_path)

        assert response.success is False
        assert [issue.field for issue in response.errors] == ["tokenAddress"]
        assert not out.exists()
