"""Shared pytest fixtures for the govgen test suite.

Provides reusable fixtures for:
- Raw configuration payloads (camelCase wire format)
- A factory for validated ``GovernanceConfig`` objects
- Generator options, template renderer and assembler
- Settings pointing at a temporary output directory
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable

import pytest

from govgen.config import GeneratorOptions, Settings
from govgen.generator.assembler import ContractAssembler
from govgen.generator.templates import TemplateRenderer
from govgen.models import GovernanceConfig
from govgen.validation import validate_config

TOKEN_ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"
ADMIN_ADDRESS = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
TREASURY_ADDRESS = "0x00000000000000000000000000000000000000aa"


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def base_payload() -> dict[str, Any]:
    """A valid payload: new fungible token, block-number clock, no timelock."""
    return {
        "schemaVersion": "2",
        "name": "Test DAO",
        "symbol": "TST",
        "purpose": "Fund open-source tooling",
        "description": "Governance for the Test DAO",
        "license": "MIT",
        "hasExistingToken": "no",
        "votesType": "FungibleVotes",
        "tokenClockMode": "BlockNumber",
        "blockTimeSeconds": 12,
        "votingDelay": 7200,
        "votingPeriod": 50400,
        "proposalThreshold": 0,
        "quorumNumerator": 4,
        "updatableSettings": False,
        "timelockType": "None",
        "upgradeability": "None",
    }


@pytest.fixture
def existing_token_payload(base_payload) -> dict[str, Any]:
    """A valid payload reusing an already-deployed token."""
    return {**base_payload, "hasExistingToken": "yes", "tokenAddress": TOKEN_ADDRESS}


@pytest.fixture
def make_config(base_payload) -> Callable[..., GovernanceConfig]:
    """Factory: ``make_config(timelockType="QueuedStyle")`` -> validated config."""

    def _make(**overrides: Any) -> GovernanceConfig:
        payload = {**base_payload, **overrides}
        return validate_config(payload)

    return _make


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@pytest.fixture
def options() -> GeneratorOptions:
    return GeneratorOptions()


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def assembler(options, renderer) -> ContractAssembler:
    return ContractAssembler(options, renderer)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings writing generated contracts under a temporary directory."""
    return Settings(output_dir=tmp_path / "generated-contracts")


# ---------------------------------------------------------------------------
# Solidity text inspection
# ---------------------------------------------------------------------------

_FUNCTION_HEADER = re.compile(r"function\s+(\w+)\s*\([^()]*\)([^{;]*)")
_OVERRIDE_LIST = re.compile(r"override\(([^)]*)\)")
_INHERITANCE = re.compile(r"contract\s+\w+\s+is\s+([^{]+)\{")


def _override_lists(code: str) -> dict[str, tuple[str, ...]]:
    lists: dict[str, tuple[str, ...]] = {}
    for name, header in _FUNCTION_HEADER.findall(code):
        match = _OVERRIDE_LIST.search(header)
        if match:
            lists[name] = tuple(b.strip() for b in match.group(1).split(","))
    return lists


def _inheritance(code: str) -> tuple[str, ...]:
    match = _INHERITANCE.search(code)
    if not match:
        return ()
    return tuple(b.strip() for b in match.group(1).split(",") if b.strip())


@pytest.fixture
def override_lists() -> Callable[[str], dict[str, tuple[str, ...]]]:
    """Parse ``{function: bases}`` from every ``override(...)`` in a source."""
    return _override_lists


@pytest.fixture
def inheritance_of() -> Callable[[str], tuple[str, ...]]:
    """Parse the base list of the first ``contract X is ...`` clause."""
    return _inheritance
