"""Pydantic v2 models for govgen.

Defines the governance configuration accepted by the generator, the enumerated
axis values it is built from, and the artifacts it produces.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

CURRENT_SCHEMA_VERSION = "2"
LEGACY_SCHEMA_VERSION = "1"


# ---------------------------------------------------------------------------
# Enumerations (one per configuration axis)
# ---------------------------------------------------------------------------

class ExistingToken(str, Enum):
    """Whether the DAO reuses a token that is already deployed."""
    YES = "yes"
    NO = "no"


class VotesType(str, Enum):
    """Kind of voting token."""
    FUNGIBLE = "FungibleVotes"
    NON_FUNGIBLE = "NonFungibleVotes"


class ClockMode(str, Enum):
    """Unit voting timings are measured in."""
    BLOCK_NUMBER = "BlockNumber"
    TIMESTAMP = "Timestamp"


class TimelockType(str, Enum):
    """Delay-and-execute contract placed in front of the governor."""
    NONE = "None"
    CONTROLLER = "ControllerStyle"
    QUEUED = "QueuedStyle"


class Upgradeability(str, Enum):
    """Proxy pattern the generated contracts are written for."""
    NONE = "None"
    TRANSPARENT = "TransparentProxy"
    UUPS = "UUPSProxy"


# Wire values used by earlier clients, mapped onto the canonical names.
LEGACY_ALIASES: dict[str, str] = {
    "ERC20Votes": VotesType.FUNGIBLE.value,
    "ERC721Votes": VotesType.NON_FUNGIBLE.value,
    "TimelockController": TimelockType.CONTROLLER.value,
    "Compound": TimelockType.QUEUED.value,
    "Transparent": Upgradeability.TRANSPARENT.value,
    "UUPS": Upgradeability.UUPS.value,
}


def normalise_axis_value(value: Any) -> Any:
    """Translate a legacy wire value to its canonical enum value."""
    if isinstance(value, str):
        return LEGACY_ALIASES.get(value, value)
    return value


def conditional_issues(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Cross-field checks that depend on which branch of an axis is active.

    *data* uses wire (camelCase) keys.  Returns ``(field, message)`` pairs so
    the same rules can run against a raw payload or a validated model.
    """
    issues: list[tuple[str, str]] = []
    if data.get("hasExistingToken") in (ExistingToken.YES, ExistingToken.YES.value):
        if not data.get("tokenAddress"):
            issues.append(
                ("tokenAddress", "Token address is required when using existing token")
            )
    return issues


# ---------------------------------------------------------------------------
# Input configuration
# ---------------------------------------------------------------------------

class GovernanceConfig(BaseModel):
    """A validated description of the governance setup to generate.

    Immutable once constructed. Wire names are camelCase; attributes are
    snake_case.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        str_strip_whitespace=True,
    )

    schema_version: str = Field(default=CURRENT_SCHEMA_VERSION)

    # Identity
    name: str = Field(..., min_length=1, description="Name of the DAO/organization")
    symbol: str = Field(..., min_length=1, description="Token symbol")
    purpose: str = Field(..., min_length=1, description="Purpose of the DAO")
    description: str = Field(..., min_length=1, description="Governance system description")
    license: Optional[str] = Field(default=None, description="SPDX license identifier")
    security_contact: Optional[str] = Field(default=None)

    # Token axis
    has_existing_token: ExistingToken
    token_address: Optional[str] = Field(default=None, pattern=ADDRESS_PATTERN)
    votes_type: VotesType = Field(default=VotesType.FUNGIBLE)
    token_decimals: Optional[int] = Field(default=None, ge=0, le=18, strict=True)
    token_clock_mode: ClockMode = Field(default=ClockMode.BLOCK_NUMBER)
    block_time_seconds: Optional[int] = Field(default=None, ge=1, strict=True)

    # Governance axis
    voting_delay: int = Field(..., ge=0, strict=True)
    voting_period: int = Field(..., ge=1, strict=True)
    proposal_threshold: int = Field(..., ge=0, strict=True)
    quorum_numerator: int = Field(..., ge=1, le=100, strict=True)
    updatable_settings: bool = Field(default=False)

    # Timelock axis
    timelock_type: TimelockType = Field(default=TimelockType.NONE)
    min_timelock_delay: Optional[int] = Field(default=None, ge=0, strict=True)

    # Upgrade axis
    upgradeability: Upgradeability = Field(default=Upgradeability.NONE)

    # Optional addresses
    treasury_address: Optional[str] = Field(default=None, pattern=ADDRESS_PATTERN)
    admin_address: Optional[str] = Field(default=None, pattern=ADDRESS_PATTERN)

    @field_validator("schema_version", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # JSON clients may send the version as a number.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("votes_type", "timelock_type", "upgradeability", mode="before")
    @classmethod
    def _accept_legacy_values(cls, value: Any) -> Any:
        return normalise_axis_value(value)

    @model_validator(mode="after")
    def _check_conditional_fields(self) -> "GovernanceConfig":
        issues = conditional_issues(self.model_dump(by_alias=True))
        if issues:
            raise ValueError("; ".join(message for _, message in issues))
        return self

    # ------------------------------------------------------------------
    # Derived flags
    # ------------------------------------------------------------------

    @property
    def uses_existing_token(self) -> bool:
        return self.has_existing_token is ExistingToken.YES

    @property
    def is_upgradeable(self) -> bool:
        return self.upgradeability is not Upgradeability.NONE

    @property
    def has_timelock(self) -> bool:
        return self.timelock_type is not TimelockType.NONE

    @property
    def compact_name(self) -> str:
        """The DAO name with all whitespace removed, used in contract names."""
        return re.sub(r"\s+", "", self.name)


# ---------------------------------------------------------------------------
# Output artifacts
# ---------------------------------------------------------------------------

class GeneratedContract(BaseModel):
    """One generated source file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name of the contract or interface")
    code: str = Field(..., description="Solidity source text")


class GeneratedArtifacts(BaseModel):
    """All contracts generated for one configuration, keyed by role."""

    model_config = ConfigDict(frozen=True)

    token: GeneratedContract
    governance: GeneratedContract
    timelock: Optional[GeneratedContract] = None

    def as_dict(self) -> dict[str, GeneratedContract]:
        """Return a ``{role: contract}`` mapping without absent roles."""
        roles = {"token": self.token, "governance": self.governance}
        if self.timelock is not None:
            roles["timelock"] = self.timelock
        return roles


class ArtifactPaths(BaseModel):
    """Where the persister wrote each artifact."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    token_path: str
    governance_path: str
    timelock_path: Optional[str] = None
