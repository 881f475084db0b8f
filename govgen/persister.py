"""Writes generated contracts to ``.sol`` files.

File names are derived from the configuration alone, so two requests using
the same name and symbol write to the same files; the last write wins.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from .models import ArtifactPaths, GeneratedArtifacts, GovernanceConfig


class ContractPersister:
    """Persists :class:`GeneratedArtifacts` under one output directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    @staticmethod
    def filenames(config: GovernanceConfig) -> dict[str, str]:
        """Return ``{role: filename}`` for every role *config* can produce."""
        if config.uses_existing_token:
            token = f"{config.symbol}TokenInterface.sol"
        else:
            token = f"{config.symbol}Token.sol"
        return {
            "token": token,
            "governance": f"{config.compact_name}Governance.sol",
            "timelock": f"{config.compact_name}Timelock.sol",
        }

    async def save(
        self,
        config: GovernanceConfig,
        artifacts: GeneratedArtifacts,
    ) -> ArtifactPaths:
        """Write every artifact and return where each one landed.

        The output directory is created if absent.  The writes run in worker
        threads so the event loop is never blocked on disk I/O.
        """
        await asyncio.to_thread(self.output_dir.mkdir, parents=True, exist_ok=True)
        names = self.filenames(config)

        written: dict[str, Path] = {}
        writes = []
        for role, contract in artifacts.as_dict().items():
            path = self.output_dir / names[role]
            written[role] = path
            writes.append(asyncio.to_thread(path.write_text, contract.code, "utf-8"))
        await asyncio.gather(*writes)

        timelock_path = written.get("timelock")
        return ArtifactPaths(
            token_path=str(written["token"]),
            governance_path=str(written["governance"]),
            timelock_path=str(timelock_path) if timelock_path else None,
        )
