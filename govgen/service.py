"""Request-level generation service.

Validates a raw payload, assembles the contracts and optionally persists
them, returning a single ``GenerationResponse`` in the wire shape
``{success, message, contracts, filePaths?}``.  Configuration and
unsupported-combination errors are reported in the response; an override
inconsistency is a defect and propagates.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import Settings
from .errors import ConfigurationError, UnsupportedCombinationError, ValidationIssue
from .generator.assembler import ContractAssembler
from .models import ArtifactPaths, GeneratedContract
from .persister import ContractPersister
from .validation import validate_config


class GenerationResponse(BaseModel):
    """Outcome of one generation request."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool = Field(default=True)
    message: str = Field(default="")
    contracts: dict[str, GeneratedContract] = Field(
        default_factory=dict, description="Generated contracts keyed by role"
    )
    file_paths: ArtifactPaths | None = Field(default=None)
    errors: list[ValidationIssue] = Field(
        default_factory=list, description="Field-level configuration problems"
    )
    error: str | None = Field(default=None)

    def to_wire(self) -> dict[str, Any]:
        """Serialise with camelCase keys, omitting empty optional parts."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GenerationService:
    """Validates, assembles and optionally persists governance contracts."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.assembler = ContractAssembler(self.settings.options)
        self.persister = ContractPersister(self.settings.output_dir)

    async def generate(
        self,
        payload: Mapping[str, Any],
        save_to_file: bool = False,
    ) -> GenerationResponse:
        """Handle one generation request.

        Args:
            payload: Raw configuration (camelCase keys).
            save_to_file: Also write the contracts under
                ``settings.output_dir``.

        Returns:
            A ``GenerationResponse``; ``success`` is ``False`` when the
            payload is invalid, the combination is unsupported or the files
            could not be written.
        """
        try:
            config = validate_config(payload, self.settings.options)
        except ConfigurationError as exc:
            return GenerationResponse(
                success=False, message="Validation failed", errors=exc.issues
            )

        try:
            artifacts = self.assembler.assemble(config)
        except UnsupportedCombinationError as exc:
            return GenerationResponse(
                success=False,
                message="Failed to generate contracts",
                errors=[ValidationIssue(field=exc.field, message=exc.message)],
                error=str(exc),
            )

        contracts = artifacts.as_dict()
        if not save_to_file:
            return GenerationResponse(
                message="Contracts generated successfully", contracts=contracts
            )

        try:
            paths = await self.persister.save(config, artifacts)
        except OSError as exc:
            return GenerationResponse(
                success=False,
                message="Failed to save contracts",
                contracts=contracts,
                error=str(exc),
            )
        return GenerationResponse(
            message="Contracts generated and saved to files successfully",
            contracts=contracts,
            file_paths=paths,
        )
