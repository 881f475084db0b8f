"""Orchestrates the token, timelock and governor generators.

Takes a validated :class:`~govgen.models.GovernanceConfig` and returns every
generated contract for it.  Assembly is pure and synchronous; persistence is
handled separately by :mod:`govgen.persister`.
"""

from __future__ import annotations

from ..config import GeneratorOptions
from ..models import GeneratedArtifacts, GeneratedContract, GovernanceConfig
from .governor_gen import GovernorGenerator
from .templates import TemplateRenderer
from .timelock_gen import TimelockGenerator
from .token_gen import TokenGenerator


class ContractAssembler:
    """Main generation orchestrator.

    Given a ``GovernanceConfig``, produces:
    - the token contract, or the interface of an existing token
    - the governor contract
    - the timelock contract, when one was requested
    """

    def __init__(
        self,
        options: GeneratorOptions | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.options = options or GeneratorOptions()
        self.renderer = renderer or TemplateRenderer()
        self.token_gen = TokenGenerator(self.renderer, self.options)
        self.timelock_gen = TimelockGenerator(self.renderer, self.options)
        self.governor_gen = GovernorGenerator(self.renderer, self.options)

    def assemble(self, config: GovernanceConfig) -> GeneratedArtifacts:
        """Generate all contracts for *config*.

        The first unsupported combination aborts assembly; no partial result
        is returned.

        Raises:
            UnsupportedCombinationError: From the generator that detected it.
        """
        token = GeneratedContract(
            name=self.token_gen.contract_name(config),
            code=self.token_gen.emit(config),
        )
        timelock = None
        if config.has_timelock:
            timelock = GeneratedContract(
                name=self.timelock_gen.contract_name(config),
                code=self.timelock_gen.emit(config),
            )
        governance = GeneratedContract(
            name=self.governor_gen.contract_name(config),
            code=self.governor_gen.emit(config),
        )
        return GeneratedArtifacts(token=token, governance=governance, timelock=timelock)
