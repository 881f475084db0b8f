"""Timelock contract generation.

Two structurally different contracts are produced: a thin wrapper around
OpenZeppelin's ``TimelockController`` and a self-contained Compound-style
queue with its own transaction state machine.
"""

from __future__ import annotations

from ..config import GeneratorOptions
from ..errors import UnsupportedCombinationError
from ..models import GovernanceConfig, TimelockType
from .templates import TemplateRenderer
from .variants import Axis, Composition, Role, VariantResolver

ADMIN_PLACEHOLDER = "<admin address>"
TREASURY_PLACEHOLDER = "<treasury address>"


class TimelockGenerator:
    """Generates the delay-and-execute contract placed in front of the governor."""

    _TEMPLATES: dict[TimelockType, str] = {
        TimelockType.CONTROLLER: "timelock_controller.sol.j2",
        TimelockType.QUEUED: "timelock_queued.sol.j2",
    }

    def __init__(
        self,
        renderer: TemplateRenderer,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.renderer = renderer
        self.options = options or GeneratorOptions()

    def contract_name(self, config: GovernanceConfig) -> str:
        return f"{config.compact_name}Timelock"

    def min_delay(self, config: GovernanceConfig) -> int:
        """Configured minimum delay in seconds, falling back to the default."""
        if config.min_timelock_delay is None:
            return self.options.default_min_timelock_delay
        return config.min_timelock_delay

    def composition(self, config: GovernanceConfig) -> Composition:
        resolver = VariantResolver(config, self.options)
        return Composition((
            resolver.resolve(Axis.TIMELOCK, config.timelock_type, Role.TIMELOCK),
            resolver.resolve(Axis.UPGRADE, config.upgradeability, Role.TIMELOCK),
        ))

    def emit(self, config: GovernanceConfig) -> str:
        """Render the timelock source text for *config*.

        Must only be called when ``config.timelock_type`` is not ``None``.

        Raises:
            UnsupportedCombinationError: If no timelock was requested, or the
                minimum delay exceeds the maximum the queued timelock allows.
        """
        if not config.has_timelock:
            raise UnsupportedCombinationError(
                "timelockType", "No timelock contract is generated when timelockType is None"
            )
        min_delay = self.min_delay(config)
        if min_delay > self.options.maximum_delay:
            raise UnsupportedCombinationError(
                "minTimelockDelay",
                f"Minimum timelock delay must not exceed {self.options.maximum_delay} seconds",
            )

        return self.renderer.render(self._TEMPLATES[config.timelock_type], {
            "license": config.license or self.options.default_license,
            "pragma": self.options.pragma,
            "cfg": config,
            "plan": self.composition(config),
            "contract_name": self.contract_name(config),
            "upgradeable": config.is_upgradeable,
            "min_delay": min_delay,
            "max_delay": self.options.maximum_delay,
            "grace_period": self.options.grace_period,
            "admin": config.admin_address or ADMIN_PLACEHOLDER,
            "treasury": config.treasury_address or TREASURY_PLACEHOLDER,
        })
