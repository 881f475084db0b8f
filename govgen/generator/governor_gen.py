"""Governor contract generation.

The governor is composed from the core voting extensions plus optional
settings, timelock and upgrade mixins.  Every ``override(...)`` list in the
output is produced by :meth:`Composition.override`, so it always names exactly
the active bases that declare the function.
"""

from __future__ import annotations

from ..config import GeneratorOptions
from ..models import ClockMode, GovernanceConfig
from .templates import TemplateRenderer
from .variants import Axis, Composition, Role, VariantResolver

_UNITS: tuple[tuple[str, int], ...] = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


class GovernorGenerator:
    """Generates the governor (voting) contract."""

    TEMPLATE = "governor.sol.j2"

    def __init__(
        self,
        renderer: TemplateRenderer,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.renderer = renderer
        self.options = options or GeneratorOptions()

    def contract_name(self, config: GovernanceConfig) -> str:
        return f"{config.compact_name}Governance"

    def composition(self, config: GovernanceConfig) -> Composition:
        """Fold the core, settings, timelock and upgrade fragments."""
        resolver = VariantResolver(config, self.options)
        return Composition((
            resolver.governor_core(),
            resolver.resolve(Axis.SETTINGS, config.updatable_settings),
            resolver.resolve(Axis.TIMELOCK, config.timelock_type),
            resolver.resolve(Axis.UPGRADE, config.upgradeability),
        ))

    def emit(self, config: GovernanceConfig) -> str:
        """Render the governor source text for *config*."""
        timestamp = config.token_clock_mode is ClockMode.TIMESTAMP
        return self.renderer.render(self.TEMPLATE, {
            "license": config.license or self.options.default_license,
            "pragma": self.options.pragma,
            "cfg": config,
            "plan": self.composition(config),
            "contract_name": self.contract_name(config),
            "upgradeable": config.is_upgradeable,
            "settings_mutable": config.updatable_settings,
            "clock_label": "timestamp" if timestamp else "block number",
            "delay_note": self.describe_duration(config, config.voting_delay),
            "period_note": self.describe_duration(config, config.voting_period),
            "token_address": config.token_address if config.uses_existing_token else None,
        })

    def describe_duration(self, config: GovernanceConfig, value: int) -> str:
        """Annotate a voting timing in the unit of the configured clock.

        Block-number clocks are converted to wall time with the configured
        block time, e.g. ``"7200 blocks (~1 day)"``.
        """
        if config.token_clock_mode is ClockMode.TIMESTAMP:
            return f"{value} seconds (~{humanize(value)})"
        block_time = config.block_time_seconds or self.options.default_block_time_seconds
        return f"{value} blocks (~{humanize(value * block_time)})"


def humanize(seconds: int) -> str:
    """``90061`` -> ``"1 day 1 hour 1 minute"``; sub-minute remainders are kept
    only when the duration is shorter than a minute."""
    if seconds < 60:
        return f"{seconds} second{'' if seconds == 1 else 's'}"
    parts: list[str] = []
    remaining = seconds
    for unit, size in _UNITS[:-1]:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {unit}{'' if count == 1 else 's'}")
    return " ".join(parts)
