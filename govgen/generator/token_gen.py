"""Token contract generation.

Produces exactly one of four token bodies for a configuration: an interface
stub for an existing fungible or non-fungible voting token, or a full
fungible or non-fungible voting token contract.
"""

from __future__ import annotations

from ..config import GeneratorOptions
from ..errors import UnsupportedCombinationError
from ..models import GovernanceConfig, VotesType
from .templates import TemplateRenderer
from .variants import Axis, Composition, Role, TokenKind, VariantResolver, token_kind

FUNGIBLE_INTERFACE = "IExistingERC20VotesToken"
NON_FUNGIBLE_INTERFACE = "IExistingERC721VotesToken"


class TokenGenerator:
    """Generates the token contract, or the interface of an existing token."""

    _TEMPLATES: dict[TokenKind, str] = {
        TokenKind.EXISTING: "token_interface.sol.j2",
        TokenKind.FUNGIBLE: "token_fungible.sol.j2",
        TokenKind.NON_FUNGIBLE: "token_non_fungible.sol.j2",
    }

    def __init__(
        self,
        renderer: TemplateRenderer,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.renderer = renderer
        self.options = options or GeneratorOptions()

    # -- Public API --------------------------------------------------------

    def contract_name(self, config: GovernanceConfig) -> str:
        """Display name of the token artifact."""
        if config.uses_existing_token:
            return interface_name(config)
        return f"{config.symbol}Token"

    def composition(self, config: GovernanceConfig) -> Composition:
        """Fold the token, upgrade and clock fragments for *config*."""
        resolver = VariantResolver(config, self.options)
        return Composition((
            resolver.resolve(Axis.TOKEN, token_kind(config), Role.TOKEN),
            resolver.resolve(Axis.UPGRADE, config.upgradeability, Role.TOKEN),
            resolver.resolve(Axis.CLOCK, config.token_clock_mode, Role.TOKEN),
        ))

    def emit(self, config: GovernanceConfig) -> str:
        """Render the token source text for *config*.

        Raises:
            UnsupportedCombinationError: If a decimals override is requested
                for a non-fungible token.
        """
        kind = token_kind(config)
        if kind is TokenKind.NON_FUNGIBLE and config.token_decimals is not None:
            raise UnsupportedCombinationError(
                "tokenDecimals",
                "Token decimals cannot be set for a non-fungible voting token",
            )

        plan = self.composition(config)
        if kind is TokenKind.EXISTING:
            return self.renderer.render(self._TEMPLATES[kind], {
                "license": self._license(config),
                "pragma": self.options.pragma,
                "interface_name": interface_name(config),
                "token_address": config.token_address,
                "clock_functions": plan.functions,
                "fungible": config.votes_type is VotesType.FUNGIBLE,
            })

        upgradeable = config.is_upgradeable
        if upgradeable:
            params: tuple[str, ...] = ("address admin",)
            admin = "admin"
        else:
            params = ()
            admin = config.admin_address or "msg.sender"

        return self.renderer.render(self._TEMPLATES[kind], {
            "license": self._license(config),
            "pragma": self.options.pragma,
            "cfg": config,
            "plan": plan,
            "contract_name": self.contract_name(config),
            "upgradeable": upgradeable,
            "params": params,
            "grants": [
                f"_grantRole(DEFAULT_ADMIN_ROLE, {admin});",
                f"_grantRole(MINTER_ROLE, {admin});",
            ],
            "decimals": self._decimals(config),
        })

    # -- Internals ---------------------------------------------------------

    def _license(self, config: GovernanceConfig) -> str:
        return config.license or self.options.default_license

    def _decimals(self, config: GovernanceConfig) -> int | None:
        """The decimals value to hard-code, or ``None`` for the ERC20 default."""
        decimals = config.token_decimals
        if decimals is None or decimals == self.options.default_token_decimals:
            return None
        return decimals


def interface_name(config: GovernanceConfig) -> str:
    """Name of the interface emitted for an existing token."""
    if config.votes_type is VotesType.NON_FUNGIBLE:
        return NON_FUNGIBLE_INTERFACE
    return FUNGIBLE_INTERFACE
