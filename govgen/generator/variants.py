"""Variant tables for every configuration axis.

Each axis value resolves to a :class:`VariantFragment`: the mixins it brings
into a contract (base-type name, import, constructor/initializer calls and the
hooks each base declares) plus the functions the contract must override.

A base-type name is produced in exactly one place (:meth:`VariantResolver._oz`)
and the same :class:`Mixin` object supplies both the inheritance clause and
the override-target lists, so the two cannot drift apart. Override lists are
computed by one fold over the active mixins (:func:`override_targets`), not
hand-written per combination.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..config import GeneratorOptions
from ..errors import OverrideConsistencyError, UnsupportedAxisValueError
from ..models import ClockMode, GovernanceConfig, TimelockType, Upgradeability, VotesType

OZ = "@openzeppelin/contracts"
OZ_UPGRADEABLE = "@openzeppelin/contracts-upgradeable"


# ---------------------------------------------------------------------------
# Axes, roles and token kinds
# ---------------------------------------------------------------------------

class Axis(str, Enum):
    """Independently configurable dimensions of a governance setup."""
    TOKEN = "token"
    SETTINGS = "settings"
    TIMELOCK = "timelock"
    UPGRADE = "upgrade"
    CLOCK = "clock"


class Role(str, Enum):
    """The contract a fragment is resolved for."""
    TOKEN = "token"
    GOVERNANCE = "governance"
    TIMELOCK = "timelock"


class TokenKind(str, Enum):
    """Value of the token axis."""
    EXISTING = "Existing"
    FUNGIBLE = "FungibleVotes"
    NON_FUNGIBLE = "NonFungibleVotes"


def token_kind(config: GovernanceConfig) -> TokenKind:
    """Derive the token-axis value from a configuration."""
    if config.uses_existing_token:
        return TokenKind.EXISTING
    if config.votes_type is VotesType.NON_FUNGIBLE:
        return TokenKind.NON_FUNGIBLE
    return TokenKind.FUNGIBLE


# ---------------------------------------------------------------------------
# Mixin descriptors and fragments
# ---------------------------------------------------------------------------

# Ordering buckets for the inheritance clause.
LEADING, NORMAL, TRAILING = 0, 1, 2


@dataclass(frozen=True)
class Mixin:
    """One base contract: its name, where it comes from, what it declares."""

    base: str
    import_path: str | None = None
    hooks: frozenset[str] = frozenset()
    constructor_calls: tuple[str, ...] = ()
    initializer_calls: tuple[str, ...] = ()
    position: int = NORMAL


@dataclass(frozen=True)
class VariantFragment:
    """Everything one axis value contributes to a contract."""

    mixins: tuple[Mixin, ...] = ()
    functions: tuple[str, ...] = ()
    parameters: tuple[str, ...] = ()
    extra_imports: tuple[str, ...] = ()

    @property
    def obligations(self) -> dict[str, tuple[str, ...]]:
        """``{function: bases that must appear in its override list}``."""
        return {
            fn: tuple(m.base for m in self.mixins if fn in m.hooks)
            for fn in self.functions
        }


EMPTY = VariantFragment()


def override_targets(function: str, mixins: Iterable[Mixin]) -> tuple[str, ...]:
    """Bases among *mixins* that declare *function*, in inheritance order."""
    return tuple(m.base for m in mixins if function in m.hooks)


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return tuple(seen)


@dataclass(frozen=True)
class Composition:
    """The fold of several fragments into one contract's declarations."""

    fragments: tuple[VariantFragment, ...] = field(default_factory=tuple)

    @property
    def mixins(self) -> tuple[Mixin, ...]:
        ordered = [m for frag in self.fragments for m in frag.mixins]
        return tuple(sorted(ordered, key=lambda m: m.position))

    @property
    def inheritance(self) -> tuple[str, ...]:
        return _unique(m.base for m in self.mixins)

    @property
    def imports(self) -> tuple[str, ...]:
        paths = [m.import_path for m in self.mixins if m.import_path]
        paths += [p for frag in self.fragments for p in frag.extra_imports]
        return _unique(paths)

    @property
    def constructor_calls(self) -> tuple[str, ...]:
        return tuple(c for m in self.mixins for c in m.constructor_calls)

    @property
    def initializer_calls(self) -> tuple[str, ...]:
        return tuple(c for m in self.mixins for c in m.initializer_calls)

    @property
    def parameters(self) -> tuple[str, ...]:
        return _unique(p for frag in self.fragments for p in frag.parameters)

    @property
    def functions(self) -> tuple[str, ...]:
        return _unique(fn for frag in self.fragments for fn in frag.functions)

    def has(self, function: str) -> bool:
        return function in self.functions

    def targets(self, function: str) -> tuple[str, ...]:
        targets = override_targets(function, self.mixins)
        if not targets:
            raise OverrideConsistencyError(
                f"{function} is overridden but no active base declares it"
            )
        return targets

    def override(self, function: str) -> str:
        """Render the ``override(...)`` specifier for *function*."""
        return f"override({', '.join(self.targets(function))})"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

_GOVERNOR_HOOKS = frozenset({
    "votingDelay", "votingPeriod", "quorum", "proposalThreshold", "state",
    "propose", "supportsInterface", "_executor", "_cancel",
    "proposalNeedsQueuing", "_queueOperations", "_executeOperations",
})
_GOVERNOR_FUNCTIONS = (
    "votingDelay", "votingPeriod", "quorum", "state", "propose",
    "proposalThreshold", "_cancel", "_executor", "supportsInterface",
)
_TIMELOCK_CONTROL_HOOKS = frozenset({
    "state", "proposalNeedsQueuing", "_cancel", "_executor", "supportsInterface",
})
_TIMELOCK_QUEUED_HOOKS = _TIMELOCK_CONTROL_HOOKS | {"_queueOperations", "_executeOperations"}
_VOTES_HOOKS = frozenset({"clock", "CLOCK_MODE"})


class VariantResolver:
    """Maps axis values to fragments for one configuration.

    The resolver holds only the immutable configuration and options it was
    built with; every call is a pure function of its arguments.
    """

    def __init__(
        self,
        config: GovernanceConfig,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.config = config
        self.options = options or GeneratorOptions()
        self._builders = {
            Axis.TOKEN: self._token,
            Axis.SETTINGS: self._settings,
            Axis.TIMELOCK: self._timelock,
            Axis.UPGRADE: self._upgrade,
            Axis.CLOCK: self._clock,
        }

    # -- Public API --------------------------------------------------------

    def resolve(self, axis: Axis | str, value: Any, role: Role = Role.GOVERNANCE) -> VariantFragment:
        """Return the fragment for ``axis=value`` as seen by *role*.

        Raises:
            UnsupportedAxisValueError: If the axis or value is unknown.
        """
        try:
            builder = self._builders[Axis(axis)]
        except (KeyError, ValueError):
            raise UnsupportedAxisValueError(str(axis), value) from None
        return builder(value, Role(role))

    def governor_core(self) -> VariantFragment:
        """Bases every governor carries regardless of configuration."""
        name = f"{self.config.name} Governance"
        governor, governor_import = self._oz("governance", "Governor")
        counting, counting_import = self._oz("governance/extensions", "GovernorCountingSimple")
        votes, votes_import = self._oz("governance/extensions", "GovernorVotes")
        quorum, quorum_import = self._oz("governance/extensions", "GovernorVotesQuorumFraction")
        ivotes, ivotes_import = self._oz("governance/utils", "IVotes")
        numerator = self.config.quorum_numerator
        return VariantFragment(
            mixins=(
                Mixin(
                    governor, governor_import, _GOVERNOR_HOOKS,
                    **self._split((f'Governor("{name}")',), (f'__Governor_init("{name}");',)),
                ),
                Mixin(
                    counting, counting_import,
                    **self._split((), ("__GovernorCountingSimple_init();",)),
                ),
                Mixin(
                    votes, votes_import, _VOTES_HOOKS,
                    **self._split(("GovernorVotes(_token)",), ("__GovernorVotes_init(_token);",)),
                ),
                Mixin(
                    quorum, quorum_import, frozenset({"quorum"}),
                    **self._split(
                        (f"GovernorVotesQuorumFraction({numerator})",),
                        (f"__GovernorVotesQuorumFraction_init({numerator});",),
                    ),
                ),
            ),
            functions=_GOVERNOR_FUNCTIONS,
            parameters=(f"{ivotes} _token",),
            extra_imports=(ivotes_import,),
        )

    @property
    def upgradeable(self) -> bool:
        return self.config.is_upgradeable

    # -- Naming ------------------------------------------------------------

    def _oz(self, directory: str, name: str) -> tuple[str, str]:
        """Base-type name and import path for an OpenZeppelin contract."""
        if self.upgradeable:
            base = f"{name}Upgradeable"
            return base, f"{OZ_UPGRADEABLE}/{directory}/{base}.sol"
        return name, f"{OZ}/{directory}/{name}.sol"

    def _split(self, calls: tuple[str, ...], inits: tuple[str, ...]) -> dict[str, tuple[str, ...]]:
        # Upgradeable contracts initialise in initialize(); plain ones in the constructor.
        if self.upgradeable:
            return {"constructor_calls": (), "initializer_calls": inits}
        return {"constructor_calls": calls, "initializer_calls": ()}

    # -- Axis builders -----------------------------------------------------

    def _token(self, value: Any, role: Role) -> VariantFragment:
        kind = self._coerce(Axis.TOKEN, TokenKind, value)
        if kind is TokenKind.EXISTING:
            return EMPTY

        display = f"{self.config.name} Governance Token"
        symbol = self.config.symbol
        access, access_import = self._oz("access", "AccessControl")
        access_mixin = Mixin(
            access, access_import, frozenset({"supportsInterface"}),
            **self._split((), ("__AccessControl_init();",)),
        )

        if kind is TokenKind.FUNGIBLE:
            votes, votes_import = self._oz("token/ERC20/extensions", "ERC20Votes")
            votes_mixin = Mixin(
                votes, votes_import,
                frozenset({"_mint", "_burn", "_afterTokenTransfer"}) | _VOTES_HOOKS,
                **self._split(
                    (f'ERC20("{display}", "{symbol}")', f'ERC20Permit("{display}")'),
                    (
                        f'__ERC20_init("{display}", "{symbol}");',
                        f'__ERC20Permit_init("{display}");',
                        "__ERC20Votes_init();",
                    ),
                ),
            )
            return VariantFragment(
                mixins=(votes_mixin, access_mixin),
                functions=("_afterTokenTransfer", "_mint", "_burn"),
            )

        erc721, erc721_import = self._oz("token/ERC721", "ERC721")
        enumerable, enumerable_import = self._oz("token/ERC721/extensions", "ERC721Enumerable")
        uri, uri_import = self._oz("token/ERC721/extensions", "ERC721URIStorage")
        votes, votes_import = self._oz("token/ERC721/extensions", "ERC721Votes")
        return VariantFragment(
            mixins=(
                Mixin(
                    erc721, erc721_import,
                    frozenset({
                        "_beforeTokenTransfer", "_afterTokenTransfer", "_burn",
                        "tokenURI", "supportsInterface",
                    }),
                    **self._split(
                        (f'ERC721("{display}", "{symbol}")',),
                        (f'__ERC721_init("{display}", "{symbol}");',),
                    ),
                ),
                Mixin(
                    enumerable, enumerable_import,
                    frozenset({"_beforeTokenTransfer", "supportsInterface"}),
                    **self._split((), ("__ERC721Enumerable_init();",)),
                ),
                Mixin(
                    uri, uri_import,
                    frozenset({"_burn", "tokenURI", "supportsInterface"}),
                    **self._split((), ("__ERC721URIStorage_init();",)),
                ),
                Mixin(
                    votes, votes_import,
                    frozenset({"_afterTokenTransfer"}) | _VOTES_HOOKS,
                    **self._split(
                        (f'EIP712("{self.config.name}", "1")',),
                        (f'__EIP712_init("{self.config.name}", "1");', "__ERC721Votes_init();"),
                    ),
                ),
                access_mixin,
            ),
            functions=(
                "_beforeTokenTransfer", "_afterTokenTransfer", "_burn",
                "tokenURI", "supportsInterface",
            ),
        )

    def _settings(self, value: Any, role: Role) -> VariantFragment:
        if not isinstance(value, bool):
            raise UnsupportedAxisValueError(Axis.SETTINGS.value, value)
        if not value:
            # Immutable settings: the governor answers with constants.
            return EMPTY
        cfg = self.config
        args = f"{cfg.voting_delay}, {cfg.voting_period}, {cfg.proposal_threshold}"
        settings, settings_import = self._oz("governance/extensions", "GovernorSettings")
        return VariantFragment(
            mixins=(
                Mixin(
                    settings, settings_import,
                    frozenset({"votingDelay", "votingPeriod", "proposalThreshold"}),
                    **self._split(
                        (f"GovernorSettings({args})",),
                        (f"__GovernorSettings_init({args});",),
                    ),
                ),
            ),
        )

    def _timelock(self, value: Any, role: Role) -> VariantFragment:
        timelock = self._coerce(Axis.TIMELOCK, TimelockType, value)
        if timelock is TimelockType.NONE:
            return EMPTY

        if role is Role.TIMELOCK:
            if timelock is TimelockType.QUEUED:
                # The queued timelock is written out in full; it has no base.
                return EMPTY
            controller, controller_import = self._oz("governance", "TimelockController")
            return VariantFragment(
                mixins=(
                    Mixin(
                        controller, controller_import, frozenset({"supportsInterface"}),
                        **self._split(
                            ("TimelockController(minDelay, proposers, executors, admin)",),
                            ("__TimelockController_init(minDelay, proposers, executors, admin);",),
                        ),
                    ),
                ),
                parameters=(
                    "uint256 minDelay",
                    "address[] memory proposers",
                    "address[] memory executors",
                    "address admin",
                ),
            )

        if timelock is TimelockType.CONTROLLER:
            extension, extension_import = self._oz("governance/extensions", "GovernorTimelockControl")
            controller, controller_import = self._oz("governance", "TimelockController")
            return VariantFragment(
                mixins=(
                    Mixin(
                        extension, extension_import, _TIMELOCK_CONTROL_HOOKS,
                        **self._split(
                            ("GovernorTimelockControl(_timelock)",),
                            ("__GovernorTimelockControl_init(_timelock);",),
                        ),
                    ),
                ),
                functions=("proposalNeedsQueuing",),
                parameters=(f"{controller} _timelock",),
                extra_imports=(controller_import,),
            )

        extension, extension_import = self._oz("governance/extensions", "GovernorTimelockCompound")
        compound, compound_import = self._oz("vendor/compound", "ICompoundTimelock")
        return VariantFragment(
            mixins=(
                Mixin(
                    extension, extension_import, _TIMELOCK_QUEUED_HOOKS,
                    **self._split(
                        ("GovernorTimelockCompound(_timelock)",),
                        ("__GovernorTimelockCompound_init(_timelock);",),
                    ),
                ),
            ),
            functions=("proposalNeedsQueuing", "_queueOperations", "_executeOperations"),
            parameters=(f"{compound} _timelock",),
            extra_imports=(compound_import,),
        )

    def _upgrade(self, value: Any, role: Role) -> VariantFragment:
        upgrade = self._coerce(Axis.UPGRADE, Upgradeability, value)
        if upgrade is Upgradeability.NONE:
            return EMPTY
        initializable = Mixin(
            "Initializable",
            f"{OZ_UPGRADEABLE}/proxy/utils/Initializable.sol",
            position=LEADING,
        )
        if upgrade is Upgradeability.TRANSPARENT:
            return VariantFragment(mixins=(initializable,))
        return VariantFragment(
            mixins=(
                initializable,
                Mixin(
                    "UUPSUpgradeable",
                    f"{OZ_UPGRADEABLE}/proxy/utils/UUPSUpgradeable.sol",
                    frozenset({"_authorizeUpgrade"}),
                    initializer_calls=("__UUPSUpgradeable_init();",),
                    position=TRAILING,
                ),
            ),
            functions=("_authorizeUpgrade",),
        )

    def _clock(self, value: Any, role: Role) -> VariantFragment:
        clock = self._coerce(Axis.CLOCK, ClockMode, value)
        if clock is ClockMode.TIMESTAMP and role is Role.TOKEN:
            return VariantFragment(functions=("clock", "CLOCK_MODE"))
        return EMPTY

    @staticmethod
    def _coerce(axis: Axis, enum_type: type[Enum], value: Any) -> Any:
        try:
            return enum_type(value)
        except ValueError:
            raise UnsupportedAxisValueError(axis.value, value) from None
