"""Solidity code-generation engine: variant tables, templates and emitters."""

from .assembler import ContractAssembler
from .governor_gen import GovernorGenerator
from .templates import TemplateRenderer
from .timelock_gen import TimelockGenerator
from .token_gen import TokenGenerator
from .variants import Axis, Composition, Mixin, Role, VariantFragment, VariantResolver

__all__ = [
    "Axis",
    "Composition",
    "ContractAssembler",
    "GovernorGenerator",
    "Mixin",
    "Role",
    "TemplateRenderer",
    "TimelockGenerator",
    "TokenGenerator",
    "VariantFragment",
    "VariantResolver",
]
