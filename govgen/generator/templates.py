"""Jinja2 template rendering for contract generation.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``govgen/generator/templates/`` directory and renders them with a
contract-specific context.  Rendering is pure: nothing is written to disk
here, persistence is the job of :mod:`govgen.persister`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates into Solidity source text.

    The renderer discovers ``.sol.j2`` template files under a configurable
    template directory.  Undefined template variables raise instead of
    rendering as empty strings, so a missing context key can never silently
    drop part of a contract.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["days"] = _days_filter

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"governor.sol.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered source text, with runs of blank lines collapsed.
        """
        template = self.env.get_template(template_path)
        return _tidy(template.render(**context))


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _days_filter(seconds: int) -> int:
    """Whole days in a duration given in seconds."""
    return int(seconds) // 86400


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _tidy(text: str) -> str:
    """Normalise blank lines left behind by optional template sections.

    Strips trailing spaces, collapses runs of blank lines, removes blank lines
    directly before a closing brace and ends with exactly one newline.
    """
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = text.strip("\n") + "\n"
    text = re.sub(r"\n{3,}", "\n\n", text)
    return re.sub(r"\n{2,}([ \t]*\}\n)", r"\n\1", text)
