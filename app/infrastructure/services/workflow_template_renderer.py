"""Workflow templates: interpolate {{variable}} tokens in action config (Jinja, sandboxed).

Context is the built-in deal variables (dealName, dealAmount, dealStage,
dealProbability, dealCloseDate) merged with action-specific variables.

Only ``{{ name }}`` tokens whose name is a known variable are rendered. All
other text, including unknown or dotted tokens, stray ``{#`` / ``{%`` and
anything else that looks like template syntax, comes back exactly as written.
"""

from __future__ import annotations

import re
from typing import Any

from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

from app.core.constants import DEAL_TEMPLATE_VARIABLES

_TOKEN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
# Names Jinja parses as literals or operators; tokens using them stay verbatim.
_RESERVED_NAMES = frozenset(
    {"true", "false", "none", "True", "False", "None", "and", "or", "not", "in", "is", "if", "else"}
)
# Context key holding the literal text between tokens.
_LITERALS = "__literals__"


def _finalize(value: Any) -> Any:
    """Render None as empty and integral floats without a trailing .0."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def deal_variables(record: dict[str, Any]) -> dict[str, Any]:
    """Built-in template variables for a deal document."""
    values = (
        record.get("name"),
        record.get("amount"),
        record.get("stage"),
        record.get("probability"),
        record.get("closeDate"),
    )
    return dict(zip(DEAL_TEMPLATE_VARIABLES, values, strict=True))


def _to_jinja_source(template: str, variables: dict[str, Any]) -> tuple[str, list[str]]:
    """Compile user text to Jinja source where only known tokens are expressions.

    Literal segments are passed in by index, so nothing the user wrote is ever
    parsed as Jinja syntax.
    """
    parts: list[str] = []
    literals: list[str] = []
    position = 0
    for match in _TOKEN.finditer(template):
        name = match.group(1)
        if name not in variables or name in _RESERVED_NAMES or name == _LITERALS:
            continue
        if match.start() > position:
            parts.append(f"{{{{ {_LITERALS}[{len(literals)}] }}}}")
            literals.append(template[position : match.start()])
        parts.append(f"{{{{ {name} }}}}")
        position = match.end()
    if position < len(template):
        parts.append(f"{{{{ {_LITERALS}[{len(literals)}] }}}}")
        literals.append(template[position:])
    return "".join(parts), literals


class WorkflowTemplateRenderer:
    """Renders workflow action text (subjects, bodies, titles, Slack messages, payloads)."""

    def __init__(self) -> None:
        self._env = SandboxedEnvironment(
            autoescape=False,
            undefined=StrictUndefined,
            finalize=_finalize,
            keep_trailing_newline=True,
        )

    def render(self, template: str | None, variables: dict[str, Any]) -> str:
        """Render one template string; text other than known tokens is returned unchanged."""
        if not template:
            return ""
        source, literals = _to_jinja_source(template, variables)
        return self._env.from_string(source).render({**variables, _LITERALS: literals})

    def render_value(self, value: Any, variables: dict[str, Any]) -> Any:
        """Render every string inside a JSON-like value (dicts and lists walked recursively)."""
        if isinstance(value, str):
            return self.render(value, variables)
        if isinstance(value, dict):
            return {k: self.render_value(v, variables) for k, v in value.items()}
        if isinstance(value, list):
            return [self.render_value(v, variables) for v in value]
        return value
