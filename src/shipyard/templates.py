"""Template rendering.

Manifest templates use ``${KEY}`` or ``{KEY}`` placeholders resolved
against the environment store. Substitution is a single pass: a value
that itself contains a placeholder is written out verbatim.

Build descriptions use Jinja2 with ``{{ args.field }}`` syntax.
StrictUndefined ensures a typo in the description template blows up
instead of silently rendering empty strings.
"""

from __future__ import annotations

import re
from typing import Any

import jinja2

from shipyard.environment import EnvironmentStore
from shipyard.errors import TemplateError

_PLACEHOLDER = re.compile(
    r"\$\{(?P<dollar>[A-Za-z_][A-Za-z0-9_.\-]*)\}"
    r"|\{(?P<bare>[A-Za-z_][A-Za-z0-9_.\-]*)\}"
)

_ENV = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
)


def placeholders(template: str) -> list[str]:
    """Return placeholder keys in order of first appearance."""
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER.finditer(template):
        seen.setdefault(match.group("dollar") or match.group("bare"), None)
    return list(seen)


def resolve(template: str, store: EnvironmentStore, *, strict: bool = False) -> str:
    """Substitute every placeholder in *template* with its store value.

    Unknown keys render as an empty string unless *strict* is set, in
    which case a TemplateError names every key the store lacks.
    """
    if strict:
        missing = [key for key in placeholders(template) if key not in store]
        if missing:
            raise TemplateError(missing)

    def _substitute(match: re.Match[str]) -> str:
        return store.get(match.group("dollar") or match.group("bare"))

    return _PLACEHOLDER.sub(_substitute, template)


def render_template(template_str: str, variables: dict[str, Any]) -> str:
    """Render a Jinja2 template string with variables available as ``args``.

    Raises:
        jinja2.UndefinedError: If the template references a variable
            that doesn't exist in *variables*.
    """
    template = _ENV.from_string(template_str)
    return template.render(args=variables)
