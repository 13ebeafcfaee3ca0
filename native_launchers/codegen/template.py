"""Placeholder substitution over packaged source templates."""

from __future__ import annotations

import re
from importlib import resources
from typing import Mapping, Set

from ..errors import TemplateResourceMissing

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")
"""A placeholder token, e.g. '{{IMAGE_NAME}}'."""

_TEMPLATE_PACKAGE = "native_launchers.codegen.templates"


def render(template: str, params: Mapping[str, str]) -> str:
    """Replace every placeholder whose name is a key of ``params`` with its value.

    Unknown placeholders and any other brace syntax are left untouched. Values are inserted
    literally and are not scanned for placeholders again.

    Parameters
    ----------
    template : str
        The template text.
    params : Mapping[str, str]
        Placeholder names (without braces) mapped to their replacement text.

    Returns
    -------
    str
        The rendered text.

    Examples
    --------
    >>> render("lookup {{METHOD_NAME}} in {{IMAGE_NAME}}", {"METHOD_NAME": "run_main"})
    'lookup run_main in {{IMAGE_NAME}}'
    """
    if not params:
        return template

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def placeholders(template: str) -> Set[str]:
    """Get the names of all placeholders declared by a template."""
    return set(PLACEHOLDER_PATTERN.findall(template))


def load_template(name: str) -> str:
    """Load a template shipped with the package.

    Raises
    ------
    TemplateResourceMissing
        If the template is not part of the installation.
    """
    try:
        return resources.files(_TEMPLATE_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError, IsADirectoryError) as e:
        raise TemplateResourceMissing(f"Template resource not found: {name}") from e
