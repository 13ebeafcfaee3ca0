"""Source generation for native launchers.

This package renders the C launcher sources, the headers and UI bootstrap they share, and
the companion files consumed by the native image compiler.
"""

from .companions import render_entry_points, render_jni_config, unique_by_symbol
from .sources import GeneratedSources, SourceGenerator
from .template import load_template, placeholders, render

__all__ = [
    "GeneratedSources",
    "SourceGenerator",
    "load_template",
    "placeholders",
    "render",
    "render_entry_points",
    "render_jni_config",
    "unique_by_symbol",
]
