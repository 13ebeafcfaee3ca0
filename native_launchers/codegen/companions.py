"""Companion outputs for the native image compiler: Java entry-point stubs and JNI config.

Both are consumed by the ahead-of-time compiler that produces the image the launchers load.
Launchers that wrap the same entry point share a single stub and a single config entry.
"""

from __future__ import annotations

import json
from typing import Dict, List, Sequence

from ..data import LauncherSpec
from .template import load_template, render


def unique_by_symbol(launchers: Sequence[LauncherSpec]) -> List[LauncherSpec]:
    """Get the first launcher for every distinct entry symbol, in order."""
    seen: Dict[str, LauncherSpec] = {}
    for launcher in launchers:
        seen.setdefault(launcher.entry_symbol, launcher)
    return list(seen.values())


def _java_string(value: str) -> str:
    return json.dumps(value)


def render_entry_points(launchers: Sequence[LauncherSpec], package: str, debug: bool) -> str:
    """Render the Java source with one native entry point per distinct entry symbol.

    Parameters
    ----------
    launchers : Sequence[LauncherSpec]
        All launchers of the build.
    package : str
        Java package of the generated class.
    debug : bool
        Print the forwarded arguments before calling main.

    Returns
    -------
    str
        The Java source text.
    """
    method_template = load_template("entry_point_method.java")
    methods = []
    for launcher in unique_by_symbol(launchers):
        debug_statement = ""
        if debug:
            message = f"[DEBUG] calling {launcher.main_class} (args: %s)"
            debug_statement = (
                "\n            System.out.println(String.format("
                f"{_java_string(message)}, java.util.Arrays.toString(args)));"
            )
        methods.append(
            render(
                method_template,
                {
                    "SYMBOL_NAME": launcher.entry_symbol,
                    # Nested classes are referenced with '.' in Java sources
                    "MAIN_CLASS": launcher.main_class.replace("$", "."),
                    "DEBUG_STATEMENT": debug_statement,
                },
            )
        )
    return render(
        load_template("entry_points.java"),
        {"PACKAGE": package, "ENTRY_POINTS": "".join(methods)},
    )


def render_jni_config(launchers: Sequence[LauncherSpec]) -> str:
    """Render the JNI registration descriptor that keeps every main(String[]) reachable."""
    entries = []
    seen = set()
    for launcher in launchers:
        if launcher.main_class in seen:
            continue
        seen.add(launcher.main_class)
        entries.append(
            {
                "name": launcher.main_class,
                "methods": [{"name": "main", "parameterTypes": ["java.lang.String[]"]}],
            }
        )
    return json.dumps(entries, indent=2) + "\n"


def format_entry_table(launchers: Sequence[LauncherSpec]) -> str:
    """Format the launcher entry points as an aligned table for log output."""
    width = max((len(launcher.main_class) for launcher in launchers), default=0)
    lines = []
    for launcher in launchers:
        lines.append(f" {launcher.main_class.ljust(width)} ({launcher.entry_symbol})")
    return "\n".join(lines)
