"""Environment variables consulted by native-launchers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional

from .platforms import Platform


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def get_search_path(
    platform: Platform, environ: Optional[Mapping[str, str]] = None
) -> List[Path]:
    """Get the directories listed in PATH, in order. A missing PATH is an empty search path.

    Parameters
    ----------
    platform : Platform
        Platform whose separator convention is used to split the variable.
    environ : Mapping[str, str], optional
        Environment to read from. Defaults to ``os.environ``.

    Returns
    -------
    List[Path]
        The search path directories. Empty entries are dropped.
    """
    value = _environ(environ).get("PATH", "")
    return [Path(entry) for entry in value.split(platform.profile.path_separator) if entry]


def get_graalvm_home(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Get the GraalVM installation root from GRAALVM_HOME, if set."""
    value = _environ(environ).get("GRAALVM_HOME")
    return Path(value) if value else None


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """Get the default log level from NATIVE_LAUNCHERS_LOG_LEVEL. Defaults to INFO."""
    return _environ(environ).get("NATIVE_LAUNCHERS_LOG_LEVEL", "INFO").upper()
