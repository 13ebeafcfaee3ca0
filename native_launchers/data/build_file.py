"""Loading of JSON build files that describe a complete launcher build."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from pydantic import Field, ValidationError, model_validator

from ..errors import ConfigurationError
from .config import BuildConfig
from .launcher import LauncherSpec


def validate_launchers(launchers: Iterable[LauncherSpec]) -> List[LauncherSpec]:
    """Check that a list of launchers can be built together.

    Every launcher owns its generated C file and its output file, so names must be unique.
    Launchers sharing an entry symbol share one generated entry point, so they must also
    share the main class it calls.

    Raises
    ------
    ConfigurationError
        If the list is empty, contains duplicate launcher names, or maps one entry symbol to
        different main classes.
    """
    launchers = list(launchers)
    if not launchers:
        raise ConfigurationError("At least one launcher must be defined")
    seen = set()
    symbols: Dict[str, LauncherSpec] = {}
    for launcher in launchers:
        if not isinstance(launcher, LauncherSpec):
            raise ConfigurationError(f"Expected a LauncherSpec, got {type(launcher).__name__}")
        if launcher.name in seen:
            raise ConfigurationError(f"Duplicate launcher name '{launcher.name}'")
        seen.add(launcher.name)
        other = symbols.setdefault(launcher.entry_symbol, launcher)
        if other.main_class != launcher.main_class:
            raise ConfigurationError(
                f"Launchers '{other.name}' and '{launcher.name}' use the same entry symbol "
                f"'{launcher.entry_symbol}' for different main classes "
                f"'{other.main_class}' and '{launcher.main_class}'"
            )
    return launchers


class BuildFile(BuildConfig):
    """A build configuration together with the ordered list of launchers to build."""

    launchers: List[LauncherSpec] = Field(min_length=1)
    """Launchers in build order."""

    @model_validator(mode="after")
    def _validate_unique_launchers(self) -> "BuildFile":
        try:
            validate_launchers(self.launchers)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return self

    def to_config(self) -> BuildConfig:
        """Get the build-wide configuration without the launcher list."""
        return BuildConfig.model_validate(self.model_dump(exclude={"launchers"}))


_PATH_KEYS = ("output_directory", "source_directory")


def _resolve_relative_paths(data: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    """Resolve relative directories against the directory of the build file."""
    data = dict(data)
    for key in _PATH_KEYS:
        if isinstance(data.get(key), str) and not Path(data[key]).is_absolute():
            data[key] = str(base_dir / data[key])
    launchers = data.get("launchers")
    if isinstance(launchers, list):
        resolved = []
        for launcher in launchers:
            if isinstance(launcher, dict):
                launcher = dict(launcher)
                value = launcher.get("output_directory")
                if isinstance(value, str) and not Path(value).is_absolute():
                    launcher["output_directory"] = str(base_dir / value)
            resolved.append(launcher)
        data["launchers"] = resolved
    return data


def parse_build_file(data: Dict[str, Any], base_dir: Union[str, Path, None] = None) -> BuildFile:
    """Validate a decoded build file.

    Parameters
    ----------
    data : Dict[str, Any]
        The decoded JSON object.
    base_dir : Union[str, Path], optional
        Directory that relative paths are resolved against. Relative paths are kept as-is
        when omitted.

    Returns
    -------
    BuildFile
        The validated build file.

    Raises
    ------
    ConfigurationError
        If the data does not describe a valid build.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Build file must contain a JSON object, got {type(data).__name__}")
    if base_dir is not None:
        data = _resolve_relative_paths(data, Path(base_dir))
    try:
        return BuildFile.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid build file:\n{e}") from e


def load_build_file(path: Union[str, Path]) -> BuildFile:
    """Load and validate a JSON build file. Relative paths are resolved against its directory.

    Raises
    ------
    ConfigurationError
        If the file cannot be read, is not valid JSON, or does not describe a valid build.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read build file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Build file {path} is not valid JSON: {e}") from e
    return parse_build_file(data, base_dir=path.absolute().parent)
