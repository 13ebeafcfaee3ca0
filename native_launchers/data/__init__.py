"""Data layer with strongly-typed models for native launcher builds."""

from .artifact import BuildArtifact
from .build_file import BuildFile, load_build_file, parse_build_file, validate_launchers
from .config import BuildConfig
from .launcher import LauncherSpec, derive_symbol_name, mangle_class_name

__all__ = [
    "BuildArtifact",
    "BuildConfig",
    "BuildFile",
    "LauncherSpec",
    "derive_symbol_name",
    "load_build_file",
    "mangle_class_name",
    "parse_build_file",
    "validate_launchers",
]
