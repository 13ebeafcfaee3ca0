from native_launchers.codegen import SourceGenerator, placeholders, render
from native_launchers.compile import (
    BuildOrchestrator,
    CancelToken,
    CompilerInvocation,
    ProcessRunner,
    build,
    resolve,
)
from native_launchers.data import (
    BuildArtifact,
    BuildConfig,
    BuildFile,
    LauncherSpec,
    derive_symbol_name,
    load_build_file,
)
from native_launchers.errors import (
    ArtifactRelocationError,
    BuildCancelled,
    ConfigurationError,
    GenerationIOError,
    LauncherError,
    ProcessFailed,
    ProcessTimeout,
    TemplateResourceMissing,
    ToolchainNotFound,
)
from native_launchers.logging import configure_logging, get_logger
from native_launchers.platforms import Platform

__all__ = [
    # Main entry points
    "BuildOrchestrator",
    "build",
    "resolve",
    "SourceGenerator",
    "render",
    "placeholders",
    # Data model
    "BuildArtifact",
    "BuildConfig",
    "BuildFile",
    "LauncherSpec",
    "derive_symbol_name",
    "load_build_file",
    "Platform",
    # Process execution
    "CancelToken",
    "CompilerInvocation",
    "ProcessRunner",
    # Errors
    "LauncherError",
    "ConfigurationError",
    "ToolchainNotFound",
    "TemplateResourceMissing",
    "GenerationIOError",
    "ProcessTimeout",
    "ProcessFailed",
    "BuildCancelled",
    "ArtifactRelocationError",
    "configure_logging",
    "get_logger",
]
