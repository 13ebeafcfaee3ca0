"""Generation of the C launcher sources and shared files of a build."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..data import BuildConfig, LauncherSpec, validate_launchers
from ..errors import GenerationIOError
from ..logging import log_debug
from ..platforms import Platform
from .companions import format_entry_table, render_entry_points, render_jni_config
from .template import load_template, render

logger = logging.getLogger(__name__)

LAUNCHER_TEMPLATE = "launcher.c"
SHARED_HEADERS = ("launcher_utils.h", "graal_jni.h")
ENTRY_POINTS_CLASS = "NativeLaunchers"
JNI_CONFIG_FILE = "jni-config.json"


@dataclass
class GeneratedSources:
    """Files written by the :class:`SourceGenerator` for one build."""

    source_directory: Path
    """Directory holding the C sources. Compilers run with this working directory."""
    launcher_sources: Dict[str, Path] = field(default_factory=dict)
    """Generated C file of every launcher, keyed by launcher name."""
    shared_files: List[Path] = field(default_factory=list)
    """Headers shared by all launcher sources."""
    ui_bootstrap: Optional[Path] = None
    """Shared native UI bootstrap source, if any launcher needs it."""
    entry_points: Optional[Path] = None
    """Generated Java entry-point stubs."""
    jni_config: Optional[Path] = None
    """Generated JNI registration descriptor."""


def c_string_literal(value: str) -> str:
    """Quote a string as a C string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def write_text_file(path: Path, content: str) -> Path:
    """Write a UTF-8 text file, replacing previous content and creating parent directories.

    Raises
    ------
    GenerationIOError
        If the directory or the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise GenerationIOError(f"Failed to write generated file {path}: {e}") from e
    return path


class SourceGenerator:
    """Renders launcher sources and the shared files they depend on.

    All shared files are written before :meth:`generate` returns, so compiling may start as
    soon as generation finished.
    """

    def __init__(self, config: BuildConfig, platform: Platform) -> None:
        self._config = config
        self._platform = platform
        self._profile = platform.profile

    @property
    def source_directory(self) -> Path:
        return self._config.c_source_directory

    def runtime_args(self, launcher: LauncherSpec) -> List[str]:
        """Runtime options of a launcher, build-wide options first."""
        return list(self._config.runtime_args) + list(launcher.runtime_args)

    def render_launcher(self, launcher: LauncherSpec) -> str:
        """Render the C source of a single launcher."""
        runtime_args = self.runtime_args(launcher)
        option_lines = "".join(
            f"\n    options[nOptions++].optionString = {c_string_literal(arg)};"
            for arg in runtime_args
        )
        return render(
            load_template(LAUNCHER_TEMPLATE),
            {
                "LAUNCHER_NAME": launcher.name,
                "MAIN_CLASS": launcher.main_class,
                "IMAGE_NAME": launcher.effective_image_name(self._config),
                "SYMBOL_NAME": launcher.entry_symbol,
                "NUM_RUNTIME_ARGS": str(len(runtime_args)),
                "RUNTIME_ARGS": option_lines,
            },
        )

    def needs_ui_bootstrap(self, launcher: LauncherSpec) -> bool:
        return self._profile.needs_ui_bootstrap and launcher.needs_cocoa

    def generate(self, launchers: Sequence[LauncherSpec]) -> GeneratedSources:
        """Write the C sources, shared files and companion outputs of all launchers.

        Parameters
        ----------
        launchers : Sequence[LauncherSpec]
            The launchers of the build. Names must be unique.

        Returns
        -------
        GeneratedSources
            Paths of everything that was written.

        Raises
        ------
        ConfigurationError
            If the launcher list is empty or has duplicate names.
        GenerationIOError
            If any file cannot be written. Generation stops at the first failure.
        """
        launchers = validate_launchers(launchers)
        result = self.generate_c_sources(launchers)
        result.entry_points = self.generate_entry_points(launchers)
        result.jni_config = self.generate_jni_config(launchers)
        return result

    def generate_c_sources(self, launchers: Sequence[LauncherSpec]) -> GeneratedSources:
        """Write the C sources of all launchers plus the shared headers and UI bootstrap."""
        source_dir = self.source_directory
        debug = self._config.debug
        log_debug(logger, debug, "Generating C sources in %s", source_dir)
        result = GeneratedSources(source_directory=source_dir)

        for header in SHARED_HEADERS:
            result.shared_files.append(write_text_file(source_dir / header, load_template(header)))

        if any(self.needs_ui_bootstrap(launcher) for launcher in launchers):
            name = self._profile.ui_bootstrap_source
            result.ui_bootstrap = write_text_file(source_dir / name, load_template(name))
            log_debug(logger, debug, "Generated UI bootstrap source: %s", name)

        for launcher in launchers:
            path = write_text_file(source_dir / launcher.c_file_name, self.render_launcher(launcher))
            result.launcher_sources[launcher.name] = path
            log_debug(logger, debug, "Generated source file: %s", launcher.c_file_name)

        return result

    def generate_entry_points(self, launchers: Sequence[LauncherSpec]) -> Path:
        """Write the Java entry-point stubs, one wrapper per distinct entry symbol."""
        package = self._config.entry_points_package
        path = (
            self._config.java_source_directory
            / Path(*package.split("."))
            / f"{ENTRY_POINTS_CLASS}.java"
        )
        write_text_file(path, render_entry_points(launchers, package, self._config.debug))
        logger.info(
            "Generated launcher entry points in %s:\n%s", path, format_entry_table(launchers)
        )
        return path

    def generate_jni_config(self, launchers: Sequence[LauncherSpec]) -> Path:
        """Write the JNI registration descriptor for all distinct main classes."""
        path = self._config.native_image_config_directory / JNI_CONFIG_FILE
        write_text_file(path, render_jni_config(launchers))
        log_debug(logger, self._config.debug, "Generated JNI configuration in %s", path)
        return path
