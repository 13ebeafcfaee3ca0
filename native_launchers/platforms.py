"""Host platform detection and the per-platform flag tables used by the build."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


class Platform(str, Enum):
    """Operating system families that launchers can be built for.

    The value is captured once per build (see :meth:`current`) and passed explicitly into every
    component that needs to branch on the host OS.
    """

    WINDOWS = "windows"
    """Microsoft Windows."""
    MACOS = "macos"
    """Apple macOS."""
    LINUX = "linux"
    """Linux and other Unix-like systems."""

    @classmethod
    def current(cls) -> "Platform":
        """Detect the platform of the running interpreter."""
        if sys.platform.startswith("win") or sys.platform == "cygwin":
            return cls.WINDOWS
        if sys.platform == "darwin":
            return cls.MACOS
        return cls.LINUX

    @property
    def profile(self) -> "PlatformProfile":
        return PLATFORM_PROFILES[self]


@dataclass(frozen=True)
class PlatformProfile:
    """Platform knowledge needed to resolve a toolchain and assemble compiler arguments."""

    path_separator: str
    """Separator between entries of the PATH environment variable."""
    executable_suffix: str
    """Suffix appended to produced executables."""
    compiler_candidates: Tuple[str, ...]
    """Compiler executables probed on the search path, in priority order."""
    library_search_flags: Tuple[str, ...] = ()
    """Runtime library search path flags so the launcher finds a co-located shared image, next
    to the executable and in common app-packaging layouts."""
    dynamic_loading_flags: Tuple[str, ...] = ()
    """Link flags required for dlopen/dlsym."""
    ui_bootstrap_source: str = ""
    """Shared native UI bootstrap source compiled into windowed launchers. Empty if the platform
    does not need one."""
    ui_framework_flags: Tuple[str, ...] = ()
    """Defines and link flags that accompany the UI bootstrap source."""
    packaging_flags: Tuple[str, ...] = ()
    """Flags that keep the binary patchable by third-party packaging and update tooling."""
    subsystem_flip_command: Tuple[str, ...] = ()
    """Post-processing command that converts a console binary into a windowed one. The binary
    name is appended. Empty if the platform does not distinguish the two."""
    identity_define: str = ""
    """Define prefix used to embed the launcher identity token. Empty if unsupported."""
    identity_libraries: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    """Link libraries required by the identity token, keyed by toolchain family."""
    quoted_define_prefixes: Tuple[str, ...] = ()
    """Flag prefixes whose value must be wrapped in double quotes to survive argument parsing."""

    @property
    def needs_ui_bootstrap(self) -> bool:
        return bool(self.ui_bootstrap_source)

    @property
    def needs_subsystem_flip(self) -> bool:
        return bool(self.subsystem_flip_command)

    @property
    def supports_identity(self) -> bool:
        return bool(self.identity_define)

    def executable_name(self, name: str) -> str:
        return name + self.executable_suffix


PLATFORM_PROFILES: Dict[Platform, PlatformProfile] = {
    Platform.WINDOWS: PlatformProfile(
        path_separator=";",
        executable_suffix=".exe",
        compiler_candidates=("cl.exe", "zig.exe"),
        subsystem_flip_command=("editbin.exe", "/SUBSYSTEM:WINDOWS"),
        identity_define="-DAUMID=",
        identity_libraries={"msvc": ("Shell32.lib",), "gnu": ("-lshell32",)},
        quoted_define_prefixes=("-DAUMID=",),
    ),
    Platform.MACOS: PlatformProfile(
        path_separator=":",
        executable_suffix="",
        compiler_candidates=("cc", "gcc", "clang", "zig"),
        library_search_flags=(
            "-Wl,-rpath,@loader_path",
            "-Wl,-rpath,@loader_path/../lib",
            "-Wl,-rpath,@loader_path/../Frameworks",
            "-Wl,-rpath,@loader_path/../runtime/Contents/Home/lib",
            "-Wl,-rpath,@loader_path/../runtime/Contents/Home/lib/server",
        ),
        ui_bootstrap_source="cocoa_bootstrap.m",
        ui_framework_flags=("-DCOCOA", "-framework", "Cocoa"),
        packaging_flags=(
            "-Wl,-headerpad_max_install_names",
            "-Wl,-rpath,@executable_path/../Frameworks",
        ),
    ),
    Platform.LINUX: PlatformProfile(
        path_separator=":",
        executable_suffix="",
        compiler_candidates=("cc", "gcc", "clang", "zig"),
        library_search_flags=(
            "-Wl,-rpath,$ORIGIN",
            "-Wl,-rpath,$ORIGIN/../lib",
            "-Wl,-rpath,$ORIGIN/../lib/runtime/lib",
            "-Wl,-rpath,$ORIGIN/../lib/runtime/lib/server",
        ),
        dynamic_loading_flags=("-ldl",),
    ),
}
"""Flag tables for every supported platform."""
