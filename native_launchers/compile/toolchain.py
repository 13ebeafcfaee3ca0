"""Discovery of a C compiler that can build the launchers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from ..env import get_graalvm_home, get_search_path
from ..errors import ToolchainNotFound
from ..platforms import Platform

logger = logging.getLogger(__name__)

GRAALVM_CLANG = ("languages", "llvm", "native", "bin", "clang")
"""Location of the clang bundled with the GraalVM LLVM toolchain, relative to GRAALVM_HOME."""

SUBCOMMAND_COMPILERS = {"zig": ("cc",)}
"""Compilers that only act as a C compiler front-end when given a sub-command."""


class ToolchainFamily(str, Enum):
    """Command line dialect of a C compiler."""

    MSVC = "msvc"
    """Microsoft cl.exe style options."""
    GNU = "gnu"
    """gcc/clang style options, including zig cc."""


def _program_stem(executable: str) -> str:
    name = PurePath(executable.replace("\\", "/")).name.lower()
    return name[:-4] if name.endswith(".exe") else name


@dataclass(frozen=True)
class CompilerInvocation:
    """A resolved, ready-to-run compiler command. Arguments are appended by the orchestrator."""

    argv: Tuple[str, ...]
    """The executable followed by its leading arguments (e.g., ('/usr/bin/zig', 'cc'))."""

    def __post_init__(self) -> None:
        if not self.argv:
            raise ValueError("CompilerInvocation requires at least an executable")

    @property
    def executable(self) -> str:
        return self.argv[0]

    @property
    def family(self) -> ToolchainFamily:
        if _program_stem(self.executable) == "cl":
            return ToolchainFamily.MSVC
        return ToolchainFamily.GNU

    def output_flags(self, output_name: str) -> List[str]:
        """Flags that name the produced executable."""
        if self.family == ToolchainFamily.MSVC:
            return [f"/Fe{output_name}"]
        return ["-o", output_name]


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def _fallback_candidates(platform: Platform, environ: Optional[Mapping[str, str]]) -> List[Path]:
    if platform == Platform.WINDOWS:
        return []
    graalvm_home = get_graalvm_home(environ)
    if graalvm_home is None:
        return []
    return [graalvm_home.joinpath(*GRAALVM_CLANG).absolute()]


def _with_subcommand(executable: str) -> CompilerInvocation:
    subcommand = SUBCOMMAND_COMPILERS.get(_program_stem(executable), ())
    return CompilerInvocation(argv=(executable,) + tuple(subcommand))


def find_compiler(
    candidates: Sequence[str], search_path: Sequence[Path], fallbacks: Sequence[Path] = ()
) -> Optional[Path]:
    """Find the first executable candidate.

    Directories are scanned in order and, inside each directory, candidates in priority
    order. Absolute fallback paths are only checked when nothing matched on the search path.

    Parameters
    ----------
    candidates : Sequence[str]
        Compiler file names in priority order.
    search_path : Sequence[Path]
        Directories to scan.
    fallbacks : Sequence[Path], optional
        Absolute compiler paths checked last.

    Returns
    -------
    Optional[Path]
        Path of the winning compiler, or None.
    """
    for directory in search_path:
        for name in candidates:
            path = directory / name
            if _is_executable(path):
                return path
    for path in fallbacks:
        if _is_executable(path):
            return path
    return None


def resolve(
    user_override: Union[Sequence[str], str, None],
    platform: Platform,
    environ: Optional[Mapping[str, str]] = None,
) -> CompilerInvocation:
    """Resolve the compiler command used to build the launchers.

    Parameters
    ----------
    user_override : Union[Sequence[str], str, None]
        Explicit compiler command. Used verbatim without probing; a string is split on
        whitespace.
    platform : Platform
        Platform whose compiler candidates and PATH convention are used.
    environ : Mapping[str, str], optional
        Environment providing PATH and GRAALVM_HOME. Defaults to ``os.environ``.

    Returns
    -------
    CompilerInvocation
        The compiler command.

    Raises
    ------
    ToolchainNotFound
        If no user override is given and none of the candidates is executable.
    """
    if user_override is not None:
        tokens = user_override.split() if isinstance(user_override, str) else list(user_override)
        if tokens:
            logger.debug("Using user-specified compiler: %s", " ".join(tokens))
            return CompilerInvocation(argv=tuple(tokens))

    candidates = platform.profile.compiler_candidates
    fallbacks = _fallback_candidates(platform, environ)
    found = find_compiler(candidates, get_search_path(platform, environ), fallbacks)
    if found is None:
        raise ToolchainNotFound(list(candidates) + [str(path) for path in fallbacks])

    logger.debug("Using compiler: %s", found)
    return _with_subcommand(str(found))
