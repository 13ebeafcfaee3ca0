"""Exceptions raised while generating and building native launchers.

Every error is fatal to the current build invocation; nothing is retried.
"""

from __future__ import annotations

import shlex
from typing import Optional, Sequence


class LauncherError(RuntimeError):
    """Base class for all launcher build failures."""


class ConfigurationError(LauncherError):
    """Raised when the build configuration or a launcher definition is malformed."""


class ToolchainNotFound(LauncherError):
    """Raised when none of the supported C compilers could be located."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(
            f"None of the supported compilers were found on your system: {self.candidates}"
        )


class TemplateResourceMissing(LauncherError):
    """Raised when a packaged source template cannot be loaded. This indicates a broken
    installation rather than a user error."""


class GenerationIOError(LauncherError):
    """Raised when generated sources cannot be written to disk."""


class ArtifactRelocationError(LauncherError):
    """Raised when a compiled binary cannot be moved into its output directory."""


class ProcessError(LauncherError):
    """Base class for failures of an external toolchain process."""

    def __init__(self, argv: Sequence[str], message: str) -> None:
        self.argv = list(argv)
        super().__init__(f"{message}\n  command: {format_command(self.argv)}")


class ProcessTimeout(ProcessError):
    """Raised when a process did not exit within its timeout and was killed."""

    def __init__(self, argv: Sequence[str], timeout: float, output: str = "") -> None:
        self.timeout = timeout
        self.output = output
        super().__init__(argv, f"Execution timed out after {timeout} seconds.")


class ProcessFailed(ProcessError):
    """Raised when a process exits with a non-zero status or cannot be started at all.

    ``exit_code`` is ``None`` when the executable could not be launched.
    """

    def __init__(self, argv: Sequence[str], exit_code: Optional[int], output: str = "") -> None:
        self.exit_code = exit_code
        self.output = output
        if exit_code is None:
            message = "Could not start process"
        else:
            message = f"Process exited with status {exit_code}"
        if output:
            message += f"\n{output.rstrip()}"
        super().__init__(argv, message)


class BuildCancelled(ProcessError):
    """Raised when a running process was killed because the build was cancelled."""

    def __init__(self, argv: Sequence[str]) -> None:
        super().__init__(argv, "Execution cancelled")


def format_command(argv: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable command line for error messages."""
    return " ".join(shlex.quote(str(arg)) for arg in argv)
