"""Result records of a launcher build."""

from pathlib import Path

from ..platforms import Platform
from .utils import BaseModelWithDocstrings, NonEmptyString


class BuildArtifact(BaseModelWithDocstrings):
    """A native executable that was compiled and moved into its output directory.

    Only created after every process of the launcher succeeded and the binary was relocated.
    """

    launcher: NonEmptyString
    """Name of the launcher that produced the executable."""
    path: Path
    """Absolute path of the executable in its output directory."""
    platform: Platform
    """Platform the executable was built for."""
