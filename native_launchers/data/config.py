"""Build-wide configuration shared by every launcher of one build invocation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from .utils import JAVA_CLASS_NAME_PATTERN, BaseModelWithDocstrings, NonEmptyString


class BuildConfig(BaseModelWithDocstrings):
    """Settings for one build invocation. Immutable once validated."""

    output_directory: Path
    """Default directory the produced executables are moved into."""
    image_name: NonEmptyString
    """Default name of the native image shared library (without the platform suffix) that the
    launchers load at runtime."""
    source_directory: Path
    """Directory that receives the generated C sources, shared headers and companion files."""
    debug: bool = Field(default=False)
    """Compile launchers with debug printouts and stream toolchain output to the log."""
    timeout: float = Field(default=20, ge=0)
    """Wall-clock limit in seconds for every external toolchain process."""
    compiler: Optional[List[NonEmptyString]] = Field(default=None)
    """Explicit compiler command (e.g., ['zig', 'cc']). Used verbatim, skipping toolchain
    discovery. A single string is split on whitespace."""
    compiler_args: List[str] = Field(default=[])
    """Extra arguments inserted right after the compiler command."""
    linker_args: List[str] = Field(default=[])
    """Extra arguments appended after the source and library flags."""
    runtime_args: List[NonEmptyString] = Field(default=[])
    """Runtime options applied to every launcher, ahead of the launcher's own options."""
    entry_points_package: NonEmptyString = Field(default="launchers")
    """Java package of the generated entry-point stubs."""
    skip: bool = Field(default=False)
    """Skip launcher generation entirely."""
    jobs: int = Field(default=1, ge=1)
    """Number of launchers compiled concurrently."""

    @field_validator("compiler", mode="before")
    @classmethod
    def _split_compiler(cls, value):
        if isinstance(value, str):
            return value.split()
        return value

    @model_validator(mode="after")
    def _validate_config(self) -> "BuildConfig":
        """Validate the compiler command and the entry-point package.

        Raises
        ------
        ValueError
            If the compiler command is empty or the package is not a valid Java package name.
        """
        if self.compiler is not None and len(self.compiler) == 0:
            raise ValueError("Compiler command must not be empty")
        if not JAVA_CLASS_NAME_PATTERN.match(self.entry_points_package):
            raise ValueError(f"Invalid entry points package '{self.entry_points_package}'")
        return self

    @property
    def c_source_directory(self) -> Path:
        return Path(self.source_directory).absolute()

    @property
    def java_source_directory(self) -> Path:
        return self.c_source_directory / "java"

    @property
    def native_image_config_directory(self) -> Path:
        return (
            self.c_source_directory
            / "resources"
            / "META-INF"
            / "native-image"
            / "native-launchers"
            / self.image_name
        )
