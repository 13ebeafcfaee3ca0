"""Strong-typed definition of a single native launcher."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from pydantic import Field, model_validator

from .config import BuildConfig
from .utils import (
    C_IDENTIFIER_PATTERN,
    JAVA_CLASS_NAME_PATTERN,
    BaseModelWithDocstrings,
    NonEmptyString,
)

_LAUNCHER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.+-]*$")


def mangle_class_name(class_name: str) -> str:
    """Mangle a fully-qualified class name into a C identifier fragment.

    Follows the JNI name mangling scheme, which is injective: '.' becomes '_', '_' becomes
    '_1', and any other character outside [A-Za-z0-9] becomes '_0xxxx' with its lowercase
    UTF-16 hex code.

    Examples
    --------
    >>> mangle_class_name("com.example.Main")
    'com_example_Main'
    >>> mangle_class_name("com.example.Outer$Inner_Main")
    'com_example_Outer_00024Inner_1Main'
    """
    out = []
    for ch in class_name:
        if ch == ".":
            out.append("_")
        elif ch == "_":
            out.append("_1")
        elif ch.isascii() and ch.isalnum():
            out.append(ch)
        else:
            data = ch.encode("utf-16-be")
            for i in range(0, len(data), 2):
                out.append("_0" + data[i : i + 2].hex())
    return "".join(out)


def derive_symbol_name(main_class: str) -> str:
    """Derive the native entry symbol for an entry-point class.

    The result depends on nothing but ``main_class``, so every launcher that wraps the same
    entry point shares one symbol and one generated wrapper body.

    Examples
    --------
    >>> derive_symbol_name("com.example.Main")
    'run_com_example_Main_main'
    """
    return f"run_{mangle_class_name(main_class)}_main"


class LauncherSpec(BaseModelWithDocstrings):
    """Logical definition of one native executable that invokes a managed-runtime entry point.

    Several launchers may wrap the same ``main_class`` with different display options. They
    then share the same entry symbol.
    """

    name: NonEmptyString
    """Name of the produced executable without the platform suffix (e.g., 'hello'). The
    generated C file is named after it, so it must be unique within a build."""
    main_class: NonEmptyString
    """Fully-qualified name of the class whose main(String[]) is invoked (e.g.,
    'com.example.Main')."""
    image_name: Optional[NonEmptyString] = Field(default=None)
    """Name of the native image shared library to load. Defaults to the build-level image
    name."""
    output_directory: Optional[Path] = Field(default=None)
    """Directory the executable is moved into. Defaults to the build-level output directory."""
    runtime_args: List[NonEmptyString] = Field(default=[])
    """Extra options passed to the runtime when the isolate is created (e.g., '-Xmx1g')."""
    console: bool = Field(default=True)
    """Whether the launcher is a console application. Windowed launchers have no console
    window on Windows and run the Cocoa event loop on macOS."""
    cocoa: Optional[bool] = Field(default=None)
    """Force the macOS Cocoa bootstrap for console launchers. Windowed launchers always use
    it."""
    user_model_id: Optional[NonEmptyString] = Field(default=None)
    """Windows AppUserModelID used to group the process in the taskbar (e.g.,
    'Company.Product.App'). Ignored on other platforms."""
    symbol_name: Optional[NonEmptyString] = Field(default=None)
    """Explicit native entry symbol. Derived from ``main_class`` when omitted."""

    @model_validator(mode="after")
    def _validate_names(self) -> "LauncherSpec":
        """Validate the launcher name, main class and symbol name.

        Raises
        ------
        ValueError
            If any of the names is not usable in a file name, Java source or C source.
        """
        if not _LAUNCHER_NAME_PATTERN.match(self.name):
            raise ValueError(
                f"Invalid launcher name '{self.name}'. Use letters, digits and '_.+-' only."
            )
        if not JAVA_CLASS_NAME_PATTERN.match(self.main_class):
            raise ValueError(f"Invalid main class '{self.main_class}'")
        if self.symbol_name is not None and not C_IDENTIFIER_PATTERN.match(self.symbol_name):
            raise ValueError(f"Invalid symbol name '{self.symbol_name}'")
        if self.user_model_id is not None and '"' in self.user_model_id:
            raise ValueError(f"Invalid user model id '{self.user_model_id}'")
        return self

    @property
    def entry_symbol(self) -> str:
        """The native entry symbol, either explicit or derived from the main class."""
        return self.symbol_name or derive_symbol_name(self.main_class)

    @property
    def c_file_name(self) -> str:
        return self.name + ".c"

    @property
    def needs_cocoa(self) -> bool:
        return bool(self.cocoa) or not self.console

    def effective_image_name(self, config: BuildConfig) -> str:
        return self.image_name or config.image_name

    def effective_output_directory(self, config: BuildConfig) -> Path:
        return Path(self.output_directory or config.output_directory).absolute()
