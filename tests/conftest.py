import os
import stat
import sys
from pathlib import Path
from typing import List

import pytest

from native_launchers.data import BuildConfig

STUB_COMPILER = """#!/bin/sh
# Writes a fake executable to the file named by -o
out=""
while [ $# -gt 0 ]; do
    if [ "$1" = "-o" ]; then
        shift
        out="$1"
    fi
    shift
done
printf 'binary' > "$out"
chmod +x "$out"
"""


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    """Skip tests that execute shell script stubs when not running on a POSIX system."""
    if os.name == "posix" and sys.platform != "cygwin":
        return

    skip_posix = pytest.mark.skip(reason="Shell script stubs need a POSIX system, skip test")
    for item in items:
        if any(item.iter_markers(name="posix_only")):
            item.add_marker(skip_posix)


def write_script(path: Path, content: str) -> Path:
    """Write an executable shell script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def stub_compiler(tmp_path: Path) -> Path:
    """An always-succeeding compiler that understands '-o <file>'."""
    return write_script(tmp_path / "toolchain" / "cc", STUB_COMPILER)


@pytest.fixture
def build_config(tmp_path: Path) -> BuildConfig:
    """A default build configuration writing into the temporary directory."""
    return BuildConfig(
        output_directory=tmp_path / "out",
        image_name="app",
        source_directory=tmp_path / "generated",
    )


@pytest.fixture
def make_script():
    """Factory writing executable shell scripts."""
    return write_script
