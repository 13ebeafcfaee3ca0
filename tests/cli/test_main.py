import json
import sys
from pathlib import Path

import pytest

from native_launchers.cli.main import cli


@pytest.fixture
def build_file(tmp_path: Path) -> Path:
    path = tmp_path / "launchers.json"
    path.write_text(
        json.dumps(
            {
                "output_directory": "out",
                "image_name": "app",
                "source_directory": "generated",
                "launchers": [
                    {"name": "hello", "main_class": "com.example.Main"},
                    {"name": "gui", "main_class": "com.example.Gui", "console": False},
                ],
            }
        )
    )
    return path


def test_gen_sources(build_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture):
    assert cli(["gen-sources", "--config", str(build_file), "--platform", "macos"]) == 0

    generated = tmp_path / "generated"
    assert (generated / "hello.c").is_file()
    assert (generated / "gui.c").is_file()
    assert (generated / "cocoa_bootstrap.m").is_file()
    assert (generated / "java" / "launchers" / "NativeLaunchers.java").is_file()
    assert "Generated 2 launcher sources" in capsys.readouterr().out


def test_gen_config(build_file: Path, tmp_path: Path):
    assert cli(["gen-config", "--config", str(build_file), "--platform", "linux"]) == 0

    path = tmp_path / "generated" / "resources" / "META-INF" / "native-image"
    config = json.loads((path / "native-launchers" / "app" / "jni-config.json").read_text())
    assert [entry["name"] for entry in config] == ["com.example.Main", "com.example.Gui"]


def test_gen_sources_skip(tmp_path: Path):
    path = tmp_path / "launchers.json"
    path.write_text(
        json.dumps(
            {
                "output_directory": "out",
                "image_name": "app",
                "source_directory": "generated",
                "skip": True,
                "launchers": [{"name": "hello", "main_class": "com.example.Main"}],
            }
        )
    )
    assert cli(["gen-sources", "--config", str(path)]) == 0
    assert not (tmp_path / "generated").exists()


@pytest.mark.posix_only
def test_build(build_file: Path, tmp_path: Path, stub_compiler: Path):
    output_dir = tmp_path / "dist"
    exit_code = cli(
        [
            "build",
            "--config",
            str(build_file),
            "--platform",
            "linux",
            "--output-dir",
            str(output_dir),
            "--compiler",
            str(stub_compiler),
        ]
    )

    assert exit_code == 0
    assert (output_dir / "hello").read_text() == "binary"
    assert (output_dir / "gui").read_text() == "binary"


def test_invalid_build_file(tmp_path: Path):
    path = tmp_path / "launchers.json"
    path.write_text("{not json")
    assert cli(["gen-sources", "--config", str(path)]) == 1


def test_missing_build_file(tmp_path: Path):
    assert cli(["gen-config", "--config", str(tmp_path / "missing.json")]) == 1


if __name__ == "__main__":
    pytest.main(sys.argv)
