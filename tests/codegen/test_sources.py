import json
import sys
from pathlib import Path

import pytest

from native_launchers.codegen import SourceGenerator, placeholders, render_entry_points
from native_launchers.codegen.sources import c_string_literal
from native_launchers.data import BuildConfig, LauncherSpec
from native_launchers.errors import ConfigurationError, GenerationIOError
from native_launchers.platforms import Platform


def test_generate_hello(build_config: BuildConfig):
    launcher = LauncherSpec(name="hello", main_class="com.example.Main")
    sources = SourceGenerator(build_config, Platform.LINUX).generate([launcher])

    source_dir = build_config.c_source_directory
    assert sources.source_directory == source_dir
    assert sources.launcher_sources == {"hello": source_dir / "hello.c"}
    content = (source_dir / "hello.c").read_text()
    assert 'dlsym(handle, "run_com_example_Main_main")' in content
    assert 'LIB_FILE "app.so"' in content
    assert placeholders(content) == set()

    # Shared headers are written next to the sources
    assert (source_dir / "launcher_utils.h").is_file()
    assert (source_dir / "graal_jni.h").is_file()
    # No UI bootstrap on Linux
    assert sources.ui_bootstrap is None
    assert not (source_dir / "cocoa_bootstrap.m").exists()


def test_generate_overwrites_previous_source(build_config: BuildConfig):
    source_dir = build_config.c_source_directory
    source_dir.mkdir(parents=True)
    (source_dir / "hello.c").write_text("stale")

    SourceGenerator(build_config, Platform.LINUX).generate(
        [LauncherSpec(name="hello", main_class="com.example.Main")]
    )

    assert "stale" not in (source_dir / "hello.c").read_text()


def test_runtime_args_and_image_override(build_config: BuildConfig):
    config = build_config.model_copy(update={"runtime_args": ["-Xmx1g"]})
    launcher = LauncherSpec(
        name="hello",
        main_class="com.example.Main",
        image_name="custom",
        runtime_args=['-Dgreeting="hi"'],
    )
    content = SourceGenerator(config, Platform.LINUX).render_launcher(launcher)

    assert "JavaVMOption options[10 + 2];" in content
    first = content.index('optionString = "-Xmx1g";')
    second = content.index('optionString = "-Dgreeting=\\"hi\\"";')
    assert first < second
    assert 'LIB_FILE "custom.so"' in content
    assert 'LIB_FILE L"custom.dll"' in content


def test_cocoa_bootstrap_written_once_on_macos(build_config: BuildConfig):
    launchers = [
        LauncherSpec(name="gui1", main_class="com.example.Main", console=False),
        LauncherSpec(name="gui2", main_class="com.example.Other", console=False),
        LauncherSpec(name="cli", main_class="com.example.Main"),
    ]
    sources = SourceGenerator(build_config, Platform.MACOS).generate(launchers)

    source_dir = build_config.c_source_directory
    assert sources.ui_bootstrap == source_dir / "cocoa_bootstrap.m"
    assert sorted(p.name for p in source_dir.glob("*.m")) == ["cocoa_bootstrap.m"]
    assert sorted(sources.launcher_sources) == ["cli", "gui1", "gui2"]


def test_no_cocoa_bootstrap_for_console_launchers(build_config: BuildConfig):
    sources = SourceGenerator(build_config, Platform.MACOS).generate(
        [LauncherSpec(name="cli", main_class="com.example.Main")]
    )
    assert sources.ui_bootstrap is None


def test_no_cocoa_bootstrap_on_windows(build_config: BuildConfig):
    sources = SourceGenerator(build_config, Platform.WINDOWS).generate(
        [LauncherSpec(name="gui", main_class="com.example.Main", console=False)]
    )
    assert sources.ui_bootstrap is None


def test_entry_points_deduplicated_by_symbol(build_config: BuildConfig):
    launchers = [
        LauncherSpec(name="cli", main_class="com.example.Main"),
        LauncherSpec(name="gui", main_class="com.example.Main", console=False),
        LauncherSpec(name="other", main_class="com.example.Other"),
    ]
    sources = SourceGenerator(build_config, Platform.LINUX).generate(launchers)

    assert sources.entry_points == (
        build_config.java_source_directory / "launchers" / "NativeLaunchers.java"
    )
    java = sources.entry_points.read_text()
    assert java.startswith("package launchers;")
    assert java.count('@CEntryPoint(name = "run_com_example_Main_main")') == 1
    assert java.count('@CEntryPoint(name = "run_com_example_Other_main")') == 1
    assert "com.example.Main.main(args);" in java
    assert placeholders(java) == set()


def test_entry_points_debug_statement():
    launchers = [LauncherSpec(name="cli", main_class="com.example.Outer$Main")]
    java = render_entry_points(launchers, "com.example.gen", debug=True)
    assert "[DEBUG] calling com.example.Outer$Main" in java
    assert "com.example.Outer.Main.main(args);" in java
    assert "System.out.println" not in render_entry_points(launchers, "p", debug=False)


def test_jni_config(build_config: BuildConfig):
    launchers = [
        LauncherSpec(name="cli", main_class="com.example.Main"),
        LauncherSpec(name="gui", main_class="com.example.Main", console=False),
        LauncherSpec(name="other", main_class="com.example.Other"),
    ]
    sources = SourceGenerator(build_config, Platform.LINUX).generate(launchers)

    assert sources.jni_config.parent == build_config.native_image_config_directory
    entries = json.loads(sources.jni_config.read_text())
    assert [entry["name"] for entry in entries] == ["com.example.Main", "com.example.Other"]
    assert entries[0]["methods"] == [{"name": "main", "parameterTypes": ["java.lang.String[]"]}]


def test_generate_fails_fast_on_io_error(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    config = BuildConfig(output_directory=tmp_path, image_name="app", source_directory=blocker)

    with pytest.raises(GenerationIOError):
        SourceGenerator(config, Platform.LINUX).generate(
            [LauncherSpec(name="hello", main_class="com.example.Main")]
        )


def test_generate_rejects_duplicate_names(build_config: BuildConfig):
    launcher = LauncherSpec(name="hello", main_class="com.example.Main")
    with pytest.raises(ConfigurationError):
        SourceGenerator(build_config, Platform.LINUX).generate([launcher, launcher])
    assert not build_config.c_source_directory.exists()


def test_c_string_literal():
    assert c_string_literal("plain") == '"plain"'
    assert c_string_literal('a"b\\c\n') == '"a\\"b\\\\c\\n"'


if __name__ == "__main__":
    pytest.main(sys.argv)
