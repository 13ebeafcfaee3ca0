import sys

import pytest

from native_launchers.codegen import load_template, placeholders, render
from native_launchers.errors import TemplateResourceMissing


def test_render_replaces_known_placeholders():
    template = 'dlopen("{{IMAGE_NAME}}.so"); dlsym(handle, "{{METHOD_NAME}}"); // {{IMAGE_NAME}}'
    out = render(template, {"IMAGE_NAME": "app", "METHOD_NAME": "run_main"})
    assert out == 'dlopen("app.so"); dlsym(handle, "run_main"); // app'


def test_render_leaves_unknown_placeholders():
    template = "int main() { return {{EXIT_CODE}}; } {{ not a placeholder }}"
    out = render(template, {"OTHER": "x"})
    assert out == template


def test_render_without_params_is_identity():
    template = "struct { int a; } value = {{0}};"
    assert render(template, {}) == template


def test_render_does_not_rescan_values():
    assert render("{{A}}", {"A": "{{B}}", "B": "x"}) == "{{B}}"


def test_placeholders():
    assert placeholders("{{A}} {{B_2}} {{A}} {{lower}} {x}") == {"A", "B_2"}


@pytest.mark.parametrize("name", ["launcher.c", "entry_points.java", "entry_point_method.java"])
def test_rendering_every_declared_placeholder_leaves_none(name: str):
    template = load_template(name)
    declared = placeholders(template)
    assert declared
    out = render(template, {key: "value" for key in declared})
    assert placeholders(out) == set()


def test_shared_files_have_no_placeholders():
    for name in ["launcher_utils.h", "graal_jni.h", "cocoa_bootstrap.m"]:
        assert placeholders(load_template(name)) == set()


def test_load_template_missing():
    with pytest.raises(TemplateResourceMissing):
        load_template("does_not_exist.c")


if __name__ == "__main__":
    pytest.main(sys.argv)
