import io
import sys
from pathlib import Path

import pytest
from pyvugu.compiler.build import (
    BuildConfig,
    ComponentBuilder,
    build_directory,
    component_type_name,
    out_file_name,
)
from pyvugu.compiler.exceptions import (
    DirectiveParseError,
    FormattingError,
    StructuralError,
)
from pyvugu.compiler.formatter import BlackFormatter, NullFormatter

from helpers import COMPONENT_SCRIPT, import_module_from_path, make_builder


class RejectingFormatter:
    def format(self, text: str) -> str:
        raise FormattingError("rejected", source=text)


def test_build_writes_output(tmp_path: Path) -> None:
    builder = make_builder(tmp_path)
    out_path = builder.build('<div :title="data.name"></div>' + COMPONENT_SCRIPT)
    assert out_path == tmp_path / "comp_vgen.py"

    module = import_module_from_path(out_path, "comp_vgen_build")
    vdom, _ = module.Comp().build_vdom(module.CompData(name="x"))
    assert vdom.props == {"title": "x"}


def test_build_accepts_file_objects(tmp_path: Path) -> None:
    builder = make_builder(tmp_path)
    out_path = builder.build(io.StringIO("<p></p>" + COMPONENT_SCRIPT))
    assert "data='p'" in out_path.read_text(encoding="utf-8")


def test_compile_is_deterministic(tmp_path: Path) -> None:
    template = (
        '<div vg-if="data.count"><a :b="1" :a="2" @click="comp.on_click(event, 1)" '
        '@blur="handle_click(event, 2)"></a></div>' + COMPONENT_SCRIPT
    )
    first = make_builder(tmp_path).compile(template)
    second = make_builder(tmp_path).compile(template)
    assert first == second


@pytest.mark.parametrize(
    "template",
    ["", "<style>p {}</style>", "<div></div><p></p>"],
)
def test_structural_error_writes_nothing(tmp_path: Path, template: str) -> None:
    builder = make_builder(tmp_path)
    with pytest.raises(StructuralError):
        builder.build(template)
    assert list(tmp_path.iterdir()) == []


def test_directive_error_writes_nothing(tmp_path: Path) -> None:
    builder = make_builder(tmp_path)
    with pytest.raises(DirectiveParseError):
        builder.build('<div><a @click="???"></a></div>')
    assert not (tmp_path / "comp_vgen.py").exists()


def test_formatting_failure_still_writes_raw_source(tmp_path: Path) -> None:
    builder = make_builder(tmp_path, formatter=RejectingFormatter())
    template = "<div></div>" + COMPONENT_SCRIPT
    with pytest.raises(FormattingError, match="rejected"):
        builder.build(template)

    written = (tmp_path / "comp_vgen.py").read_text(encoding="utf-8")
    assert written == builder.compile(template)


def test_config_for_template(tmp_path: Path) -> None:
    config = BuildConfig.for_template(tmp_path / "todo-list.vugu")
    assert config.component_type == "TodoList"
    assert config.data_type == "TodoListData"
    assert config.out_dir == tmp_path
    assert config.out_file == "todo_list_vgen.py"
    assert config.out_path == tmp_path / "todo_list_vgen.py"

    config = BuildConfig.for_template(
        "x/root.vugu", out_dir=tmp_path, component_type="App", out_file="app.py"
    )
    assert config.component_type == "App"
    assert config.data_type == "AppData"
    assert config.out_path == tmp_path / "app.py"


@pytest.mark.parametrize(
    "name, component, module",
    [
        ("root.vugu", "Root", "root_vgen.py"),
        ("my_widget.vugu", "MyWidget", "my_widget_vgen.py"),
        ("Nav-Bar.vugu", "NavBar", "nav_bar_vgen.py"),
    ],
)
def test_name_derivation(name: str, component: str, module: str) -> None:
    assert component_type_name(name) == component
    assert out_file_name(name) == module


def test_name_derivation_rejects_non_identifiers() -> None:
    with pytest.raises(ValueError):
        component_type_name("1st.vugu")


def test_build_directory(tmp_path: Path) -> None:
    src = tmp_path / "components"
    src.mkdir()
    for name in ("nav-bar", "footer"):
        cls = "NavBar" if name == "nav-bar" else "Footer"
        (src / f"{name}.vugu").write_text(
            f'<div class="{name}"></div>\n'
            '<script type="application/x-python">\n'
            f"class {cls}:\n    pass\n\nclass {cls}Data:\n    pass\n"
            "</script>\n",
            encoding="utf-8",
        )
    (src / "_partial.vugu").write_text("<div></div><p></p>", encoding="utf-8")
    (src / "notes.txt").write_text("not a template", encoding="utf-8")

    out = tmp_path / "out"
    summary = build_directory(src, out_dir=out, formatter=NullFormatter())
    assert summary.components == 2
    assert summary.out_dir == out
    assert [p.name for p in summary.outputs] == ["footer_vgen.py", "nav_bar_vgen.py"]

    module = import_module_from_path(out / "nav_bar_vgen.py", "nav_bar_vgen")
    vdom, _ = module.NavBar().build_vdom(module.NavBarData())
    assert vdom.get_attr("class") == "nav-bar"


def test_black_formatter_missing_executable(tmp_path: Path) -> None:
    formatter = BlackFormatter(work_dir=tmp_path, command=[str(tmp_path / "no-such-black")])
    with pytest.raises(FormattingError, match="could not run formatter"):
        formatter.format("x = 1\n")
    assert list(tmp_path.iterdir()) == []


def test_black_formatter_timeout(tmp_path: Path) -> None:
    formatter = BlackFormatter(
        work_dir=tmp_path,
        timeout=0.5,
        command=[sys.executable, "-c", "import time; time.sleep(10)"],
    )
    with pytest.raises(FormattingError, match="timed out") as exc_info:
        formatter.format("x = 1\n")
    assert exc_info.value.source == "x = 1\n"
    assert list(tmp_path.iterdir()) == []


class TestBlack:
    @pytest.fixture(autouse=True)
    def _require_black(self) -> None:
        pytest.importorskip("black")

    def test_formats_generated_module(self, tmp_path: Path) -> None:
        builder = ComponentBuilder(
            BuildConfig("Comp", "CompData", tmp_path, "comp_vgen.py")
        )
        template = '<ul><li vg-for="i in data.items" :x="i"></li></ul>' + COMPONENT_SCRIPT
        out_path = builder.build(template)
        text = out_path.read_text(encoding="utf-8")
        assert '"x": i' in text
        assert [p.name for p in tmp_path.iterdir()] == ["comp_vgen.py"]

        module = import_module_from_path(out_path, "comp_vgen_black")
        vdom, _ = module.Comp().build_vdom(module.CompData(items=[1, 2]))
        assert [li.props["x"] for li in vdom.children] == [1, 2]

        # formatting is stable across runs
        assert builder.build(template).read_text(encoding="utf-8") == text

    def test_invalid_program_keeps_raw_output(self, tmp_path: Path) -> None:
        builder = ComponentBuilder(
            BuildConfig("Comp", "CompData", tmp_path, "comp_vgen.py")
        )
        template = '<div vg-if="data.count >"></div>' + COMPONENT_SCRIPT
        with pytest.raises(FormattingError, match="black exited"):
            builder.build(template)

        raw = (tmp_path / "comp_vgen.py").read_text(encoding="utf-8")
        assert "if data.count >:" in raw
        assert [p.name for p in tmp_path.iterdir()] == ["comp_vgen.py"]


def test_build_without_script_imports_cleanly(tmp_path: Path) -> None:
    out_path = make_builder(tmp_path).build('<div><p vg-html="data"></p></div>')

    module = import_module_from_path(out_path, "comp_vgen_free")
    assert not hasattr(module, "Comp")
    vdom, css = module.build_vdom(None, "hello")
    assert vdom.children[0].inner_html == "hello"
    assert css is None


def test_build_without_script_uses_component_module(tmp_path: Path) -> None:
    (tmp_path / "widgets.py").write_text(
        "class Widget:\n    pass\n\n\nclass WidgetData:\n    title = 'hi'\n",
        encoding="utf-8",
    )
    config = BuildConfig(
        component_type="Widget",
        data_type="WidgetData",
        out_dir=tmp_path,
        out_file="widget_vgen.py",
        component_module="widgets",
    )
    builder = ComponentBuilder(config, formatter=NullFormatter())
    out_path = builder.build('<h1 vg-html="data.title"></h1>')
    assert "from widgets import Widget, WidgetData" in out_path.read_text(encoding="utf-8")

    sys.path.insert(0, str(tmp_path))
    try:
        module = import_module_from_path(out_path, "widget_vgen")
        vdom, _ = module.Widget().build_vdom(module.WidgetData())
    finally:
        sys.path.remove(str(tmp_path))
        sys.modules.pop("widgets", None)
    assert vdom.inner_html == "hi"


def test_build_file_reports_template_path(tmp_path: Path) -> None:
    template = tmp_path / "broken.vugu"
    template.write_text("<div></div>\n<p></p>", encoding="utf-8")
    with pytest.raises(StructuralError) as exc_info:
        make_builder(tmp_path).build_file(template)
    assert exc_info.value.file_path == str(template)


def test_unwritable_fallback_keeps_formatting_error(tmp_path: Path) -> None:
    builder = make_builder(tmp_path, formatter=RejectingFormatter())
    # a directory in the output file's place makes the raw write fail
    (tmp_path / "comp_vgen.py").mkdir()
    with pytest.raises(FormattingError, match="rejected"):
        builder.build("<div></div>" + COMPONENT_SCRIPT)
