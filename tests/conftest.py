from pathlib import Path
from typing import Any

import pytest
from pyvugu.compiler.build import ComponentBuilder

from helpers import COMPONENT_SCRIPT, exec_module, make_builder


@pytest.fixture
def builder(tmp_path: Path) -> ComponentBuilder:
    return make_builder(tmp_path)


@pytest.fixture
def render(builder: ComponentBuilder):
    """Compile a template body (plus the shared script) and build its vdom."""

    def _render(template: str, **data: Any):
        source = builder.compile(template + COMPONENT_SCRIPT)
        ns = exec_module(source)
        comp = ns["Comp"]()
        vdom, css = comp.build_vdom(ns["CompData"](**data))
        return comp, vdom, css

    return _render
