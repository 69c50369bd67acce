import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pyvugu.compiler.build import BuildConfig, ComponentBuilder
from pyvugu.compiler.formatter import Formatter, NullFormatter

COMPONENT_SCRIPT = """
<script type="application/x-python">
class Comp:
    def __init__(self):
        self.clicks = []

    def on_click(self, event, row):
        self.clicks.append(row)


class CompData:
    def __init__(self, items=(), count=0, name="", locked=False, html=""):
        self.items = list(items)
        self.count = count
        self.name = name
        self.locked = locked
        self.html = html


def handle_click(event, row):
    return row
</script>
"""


def make_builder(out_dir: Path, formatter: Optional[Formatter] = None) -> ComponentBuilder:
    config = BuildConfig(
        component_type="Comp",
        data_type="CompData",
        out_dir=out_dir,
        out_file="comp_vgen.py",
    )
    return ComponentBuilder(config, formatter=formatter or NullFormatter())


def exec_module(source: str) -> Dict[str, Any]:
    namespace: Dict[str, Any] = {"__name__": "comp_vgen"}
    exec(compile(source, "comp_vgen.py", "exec"), namespace)
    return namespace


def import_module_from_path(path: Path, name: str) -> Any:
    spec = importlib.util.spec_from_file_location(name, path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(name, None)
    return module
