"""Code generators for scaffolding."""

from pathlib import Path

from pyvugu.compiler.build import TEMPLATE_SUFFIX, component_type_name


def generate_component(name: str, directory: Path = Path(".")) -> Path:
    """Generate a new component template."""
    directory.mkdir(parents=True, exist_ok=True)

    template_file = directory / f"{name}{TEMPLATE_SUFFIX}"

    if template_file.exists():
        raise ValueError(f"Component {name} already exists")

    class_name = component_type_name(template_file)

    template = f"""<div class="{name}">
    <h1>{class_name}</h1>
    <ul>
        <li vg-for="item in data.items" vg-html="item"></li>
    </ul>
    <button @click="comp.add_item(event, data)">Add</button>
</div>

<style>
.{name} {{ padding: 1em; }}
</style>

<script type="application/x-python">
from dataclasses import dataclass, field


@dataclass
class {class_name}Data:
    items: list = field(default_factory=list)


class {class_name}:
    def add_item(self, event, data):
        data.items.append(len(data.items))
</script>
"""

    template_file.write_text(template, encoding="utf-8")
    return template_file
