"""Main code generator: wraps the template walk into a Python module."""

import logging
import textwrap
from typing import Optional

from pyvugu.compiler.classifier import ClassifiedFragment
from pyvugu.compiler.codegen.buffer import ProgramBuffer
from pyvugu.compiler.codegen.names import CSS_VAR, NODE_VAR, VDOM_VAR
from pyvugu.compiler.codegen.template import TemplateCodegen, node_literal
from pyvugu.compiler.exceptions import ContentError
from pyvugu.compiler.parser import Fragment, TemplateNode
from pyvugu.runtime.vdom import VGNodeType

log = logging.getLogger(__name__)

HEADER = (
    "# DO NOT EDIT: This file was generated by pyvugu. Please regenerate instead "
    "of editing or add additional code in a separate file."
)
RUNTIME_MODULE = "pyvugu.runtime"
OPTIONAL_NODE = "typing.Optional[vugu.VGNode]"


class CodeGenerator:
    """Generates the Python module for one component template.

    The component class comes from the template's embedded script or, when
    there is none, from ``component_module``. With neither, only the free
    ``build_vdom`` function is emitted.
    """

    def __init__(
        self, component_type: str, data_type: str, component_module: Optional[str] = None
    ) -> None:
        self.component_type = component_type
        self.data_type = data_type
        self.component_module = component_module

    def generate(self, fragment: Fragment, classified: ClassifiedFragment) -> str:
        file_path = fragment.file_path or None
        buf = ProgramBuffer()

        buf.line(HEADER)
        buf.line()
        buf.line("import typing")
        buf.line()
        buf.line(f"from {RUNTIME_MODULE} import vdom as vugu")

        has_component = True
        if classified.script is not None:
            buf.line()
            buf.line(self._script_source(fragment, classified.script, file_path))
        elif self.component_module:
            buf.line(
                f"from {self.component_module} import {self.component_type}, {self.data_type}"
            )
        else:
            log.debug(
                "No script or component module for %s, emitting a free build_vdom",
                self.component_type,
            )
            has_component = False
        buf.line()

        comp_annotation = repr(self.component_type) if has_component else "typing.Any"
        buf.line()
        buf.open(
            f"def build_vdom(comp: {comp_annotation}, data_i: typing.Any) "
            f"-> typing.Tuple[{OPTIONAL_NODE}, {OPTIONAL_NODE}]:"
        )
        if has_component:
            buf.line(f"data = typing.cast({self.data_type!r}, data_i)")
        else:
            buf.line("data = data_i")
        buf.line("_ = data")
        buf.line("event = vugu.DOM_EVENT_STUB")
        buf.line("_ = event")
        buf.line(f"{VDOM_VAR}: {OPTIONAL_NODE} = None")
        buf.line(f"{CSS_VAR}: {OPTIONAL_NODE} = None")

        style = classified.style
        if style is not None and style.first_child is not None:
            buf.line(f"{CSS_VAR} = {node_literal(style)}")
            buf.line(f"{CSS_VAR}.append_child({node_literal(fragment[style.first_child])})")

        buf.line(f"{NODE_VAR}: vugu.VGNode")
        TemplateCodegen(file_path=file_path).generate(fragment, classified.root, buf)

        buf.line(f"return {VDOM_VAR}, {CSS_VAR}")
        buf.close()

        if not has_component:
            return buf.getvalue()

        buf.line()
        buf.line()
        buf.line(f"{self.component_type}.build_vdom = build_vdom  # type: ignore[attr-defined]")
        buf.line()
        # statically check that the component conforms to vugu.ComponentType
        buf.open("if typing.TYPE_CHECKING:")
        buf.line(f"_component_check: typing.Type[vugu.ComponentType] = {self.component_type}")
        buf.close()

        return buf.getvalue()

    def _script_source(
        self, fragment: Fragment, script: TemplateNode, file_path: Optional[str]
    ) -> str:
        if script.first_child is None:
            raise ContentError(
                "found script tag with no contents", file_path=file_path, line=script.line
            )
        txt = fragment[script.first_child]
        if txt.type != VGNodeType.TEXT or txt.next_sibling is not None:
            raise ContentError(
                f"found script tag with bad contents (wrong type): {txt.type.name}",
                file_path=file_path,
                line=script.line,
            )
        log.debug("Embedding %d characters of script source", len(txt.data))
        return textwrap.dedent(txt.data).strip("\n")
