"""Split a fragment's top-level nodes into root, style and script."""

import logging
from dataclasses import dataclass
from typing import Optional

from pyvugu.compiler.exceptions import StructuralError
from pyvugu.compiler.parser import Fragment, TemplateNode
from pyvugu.runtime.vdom import VGNodeType

log = logging.getLogger(__name__)

SCRIPT_TYPE = "application/x-python"


@dataclass
class ClassifiedFragment:
    root: TemplateNode
    style: Optional[TemplateNode] = None
    script: Optional[TemplateNode] = None


def classify_fragment(fragment: Fragment) -> ClassifiedFragment:
    """Find the single content root plus the optional style and script nodes.

    Non-element top-level nodes (whitespace, comments) are ignored.
    """
    file_path = fragment.file_path or None
    root: Optional[TemplateNode] = None
    style: Optional[TemplateNode] = None
    script: Optional[TemplateNode] = None

    for node in fragment.top_nodes():
        if node.type != VGNodeType.ELEMENT:
            continue

        if node.data_atom == "style":
            if style is not None:
                raise StructuralError(
                    "more than one <style> tag not allowed",
                    file_path=file_path,
                    line=node.line,
                )
            style = node
            continue

        if node.data_atom == "script":
            if node.get_attr("type") != SCRIPT_TYPE:
                raise StructuralError(
                    f'<script> tag without type="{SCRIPT_TYPE}" not allowed',
                    file_path=file_path,
                    line=node.line,
                )
            if script is not None:
                raise StructuralError(
                    f'more than one <script type="{SCRIPT_TYPE}"> tag not allowed',
                    file_path=file_path,
                    line=node.line,
                )
            script = node
            continue

        if root is not None:
            raise StructuralError(
                "found more than one root elements, not allowed",
                file_path=file_path,
                line=node.line,
            )
        root = node

    if root is None:
        raise StructuralError("no root element", file_path=file_path)

    log.debug(
        "Classified fragment: root=<%s> style=%s script=%s",
        root.data,
        style is not None,
        script is not None,
    )
    return ClassifiedFragment(root=root, style=style, script=script)
