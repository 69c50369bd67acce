"""Tree-walking compiler: template nodes to VGNode construction code."""

import logging
from typing import List, Optional, Tuple

from pyvugu.compiler.codegen.buffer import ProgramBuffer
from pyvugu.compiler.codegen.events import emit_event_handler, resolve_event
from pyvugu.compiler.codegen.names import NODE_VAR, VDOM_VAR, check_loop_target, parent_var
from pyvugu.compiler.directives import extract_directives, static_attributes
from pyvugu.compiler.parser import Fragment, TemplateNode
from pyvugu.runtime.vdom import VGAttribute, VGNodeType

log = logging.getLogger(__name__)


def attr_literal(attrs: List[VGAttribute]) -> str:
    items = ", ".join(
        f"vugu.VGAttribute({a.namespace!r}, {a.key!r}, {a.val!r})" for a in attrs
    )
    return f"[{items}]"


def node_literal(node: TemplateNode, attrs: Optional[List[VGAttribute]] = None) -> str:
    """Constructor call that rebuilds ``node`` from literal data only."""
    if attrs is None:
        attrs = static_attributes(node)
    return (
        f"vugu.VGNode(type=vugu.VGNodeType.{VGNodeType(node.type).name}, "
        f"data={node.data!r}, data_atom={node.data_atom!r}, "
        f"namespace={node.namespace!r}, attr={attr_literal(attrs)})"
    )


class TemplateCodegen:
    """Emits statements that rebuild a template tree as VGNodes.

    The walk is iterative and pre-order. Each element with children opens a
    ``with vg_n as vg_parent_<depth>:`` scope, so the children always append to
    the parent of their own depth. ``vg-if``/``vg-for`` blocks are recorded
    per node and closed once the walk leaves that node's subtree.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = file_path

    def generate(self, fragment: Fragment, root: TemplateNode, buf: ProgramBuffer) -> None:
        close_req = [False] * len(fragment.nodes)
        start_depth = buf.depth
        scope = 0
        visited = 0

        n: Optional[TemplateNode] = root
        while n is not None:
            visited += 1
            directives = extract_directives(n)

            # vg-if and vg-for are mutually exclusive, vg-if wins
            if directives.if_expr:
                buf.open(f"if {directives.if_expr}:")
            elif directives.for_expr:
                check_loop_target(directives.for_expr, file_path=self.file_path, line=n.line)
                buf.open(f"for {directives.for_expr}:")
                if directives.is_loop_shorthand:
                    buf.line("_ = key, value")
            close_req[n.index] = directives.opens_block

            buf.line(f"{NODE_VAR} = {node_literal(n)}")
            if n is root:
                buf.line(f"{VDOM_VAR} = {NODE_VAR}")
            else:
                buf.line(f"{parent_var(scope)}.append_child({NODE_VAR})")

            if directives.html_expr:
                buf.line(f"{NODE_VAR}.inner_html = str({directives.html_expr})")

            if directives.props:
                buf.open(f"{NODE_VAR}.props = vugu.Props(")
                buf.open("{")
                for key in sorted(directives.props):
                    buf.line(f"{key!r}: {directives.props[key]},")
                buf.close()
                buf.line("}")
                buf.close()
                buf.line(")")

            for key in sorted(directives.events):
                expr = directives.events[key]
                binding = resolve_event(key, expr, file_path=self.file_path, line=n.line)
                emit_event_handler(buf, key, expr, binding)

            if n.first_child is not None:
                scope += 1
                buf.open(f"with {NODE_VAR} as {parent_var(scope)}:")
                n = fragment[n.first_child]
                continue

            if n.next_sibling is not None:
                if close_req[n.index]:
                    buf.close()
                n = fragment[n.next_sibling]
                continue

            if close_req[n.index]:
                buf.close()

            # go back up toward the root until an ancestor has a next sibling
            n, ascended = self._unwind(fragment, n, close_req, buf)
            scope -= ascended

        if buf.depth != start_depth:
            raise RuntimeError(
                f"unbalanced blocks after walk: depth {buf.depth}, expected {start_depth}"
            )
        log.debug("Compiled %d template nodes from <%s>", visited, root.data)

    def _unwind(
        self,
        fragment: Fragment,
        n: TemplateNode,
        close_req: List[bool],
        buf: ProgramBuffer,
    ) -> Tuple[Optional[TemplateNode], int]:
        ascended = 0
        parent = n.parent
        while parent is not None:
            p = fragment[parent]
            if close_req[p.index]:
                buf.close()
            buf.close()
            ascended += 1
            if p.next_sibling is not None:
                return fragment[p.next_sibling], ascended
            parent = p.parent
        return None, ascended
