"""Resolution of ``@event`` handler expressions."""

import ast
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import xxhash

from pyvugu.compiler.codegen.buffer import ProgramBuffer
from pyvugu.compiler.codegen.names import METHOD_VAR, NODE_VAR, RECEIVER_VAR
from pyvugu.compiler.exceptions import DirectiveParseError


@dataclass
class EventBinding:
    """A handler call split into receiver, method name and arguments.

    ``receiver`` is empty for plain function calls. An empty
    ``method_name`` means the expression could not be decomposed.
    """

    receiver: str
    method_name: str
    arg_list: str
    # (name, expression); name is None for ``**mapping``
    keywords: List[Tuple[Optional[str], str]] = field(default_factory=list)

    @property
    def is_bound_method(self) -> bool:
        return bool(self.receiver)

    @property
    def callee(self) -> str:
        if self.receiver:
            return f"{self.receiver}.{self.method_name}"
        return self.method_name

    @property
    def kwargs_literal(self) -> str:
        entries = [
            f"**{value}" if key is None else f"{key!r}: {value}"
            for key, value in self.keywords
        ]
        return "{" + ", ".join(entries) + "}"

    @property
    def call_args(self) -> str:
        parts = [self.arg_list] if self.arg_list else []
        for key, value in self.keywords:
            parts.append(f"**{value}" if key is None else f"{key}={value}")
        return ", ".join(parts)

    def static_hash(self) -> int:
        """64-bit hash of the method name, used for free functions."""
        return xxhash.xxh64_intdigest(self.method_name.encode("utf-8"))


_PLAIN_RECEIVERS = (ast.Name, ast.Attribute, ast.Call, ast.Subscript)


def _segment(source: str, node: ast.AST) -> str:
    segment = ast.get_source_segment(source, node)
    if segment is None:
        return ast.unparse(node)
    return segment


def parse_event_expr(expr: str) -> EventBinding:
    source = expr.strip()
    failed = EventBinding("", "", "")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError:
        return failed

    call = tree.body
    if not isinstance(call, ast.Call):
        return failed

    func = call.func
    if isinstance(func, ast.Attribute):
        receiver = _segment(source, func.value)
        if not isinstance(func.value, _PLAIN_RECEIVERS):
            receiver = f"({receiver})"
        method_name = func.attr
    elif isinstance(func, ast.Name):
        receiver = ""
        method_name = func.id
    else:
        return failed

    args = ", ".join(_segment(source, a) for a in call.args)
    keywords = [(kw.arg, _segment(source, kw.value)) for kw in call.keywords]

    return EventBinding(receiver, method_name, args, keywords)


def resolve_event(
    name: str, expr: str, file_path: Optional[str] = None, line: Optional[int] = None
) -> EventBinding:
    binding = parse_event_expr(expr)
    if not binding.method_name:
        raise DirectiveParseError(
            f"unable to parse DOM event handler expression {expr!r} for @{name}",
            file_path=file_path,
            line=line,
        )
    return binding


def emit_event_handler(
    buf: ProgramBuffer, name: str, expr: str, binding: EventBinding
) -> None:
    """Register the handler on the current node and add a type-checked call stanza."""
    buf.line(f"# @{name} = {{ {' '.join(expr.split())} }}")

    if binding.is_bound_method:
        buf.line(f"{RECEIVER_VAR} = {binding.receiver}")
        buf.line(f"{METHOD_VAR} = {RECEIVER_VAR}.{binding.method_name}")
        identity = (
            f"hash((id(type({RECEIVER_VAR})), id({RECEIVER_VAR}), "
            f"id(type({METHOD_VAR})), "
            f"id(getattr({METHOD_VAR}, '__func__', {METHOD_VAR}))))"
        )
        method = METHOD_VAR
    else:
        identity = str(binding.static_hash())
        method = binding.method_name

    buf.open(f"{NODE_VAR}.set_dom_event_handler(")
    buf.line(f"{name!r},")
    buf.open("vugu.DOMEventHandler(")
    buf.line(f"receiver_and_method_hash={identity},")
    buf.line(f"method={method},")
    buf.line(f"args=[{binding.arg_list}],")
    if binding.keywords:
        buf.line(f"kwargs={binding.kwargs_literal},")
    buf.close()
    buf.line("),")
    buf.close()
    buf.line(")")

    # never runs; type checkers still verify the call
    buf.open("if typing.TYPE_CHECKING:")
    buf.line(f"{binding.callee}({binding.call_args})")
    buf.close()
