"""Local variable names used by generated ``build_vdom`` functions.

Template expressions share the function scope with these names, so they all
carry the reserved ``vg_`` prefix and loop targets may not use it.
"""

import ast
from typing import Iterator, Optional

from pyvugu.compiler.exceptions import DirectiveParseError

RESERVED_PREFIX = "vg_"

NODE_VAR = "vg_n"
VDOM_VAR = "vg_vdom"
CSS_VAR = "vg_css"
RECEIVER_VAR = "vg_i"
METHOD_VAR = "vg_i2"


def parent_var(depth: int) -> str:
    return f"{RESERVED_PREFIX}parent_{depth}"


def is_reserved(name: str) -> bool:
    return name.startswith(RESERVED_PREFIX)


def _bound_names(target: ast.AST) -> Iterator[str]:
    for node in ast.walk(target):
        if isinstance(node, ast.Name):
            yield node.id


def check_loop_target(
    for_expr: str, file_path: Optional[str] = None, line: Optional[int] = None
) -> None:
    """Reject a ``vg-for`` expression that is not ``<target> in <iterable>``
    or whose target would overwrite a generated variable."""
    try:
        tree = ast.parse(f"for {for_expr}:\n    pass\n")
    except SyntaxError as e:
        raise DirectiveParseError(
            f"unable to parse vg-for expression {for_expr!r}: {e.msg}",
            file_path=file_path,
            line=line,
        ) from e

    loop = tree.body[0]
    if len(tree.body) != 1 or not isinstance(loop, ast.For):
        raise DirectiveParseError(
            f"vg-for expression {for_expr!r} is not a single loop header",
            file_path=file_path,
            line=line,
        )
    for name in _bound_names(loop.target):
        if is_reserved(name):
            raise DirectiveParseError(
                f"vg-for target {name!r} uses the reserved prefix {RESERVED_PREFIX!r}",
                file_path=file_path,
                line=line,
            )
