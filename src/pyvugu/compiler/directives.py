"""Directive attributes recognised on template elements."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List

from pyvugu.compiler.parser import TemplateNode
from pyvugu.runtime.vdom import VGAttribute

log = logging.getLogger(__name__)

IF_ATTR = "vg-if"
FOR_ATTR = "vg-for"
HTML_ATTR = "vg-html"
DIRECTIVE_PREFIX = "vg-"
PROP_SIGIL = ":"
EVENT_SIGIL = "@"

# "key, value in items" - the loop variables may go unused
_LOOP_SHORTHAND_RE = re.compile(r"^\s*key\s*,\s*value\s+in\s")


@dataclass
class NodeDirectives:
    if_expr: str = ""
    for_expr: str = ""
    html_expr: str = ""
    props: Dict[str, str] = field(default_factory=dict)
    events: Dict[str, str] = field(default_factory=dict)

    @property
    def is_loop_shorthand(self) -> bool:
        return bool(self.for_expr) and bool(_LOOP_SHORTHAND_RE.match(self.for_expr))

    @property
    def opens_block(self) -> bool:
        return bool(self.if_expr or self.for_expr)


def is_directive_key(key: str) -> bool:
    return (
        key.startswith(DIRECTIVE_PREFIX)
        or key.startswith(PROP_SIGIL)
        or key.startswith(EVENT_SIGIL)
    )


def static_attributes(node: TemplateNode) -> List[VGAttribute]:
    """Attributes that are emitted literally, i.e. everything but directives."""
    return [a for a in node.attr if not is_directive_key(a.key)]


def extract_directives(node: TemplateNode) -> NodeDirectives:
    directives = NodeDirectives()

    for a in node.attr:
        key = a.key
        if key == IF_ATTR:
            directives.if_expr = a.val.strip()
        elif key == FOR_ATTR:
            directives.for_expr = a.val.strip()
        elif key == HTML_ATTR:
            directives.html_expr = a.val.strip()
        elif key.startswith(PROP_SIGIL) and len(key) > len(PROP_SIGIL):
            directives.props[key[len(PROP_SIGIL) :]] = a.val
        elif key.startswith(EVENT_SIGIL) and len(key) > len(EVENT_SIGIL):
            directives.events[key[len(EVENT_SIGIL) :]] = a.val

    if directives.if_expr and directives.for_expr:
        log.warning(
            "<%s> (line %d) has both %s and %s; only %s is honoured",
            node.data,
            node.line,
            IF_ATTR,
            FOR_ATTR,
            IF_ATTR,
        )

    return directives
