"""Fragment parser: markup text to an arena of template nodes."""

import logging
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Tuple

from pyvugu.compiler.exceptions import FragmentParseError
from pyvugu.runtime.vdom import VGAttribute, VGNodeType

log = logging.getLogger(__name__)


@dataclass
class TemplateNode:
    """One node of a parsed fragment.

    Tree links are indices into the owning ``Fragment.nodes`` list.
    """

    index: int
    type: VGNodeType
    data: str
    namespace: str = ""
    attr: List[VGAttribute] = field(default_factory=list)
    line: int = 0
    parent: Optional[int] = None
    first_child: Optional[int] = None
    next_sibling: Optional[int] = None
    last_child: Optional[int] = None

    @property
    def data_atom(self) -> str:
        """Tag identifier: the lower-cased tag of an element, empty otherwise."""
        if self.type == VGNodeType.ELEMENT:
            return self.data.lower()
        return ""

    def get_attr(self, key: str) -> Optional[str]:
        for a in self.attr:
            if a.key == key:
                return a.val
        return None


@dataclass
class Fragment:
    """A parsed fragment: node arena plus the detached top-level nodes."""

    nodes: List[TemplateNode] = field(default_factory=list)
    top: List[int] = field(default_factory=list)
    file_path: str = ""

    def __getitem__(self, index: int) -> TemplateNode:
        return self.nodes[index]

    def top_nodes(self) -> List[TemplateNode]:
        return [self.nodes[i] for i in self.top]

    def children(self, index: int) -> Iterator[TemplateNode]:
        child = self.nodes[index].first_child
        while child is not None:
            yield self.nodes[child]
            child = self.nodes[child].next_sibling

    def add(
        self,
        parent: Optional[int],
        type: VGNodeType,
        data: str,
        namespace: str = "",
        attr: Optional[List[VGAttribute]] = None,
        line: int = 0,
    ) -> TemplateNode:
        node = TemplateNode(
            index=len(self.nodes),
            type=type,
            data=data,
            namespace=namespace,
            attr=list(attr or []),
            line=line,
            parent=parent,
        )
        self.nodes.append(node)
        if parent is None:
            # top-level nodes are detached from each other
            self.top.append(node.index)
            return node
        p = self.nodes[parent]
        if p.last_child is None:
            p.first_child = node.index
        else:
            self.nodes[p.last_child].next_sibling = node.index
        p.last_child = node.index
        return node


class FragmentParser(Protocol):
    def parse_fragment(self, text: str, file_path: str = "") -> Fragment: ...

    def parse_file(self, file_path: Path) -> Fragment: ...


class _FragmentBuilder(HTMLParser):
    VOID_ELEMENTS = {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }

    FOREIGN_ROOTS = {"svg": "svg", "math": "math"}

    def __init__(self, file_path: str) -> None:
        super().__init__(convert_charrefs=True)
        self.fragment = Fragment(file_path=file_path)
        self.stack: List[int] = []

    @property
    def current(self) -> Optional[int]:
        return self.stack[-1] if self.stack else None

    def _namespace_for(self, tag: str) -> str:
        if self.stack:
            ns = self.fragment[self.stack[-1]].namespace
            if ns:
                return ns
        return self.FOREIGN_ROOTS.get(tag, "")

    def _element(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> TemplateNode:
        return self.fragment.add(
            self.current,
            VGNodeType.ELEMENT,
            tag,
            namespace=self._namespace_for(tag),
            attr=[VGAttribute("", k, v if v is not None else "") for k, v in attrs],
            line=self.getpos()[0],
        )

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        node = self._element(tag, attrs)
        if tag not in self.VOID_ELEMENTS:
            self.stack.append(node.index)

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self._element(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        if tag in self.VOID_ELEMENTS:
            return
        for depth in range(len(self.stack) - 1, -1, -1):
            if self.fragment[self.stack[depth]].data == tag:
                # closing an ancestor implicitly closes everything inside it
                del self.stack[depth:]
                return
        raise FragmentParseError(
            f"unexpected closing tag </{tag}>",
            file_path=self.fragment.file_path or None,
            line=self.getpos()[0],
        )

    def handle_data(self, data: str) -> None:
        parent = self.current
        last = self.fragment[parent].last_child if parent is not None else None
        if last is None and parent is None and self.fragment.top:
            last = self.fragment.top[-1]
        if last is not None and self.fragment[last].type == VGNodeType.TEXT:
            self.fragment[last].data += data
            return
        self.fragment.add(
            parent,
            VGNodeType.TEXT,
            data,
            namespace=self._namespace_for(""),
            line=self.getpos()[0],
        )

    def handle_comment(self, data: str) -> None:
        self.fragment.add(
            self.current, VGNodeType.COMMENT, data, line=self.getpos()[0]
        )

    def handle_decl(self, decl: str) -> None:
        log.debug("Ignoring declaration <!%s> in fragment", decl)


class HTMLFragmentParser:
    """Parses template markup with the standard library HTML tokenizer."""

    def parse_fragment(self, text: str, file_path: str = "") -> Fragment:
        builder = _FragmentBuilder(file_path)
        try:
            builder.feed(text)
            builder.close()
        except FragmentParseError:
            raise
        except Exception as e:
            raise FragmentParseError(
                f"Parser error: {str(e)}", file_path=file_path or None
            ) from e

        if builder.stack:
            unclosed = ", ".join(builder.fragment[i].data for i in builder.stack)
            log.debug("Implicitly closing <%s> at end of fragment", unclosed)

        return builder.fragment

    def parse_file(self, file_path: Path) -> Fragment:
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return self.parse_fragment(content, str(file_path))
