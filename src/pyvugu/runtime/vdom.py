"""Virtual DOM nodes built by generated component code."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable


class VGNodeType(IntEnum):
    """Node kinds, numbered like the HTML tokenizer's node types."""

    ERROR = 0
    TEXT = 1
    DOCUMENT = 2
    ELEMENT = 3
    COMMENT = 4
    DOCTYPE = 5


@dataclass(frozen=True)
class VGAttribute:
    namespace: str
    key: str
    val: str


class Props(Dict[str, Any]):
    """Dynamic property values bound with ``:name`` attributes."""

    pass


class DOMEvent:
    """A DOM event delivered to a handler."""

    def __init__(self, event_type: str = "", data: Optional[Dict[str, Any]] = None):
        self.type = event_type
        self.data = data or {}

    def __repr__(self) -> str:
        return f"DOMEvent({self.type!r})"


# Placeholder bound to ``event`` inside generated code; the runtime swaps in
# the real event when a handler fires.
DOM_EVENT_STUB = DOMEvent("stub")


@dataclass
class DOMEventHandler:
    """A registered event handler.

    ``receiver_and_method_hash`` identifies the receiver/method pair so two
    renders can be compared without deep equality. It is never used to look
    the handler up.
    """

    receiver_and_method_hash: int
    method: Callable[..., Any]
    args: List[Any] = field(default_factory=list)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def same_handler(self, other: "DOMEventHandler") -> bool:
        return self.receiver_and_method_hash == other.receiver_and_method_hash


class VGNode:
    """A node in the virtual tree.

    Entering a node as a context manager yields the node itself; generated
    code uses this to bind the parent of the children that follow.
    """

    def __init__(
        self,
        type: VGNodeType = VGNodeType.ELEMENT,
        data: str = "",
        data_atom: str = "",
        namespace: str = "",
        attr: Optional[List[VGAttribute]] = None,
    ) -> None:
        self.type = VGNodeType(type)
        self.data = data
        self.data_atom = data_atom
        self.namespace = namespace
        self.attr: List[VGAttribute] = list(attr or [])
        self.parent: Optional["VGNode"] = None
        self.children: List["VGNode"] = []
        self.inner_html: Optional[str] = None
        self.props: Props = Props()
        self.dom_event_handlers: Dict[str, DOMEventHandler] = {}

    def __enter__(self) -> "VGNode":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def __repr__(self) -> str:
        return f"VGNode({self.type.name}, {self.data!r})"

    def append_child(self, child: "VGNode") -> None:
        if child.parent is not None:
            raise ValueError(f"{child!r} already has a parent")
        child.parent = self
        self.children.append(child)

    def set_dom_event_handler(self, name: str, handler: DOMEventHandler) -> None:
        self.dom_event_handlers[name] = handler

    def get_attr(self, key: str) -> Optional[str]:
        for a in self.attr:
            if a.key == key:
                return a.val
        return None

    def walk(self):
        """Yield this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@runtime_checkable
class ComponentType(Protocol):
    """What a compiled component class provides."""

    def build_vdom(self, data_i: Any) -> Any: ...
