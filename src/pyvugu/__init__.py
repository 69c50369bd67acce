from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvugu")
except PackageNotFoundError:
    __version__ = "unknown"

from pyvugu.compiler.build import (
    BuildConfig,
    BuildSummary,
    ComponentBuilder,
    build_directory,
)
from pyvugu.compiler.exceptions import (
    ContentError,
    DirectiveParseError,
    FormattingError,
    FragmentParseError,
    StructuralError,
    VuguCompileError,
)
from pyvugu.runtime.vdom import DOMEventHandler, Props, VGNode, VGNodeType

__all__ = [
    "BuildConfig",
    "BuildSummary",
    "ComponentBuilder",
    "build_directory",
    "ContentError",
    "DirectiveParseError",
    "FormattingError",
    "FragmentParseError",
    "StructuralError",
    "VuguCompileError",
    "DOMEventHandler",
    "Props",
    "VGNode",
    "VGNodeType",
]
