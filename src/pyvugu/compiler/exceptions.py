"""Errors raised while compiling a template."""

from typing import Optional


class VuguCompileError(Exception):
    """Base class for template compile failures."""

    def __init__(
        self, message: str, file_path: Optional[str] = None, line: Optional[int] = None
    ):
        self.message = message
        self.file_path = file_path
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.file_path and self.line is not None:
            return f"{self.file_path}:{self.line}: {self.message}"
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class FragmentParseError(VuguCompileError):
    """The markup could not be parsed into a fragment tree."""

    pass


class StructuralError(VuguCompileError):
    """Wrong number of root, style or script nodes at the top level."""

    pass


class ContentError(VuguCompileError):
    """A marker node has content of an unexpected shape."""

    pass


class DirectiveParseError(VuguCompileError):
    """A directive value (e.g. an event handler call) cannot be decomposed."""

    pass


class FormattingError(VuguCompileError):
    """The source formatter rejected the generated program.

    ``source`` holds the unformatted text so callers can still persist it.
    """

    def __init__(
        self,
        message: str,
        source: str = "",
        file_path: Optional[str] = None,
        line: Optional[int] = None,
    ):
        self.source = source
        super().__init__(message, file_path=file_path, line=line)
