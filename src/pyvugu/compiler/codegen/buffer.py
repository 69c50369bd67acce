"""Indented, append-only text buffer for generated programs."""

from typing import List


class ProgramBuffer:
    INDENT = "    "

    def __init__(self) -> None:
        self._lines: List[str] = []
        self.depth = 0

    def line(self, text: str = "") -> None:
        if text:
            self._lines.append(f"{self.INDENT * self.depth}{text}")
        else:
            self._lines.append("")

    def open(self, header: str) -> None:
        """Emit a block header (``if ...:``, ``for ...:``) and indent."""
        self.line(header)
        self.depth += 1

    def close(self) -> None:
        if self.depth == 0:
            raise RuntimeError("close() without a matching open()")
        self.depth -= 1

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"
