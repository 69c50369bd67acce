"""Source formatters applied to generated programs."""

import logging
import os
import subprocess
import sys
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import List, Optional, Protocol, Union

from pyvugu.compiler.exceptions import FormattingError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class Formatter(Protocol):
    def format(self, text: str) -> str: ...


class NullFormatter:
    """Leaves generated source untouched."""

    def format(self, text: str) -> str:
        return text


class BlackFormatter:
    """Formats generated source by running black on a temporary file.

    The temporary file lives in ``work_dir`` (the output directory when
    building) and is removed on every exit path.
    """

    def __init__(
        self,
        work_dir: Optional[Union[str, Path]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        command: Optional[List[str]] = None,
    ) -> None:
        self.work_dir = Path(work_dir) if work_dir is not None else None
        self.timeout = timeout
        self.command = command or [sys.executable, "-m", "black", "--quiet"]

    def format(self, text: str) -> str:
        fd, name = tempfile.mkstemp(
            prefix="pyvugu-", suffix=".py", dir=self.work_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)

            args = [*self.command, name]
            log.debug("Running formatter: %s", args)
            try:
                result = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                raise FormattingError(
                    f"formatter timed out after {self.timeout}s", source=text
                )
            except OSError as e:
                raise FormattingError(f"could not run formatter: {e}", source=text)

            if result.returncode != 0:
                output = (result.stdout + result.stderr).strip()
                raise FormattingError(
                    f"black exited with status {result.returncode}; full output: {output}",
                    source=text,
                )

            return Path(name).read_text(encoding="utf-8")
        finally:
            with suppress(FileNotFoundError):
                os.remove(name)
