"""Compile component templates and write the generated modules."""

from __future__ import annotations

import logging
import re
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Union

from pyvugu.compiler.classifier import classify_fragment
from pyvugu.compiler.codegen.generator import CodeGenerator
from pyvugu.compiler.exceptions import FormattingError
from pyvugu.compiler.formatter import DEFAULT_TIMEOUT, BlackFormatter, Formatter
from pyvugu.compiler.parser import Fragment, FragmentParser, HTMLFragmentParser

log = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".vugu"
OUT_SUFFIX = "_vgen.py"


def component_type_name(template_path: Union[str, Path]) -> str:
    """``todo-list.vugu`` -> ``TodoList``."""
    stem = Path(template_path).stem
    parts = [p for p in re.split(r"[-_.\s]+", stem) if p]
    name = "".join(p[:1].upper() + p[1:] for p in parts)
    if not name.isidentifier():
        raise ValueError(f"cannot derive a class name from {stem!r}")
    return name


def out_file_name(template_path: Union[str, Path]) -> str:
    """``todo-list.vugu`` -> ``todo_list_vgen.py``."""
    stem = Path(template_path).stem
    return re.sub(r"[-.\s]+", "_", stem).lower() + OUT_SUFFIX


@dataclass
class BuildConfig:
    component_type: str
    data_type: str
    out_dir: Path
    out_file: str
    format_timeout: float = DEFAULT_TIMEOUT
    # module exporting the component and data types, for templates without a script
    component_module: Optional[str] = None

    @property
    def out_path(self) -> Path:
        return Path(self.out_dir) / self.out_file

    @classmethod
    def for_template(
        cls,
        template_path: Union[str, Path],
        out_dir: Optional[Union[str, Path]] = None,
        component_type: Optional[str] = None,
        data_type: Optional[str] = None,
        out_file: Optional[str] = None,
        format_timeout: float = DEFAULT_TIMEOUT,
        component_module: Optional[str] = None,
    ) -> BuildConfig:
        """Config with names derived from the template file name."""
        template_path = Path(template_path)
        component_type = component_type or component_type_name(template_path)
        return cls(
            component_type=component_type,
            data_type=data_type or f"{component_type}Data",
            out_dir=Path(out_dir) if out_dir is not None else template_path.parent,
            out_file=out_file or out_file_name(template_path),
            format_timeout=format_timeout,
            component_module=component_module,
        )


class ComponentBuilder:
    """Parses a template, generates its module and writes it to disk."""

    def __init__(
        self,
        config: BuildConfig,
        parser: Optional[FragmentParser] = None,
        formatter: Optional[Formatter] = None,
    ) -> None:
        self.config = config
        self.parser = parser or HTMLFragmentParser()
        self.formatter = formatter or BlackFormatter(
            work_dir=config.out_dir, timeout=config.format_timeout
        )
        self.codegen = CodeGenerator(
            config.component_type, config.data_type, component_module=config.component_module
        )

    def compile(self, content: str, file_path: str = "") -> str:
        """Return the generated, unformatted module source."""
        return self._generate(self.parser.parse_fragment(content, file_path))

    def build(self, source: Union[str, IO[str]], file_path: str = "") -> Path:
        """Compile ``source`` and write the module to ``config.out_path``.

        If formatting fails the unformatted program is still written, to
        help debugging, and the FormattingError is re-raised.
        """
        content = source if isinstance(source, str) else source.read()
        return self._write(self.compile(content, file_path))

    def build_file(self, template_path: Union[str, Path]) -> Path:
        return self._write(self._generate(self.parser.parse_file(Path(template_path))))

    def _generate(self, fragment: Fragment) -> str:
        classified = classify_fragment(fragment)
        return self.codegen.generate(fragment, classified)

    def _write(self, program: str) -> Path:
        out_path = self.config.out_path
        out_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            formatted = self.formatter.format(program)
        except FormattingError:
            log.warning("Formatting failed, writing unformatted source to %s", out_path)
            with suppress(OSError):
                out_path.write_text(program, encoding="utf-8")
            raise

        out_path.write_text(formatted, encoding="utf-8")
        log.info("Wrote %s", out_path)
        return out_path


@dataclass
class BuildSummary:
    components: int
    out_dir: Path
    outputs: List[Path] = field(default_factory=list)


def build_directory(
    templates_dir: Union[str, Path],
    out_dir: Optional[Union[str, Path]] = None,
    formatter: Optional[Formatter] = None,
    format_timeout: float = DEFAULT_TIMEOUT,
) -> BuildSummary:
    """Compile every ``*.vugu`` template in ``templates_dir``.

    Names are derived from each file name. Files starting with ``_`` or
    ``.`` are skipped. The first failure aborts the build.
    """
    templates_dir = Path(templates_dir)
    resolved_out = Path(out_dir) if out_dir is not None else templates_dir
    summary = BuildSummary(components=0, out_dir=resolved_out)

    for entry in sorted(templates_dir.iterdir()):
        if entry.name.startswith("_") or entry.name.startswith("."):
            continue
        if not entry.is_file() or entry.suffix != TEMPLATE_SUFFIX:
            continue

        config = BuildConfig.for_template(
            entry, out_dir=resolved_out, format_timeout=format_timeout
        )
        builder = ComponentBuilder(config, formatter=formatter)
        summary.outputs.append(builder.build_file(entry))
        summary.components += 1

    return summary
