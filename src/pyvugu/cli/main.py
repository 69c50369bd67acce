"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import Optional

import rich.panel
import rich_click as click
from pyvugu import __version__
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_EXPAND = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'pyvugu --help' for more information."
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.STYLE_COMMANDS_PANEL_BOX = None
click.rich_click.STYLE_OPTIONS_PANEL_BOX = None

# Cyan theme
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "pyvugu": [
        {
            "name": "Commands",
            "commands": ["build", "new"],
        }
    ]
}


# rich-click wraps tables in Panels which default to expand=True.
original_panel_init = rich.panel.Panel.__init__


def panel_init(self, *args, **kwargs):
    kwargs.setdefault("expand", False)
    original_panel_init(self, *args, **kwargs)


rich.panel.Panel.__init__ = panel_init  # type: ignore[method-assign]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


@click.group(
    help=f"""
[bold white on cyan] pyvugu [/] [bold cyan]v{__version__}[/] Compile component templates to Python.

Run [bold cyan]pyvugu build PATH[/] to compile a template or a directory of templates.
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--component-type", default=None, help="Component class name (default: from file name)")
@click.option("--data-type", default=None, help="Data class name (default: <Component>Data)")
@click.option(
    "--component-module",
    default=None,
    help="Module that exports the component and data classes, for templates without a script",
)
@click.option("--out-dir", default=None, type=click.Path(path_type=Path), help="Output directory")
@click.option("--out-file", default=None, help="Output file name (single template only)")
@click.option("--no-format", is_flag=True, help="Skip running black on the output")
@click.option("--format-timeout", default=30.0, type=float, help="Formatter timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def build(
    path: Path,
    component_type: Optional[str],
    data_type: Optional[str],
    component_module: Optional[str],
    out_dir: Optional[Path],
    out_file: Optional[str],
    no_format: bool,
    format_timeout: float,
    verbose: bool,
) -> None:
    """Compile a .vugu template (or every template in a directory)."""
    from pyvugu.compiler.build import BuildConfig, ComponentBuilder, build_directory
    from pyvugu.compiler.exceptions import VuguCompileError
    from pyvugu.compiler.formatter import NullFormatter

    _configure_logging(verbose)
    formatter = NullFormatter() if no_format else None

    try:
        if path.is_dir():
            if component_type or data_type or component_module or out_file:
                raise click.UsageError(
                    "--component-type, --data-type, --component-module and --out-file "
                    "need a single template"
                )
            console.print(f"🔨 Building templates in [cyan]{path}[/]...")
            summary = build_directory(
                path, out_dir=out_dir, formatter=formatter, format_timeout=format_timeout
            )
            console.print(
                f"✅ Build complete (components={summary.components}, out={summary.out_dir})"
            )
            return

        config = BuildConfig.for_template(
            path,
            out_dir=out_dir,
            component_type=component_type,
            data_type=data_type,
            out_file=out_file,
            format_timeout=format_timeout,
            component_module=component_module,
        )
        console.print(f"🔨 Building [cyan]{path}[/]...")
        out_path = ComponentBuilder(config, formatter=formatter).build_file(path)
        console.print(f"✅ Wrote [cyan]{out_path}[/]")
    except (VuguCompileError, ValueError) as e:
        console.print("[bold red]Error:[/]", escape(str(e)), highlight=False, soft_wrap=True)
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.option("--dir", "directory", default=".", type=click.Path(path_type=Path), help="Target directory")
def new(name: str, directory: Path) -> None:
    """Scaffold a new component template."""
    from pyvugu.cli.generators import generate_component

    try:
        template_file = generate_component(name, directory)
    except ValueError as e:
        raise click.UsageError(str(e))

    console.print(f"✨ Created [cyan]{template_file}[/]")


if __name__ == "__main__":
    cli()
