"""Main CLI entry point."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import rich.panel
import rich_click as click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from mpxml import __version__
from mpxml.compiler.exceptions import MpxmlError

console = Console()
err_console = Console(stderr=True)

# Styling configuration (Cyan Theme)
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_BOX = None
click.rich_click.STYLE_OPTIONS_TABLE_BOX = None
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'mpxml --help' for more information."
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "mpxml": [
        {
            "name": "Commands",
            "commands": ["compile", "dialects"],
        }
    ]
}


# rich-click wraps tables in Panels which default to expand=True.
original_panel_init = rich.panel.Panel.__init__


def panel_init(self, *args, **kwargs):
    kwargs.setdefault("expand", False)
    original_panel_init(self, *args, **kwargs)


rich.panel.Panel.__init__ = panel_init  # type: ignore[method-assign]


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


@click.group(
    help=f"""
[bold white on cyan] mpxml [/] [bold cyan]v{__version__}[/] Compile component templates to mini-program markup.

Run [bold cyan]mpxml compile page.json --dialect weixin[/] to produce page.wxml.
"""
)
@click.version_option(__version__)
def cli() -> None:
    pass


@cli.command("compile")
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--dialect", "-d", default="weixin", help="Target dialect.")
@click.option(
    "--out-dir",
    "-o",
    default="dist",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory for compiled templates.",
)
@click.option(
    "--scope-id",
    default=None,
    help="Scope identifier passed to the code generator. Reserved for style scoping;"
    " it does not change the markup yet.",
)
@click.option(
    "--fallback-content/--no-fallback-content",
    default=None,
    help="Override the dialect's slot fallback-content support.",
)
@click.option(
    "--native-component",
    "native_components",
    multiple=True,
    help="Tag of a native mini-program component (repeatable).",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print markup instead of writing files.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def compile_command(
    inputs: Tuple[Path, ...],
    dialect: str,
    out_dir: Path,
    scope_id: Optional[str],
    fallback_content: Optional[bool],
    native_components: Tuple[str, ...],
    to_stdout: bool,
    verbose: bool,
) -> None:
    """Compile JSON template documents."""
    from mpxml.compiler.build import build_templates

    configure_logging(verbose)

    try:
        summary = build_templates(
            inputs,
            dialect=dialect,
            out_dir=None if to_stdout else out_dir,
            scope_id=scope_id,
            fallback_content=fallback_content,
            native_components=native_components,
        )
    except MpxmlError as e:
        err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
        raise SystemExit(1)

    if to_stdout:
        for result in summary.results:
            click.echo(result.code)
        return

    console.print(
        f"✅ Compiled {summary.templates} template(s) "
        f"(dialect={summary.dialect}, out={summary.out_dir})"
    )


@cli.command()
def dialects() -> None:
    """List the built-in dialects."""
    from mpxml.compiler.dialects import DIALECTS, available_dialects

    table = Table(title="Dialects", header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Platform")
    table.add_column("Directive")
    table.add_column("Extension")
    table.add_column("Slot fallback")
    for name in available_dialects():
        d = DIALECTS[name]
        table.add_row(
            d.name,
            d.title,
            d.directive,
            d.extension,
            "yes" if d.slot.fallback_content else "no",
        )
    console.print(table)


if __name__ == "__main__":
    cli()
