"""Usage Finder CLI - report every file referencing an asset or template."""
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .analyzer.factory import UsageFinderFactory
from .analyzer.finders import UsageFinder
from .config import ProjectLayout, ProjectRootNotFound, __version__, get_config
from .printers import PRINTERS
from .utils.safe_console import SafeConsole

app = typer.Typer(
    name="usage-finder",
    help="Find the files that reference a stylesheet, script, image or template",
    add_completion=False
)
# Use SafeConsole for non-UTF-8 terminal compatibility
console = SafeConsole()


def resolve_target(target: str, root: Path) -> Path:
    """Locate a target given on the command line.

    Paths are taken relative to the working directory first, then to the
    project root, so both `public/x.css` run from the root and absolute
    paths work.
    """
    path = Path(target)
    if path.is_absolute():
        return path.resolve()
    if path.exists():
        return path.resolve()
    return (root / path).resolve()


def _load_layout(root: str) -> ProjectLayout:
    try:
        return get_config(root).layout()
    except ProjectRootNotFound as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


def _printer_mode(count: bool, total: bool, files_only: bool, no_usage: bool) -> str:
    selected = [
        name for name, enabled in (
            ('count', count), ('total', total), ('files-only', files_only), ('no-usage', no_usage)
        ) if enabled
    ]
    if len(selected) > 1:
        console.print(
            "[bold red]Error:[/bold red] Options "
            + ", ".join(f"--{name}" for name in selected)
            + " are mutually exclusive."
        )
        raise typer.Exit(2)
    return selected[0] if selected else 'default'


@app.command()
def find(
    targets: List[str] = typer.Argument(..., help="Files whose usages should be reported"),
    root: str = typer.Option(".", "--root", "-r", help="Project root path to scan"),
    count: bool = typer.Option(False, "--count", "-c", help="Show the number of usages per file"),
    total: bool = typer.Option(False, "--total", "-t", help="Show only the total number of usages"),
    files_only: bool = typer.Option(False, "--files-only", "-l", help="Show only the names of referencing files"),
    no_usage: bool = typer.Option(False, "--no-usage", "-n", help="Show only targets that are never referenced"),
    absolute: bool = typer.Option(False, "--absolute", help="Display absolute paths"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report finders used and unreadable files"),
):
    """List every line in the project that references the given files."""
    layout = _load_layout(root)
    mode = _printer_mode(count, total, files_only, no_usage)

    factory = UsageFinderFactory(layout)
    printer = PRINTERS[mode](
        console,
        root=None if absolute else layout.root,
        show_targets=len(targets) > 1,
    )

    unsupported = 0
    for target in targets:
        target_path = resolve_target(target, layout.root)
        finder = factory.generate(target_path)

        if finder is None:
            unsupported += 1
            console.print(
                f"[bold red]Error:[/bold red] No handler for this file type: {escape(target)}"
            )
            continue

        with console.status(f"Scanning for usages of {escape(target_path.name)}..."):
            usages = finder.usages()

        printer.print_usages(target_path, usages)

        if verbose:
            _report_scan(finder, len(usages))

    if unsupported:
        raise typer.Exit(1)


def _report_scan(finder: UsageFinder, usage_count: int) -> None:
    types = ", ".join(sorted(finder.file_types))
    console.print(
        f"[dim]{type(finder).__name__} scanned {types}: {usage_count} usage(s)[/dim]"
    )
    for path in finder.skipped:
        console.print(f"[yellow]Warning:[/yellow] Could not read {escape(str(path))}")


@app.command()
def explain(
    targets: List[str] = typer.Argument(..., help="Files to look up"),
    root: str = typer.Option(".", "--root", "-r", help="Project root path"),
):
    """Show which finder handles each file and which file types it scans."""
    layout = _load_layout(root)
    factory = UsageFinderFactory(layout)

    table = Table(title="Finders", show_header=True, header_style="bold cyan")
    table.add_column("Target", style="cyan", no_wrap=False)
    table.add_column("Finder", style="magenta")
    table.add_column("Scanned File Types", style="green")

    unsupported = 0
    for target in targets:
        finder = factory.generate(resolve_target(target, layout.root))
        if finder is None:
            unsupported += 1
            table.add_row(escape(target), "[red]unsupported[/red]", "-")
        else:
            table.add_row(escape(target), type(finder).__name__, ", ".join(sorted(finder.file_types)))

    console.print(table)

    if unsupported:
        raise typer.Exit(1)


def _version_callback(value: bool):
    if value:
        console.print(f"usage-finder {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """Usage Finder - static cross-references for server-rendered web projects."""
    pass


if __name__ == "__main__":
    app()
