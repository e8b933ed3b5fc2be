"""Usage report printers.

Every printer consumes the usages of one target at a time through
``print_usages`` and renders them on a Rich console.
"""
from collections import Counter
from pathlib import Path
from typing import Dict, Optional, Sequence, Type

from rich.console import Console
from rich.markup import escape

from .analyzer.usage import Usage


class UsagePrinter:
    """Default report: one ``file:line:text`` row per usage, grep style."""

    def __init__(self, console: Console, root: Optional[Path] = None, show_targets: bool = False):
        """Initialize printer.

        Args:
            console: Console to render on
            root: When given, paths are displayed relative to it
            show_targets: Print a heading per target (used with several targets)
        """
        self.console = console
        self.root = root
        self.show_targets = show_targets

    def display_path(self, path: str | Path) -> str:
        if self.root is None:
            return str(path)
        try:
            return str(Path(path).relative_to(self.root))
        except ValueError:
            return str(path)

    def print_target(self, target: Path) -> None:
        if self.show_targets:
            self.console.print(f"[bold blue]{escape(self.display_path(target))}[/bold blue]")

    def print_usages(self, target: Path, usages: Sequence[Usage]) -> None:
        self.print_target(target)
        for usage in usages:
            self.console.print(
                f"[magenta]{escape(self.display_path(usage.file))}[/magenta]:"
                f"[green]{usage.line_number}[/green]:{escape(usage.line_text)}",
                soft_wrap=True,
                highlight=False,
            )


class CountPrinter(UsagePrinter):
    """Number of usages per referencing file."""

    def print_usages(self, target: Path, usages: Sequence[Usage]) -> None:
        self.print_target(target)
        counts = Counter(usage.file for usage in usages)
        for file, count in counts.items():
            self.console.print(
                f"[magenta]{escape(self.display_path(file))}[/magenta]: [yellow]{count}[/yellow]",
                soft_wrap=True,
                highlight=False,
            )


class TotalPrinter(UsagePrinter):
    """A single usage total per target."""

    def print_usages(self, target: Path, usages: Sequence[Usage]) -> None:
        self.console.print(
            f"[bold blue]{escape(self.display_path(target))}[/bold blue]: [yellow]{len(usages)}[/yellow]",
            soft_wrap=True,
            highlight=False,
        )


class FileOnlyPrinter(UsagePrinter):
    """Distinct files referencing the target, in scan order."""

    def print_usages(self, target: Path, usages: Sequence[Usage]) -> None:
        self.print_target(target)
        for file in dict.fromkeys(usage.file for usage in usages):
            self.console.print(f"[magenta]{escape(self.display_path(file))}[/magenta]", soft_wrap=True, highlight=False)


class NoUsagePrinter(UsagePrinter):
    """Only the targets nothing references (candidates for deletion)."""

    def print_usages(self, target: Path, usages: Sequence[Usage]) -> None:
        if not usages:
            self.console.print(f"[cyan]{escape(self.display_path(target))}[/cyan]", soft_wrap=True, highlight=False)


PRINTERS: Dict[str, Type[UsagePrinter]] = {
    'default': UsagePrinter,
    'count': CountPrinter,
    'total': TotalPrinter,
    'files-only': FileOnlyPrinter,
    'no-usage': NoUsagePrinter,
}
