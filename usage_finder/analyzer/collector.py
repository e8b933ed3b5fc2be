"""Candidate file discovery and line scanning for usage finders."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Set

from ..config import ProjectLayout
from .resolver import canonical
from .usage import Usage

if TYPE_CHECKING:
    from .finders import UsageFinder


def file_extension(path: str | Path) -> str:
    """Last extension of a file, lowercased and without the dot ('erb')."""
    return Path(path).suffix.lower().lstrip('.')


@dataclass
class SourceFile:
    """A candidate file loaded for scanning."""
    path: Path
    lines: List[str]

    @property
    def extension(self) -> str:
        return file_extension(self.path)


class UsageCollector:
    """Walk a project tree and collect the usages a finder recognises."""

    def __init__(self, layout: ProjectLayout):
        """Initialize collector.

        Args:
            layout: Directory conventions of the project to scan
        """
        self.layout = layout
        self.root = canonical(layout.root)
        self.excluded_dirs = set(layout.excluded_dirs)
        # Candidate files that could not be read during the last scan
        self.skipped: List[Path] = []

    def discover_files(self, file_types: Set[str]) -> Iterator[Path]:
        """Yield every file under the root with one of the given extensions.

        Directories and files are visited in sorted order so output is stable
        across runs. Dot-prefixed entries are included.

        Args:
            file_types: Extensions without the dot ({'css', 'erb'})

        Yields:
            Canonical absolute file paths
        """
        for directory, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.excluded_dirs)
            for filename in sorted(filenames):
                if file_extension(filename) in file_types:
                    yield Path(directory) / filename

    def load(self, path: Path) -> Optional[SourceFile]:
        """Read a candidate file, or None if it vanished or is unreadable."""
        try:
            with open(path, 'r', encoding='utf-8', errors='ignore') as f:
                # Lines end at \n only (not \f, \x85,  ...), matching read_line
                lines = [line.rstrip('\r\n') for line in f]
        except (IOError, OSError):
            self.skipped.append(path)
            return None
        return SourceFile(path=path, lines=lines)

    def each_usage(self, finder: "UsageFinder") -> Iterator[Usage]:
        """Yield the usages of a finder's target, file by file, line by line.

        Args:
            finder: Finder declaring the file types and matchers to apply

        Yields:
            Usage records with their line text captured
        """
        self.skipped = []

        for path in self.discover_files(finder.file_types):
            if finder.is_target(path):
                continue

            matchers = finder.matchers_for(file_extension(path))
            if not matchers:
                continue

            source = self.load(path)
            if source is None:
                continue

            for line_number, line in enumerate(source.lines, 1):
                if any(matcher(line, source) for matcher in matchers):
                    yield Usage(file=path, line_number=line_number, text=line)
