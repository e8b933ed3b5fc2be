"""Usage records: one reference to a target file found in another file."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

UNAVAILABLE_TEXT = "<line unavailable>"


def read_line(file_path: str | Path, line_number: int) -> Optional[str]:
    """Read a single line (1-based) from a file.

    Args:
        file_path: File to read
        line_number: 1-based line number

    Returns:
        Line text without its line terminator, or None if the file or the
        line can no longer be read
    """
    if line_number < 1:
        return None
    try:
        with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
            for current, line in enumerate(f, 1):
                if current == line_number:
                    return line.rstrip('\r\n')
    except (IOError, OSError):
        return None
    return None


@dataclass(frozen=True)
class Usage:
    """A reference to the target file at one line of another file.

    Identity is (file, line_number); the text is never part of equality
    since the same line of the same file always yields the same text.
    """
    file: Path
    line_number: int
    text: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def line_text(self) -> str:
        """Matched line, re-read from disk when it was not captured."""
        if self.text is not None:
            return self.text
        line = read_line(self.file, self.line_number)
        return UNAVAILABLE_TEXT if line is None else line

    def __str__(self) -> str:
        return f"{self.file}:{self.line_number}:{self.line_text}"
