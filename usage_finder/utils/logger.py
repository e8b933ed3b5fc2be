"""Terminal-safe output with ASCII fallback for non-UTF-8 terminals.

Usage reports echo arbitrary source lines and decorate them with a few
Unicode glyphs; both are downgraded when the terminal can't render them.
"""
import sys
import locale


# Unicode glyphs used in reports and their ASCII stand-ins
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[X]',
    '⚠': '[WARN]',
    '→': '->',
    '←': '<-',
    '…': '...',
    '•': '*',
    '│': '|',
    '─': '-',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding.

    Returns:
        str: Lowercased encoding name ('utf-8', 'cp1252', 'ascii', ...)
    """
    if getattr(sys.stdout, 'encoding', None):
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (ValueError, LookupError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 output."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str, encoding: str | None = None) -> str:
    """Make text printable on the current terminal.

    Known glyphs are replaced by their ASCII equivalents, anything else the
    terminal encoding can't represent (e.g. non-ASCII source lines) becomes '?'.

    Args:
        text: Text potentially containing Unicode characters
        encoding: Target encoding, detected from the terminal by default

    Returns:
        str: Text safe for the terminal
    """
    encoding = encoding or detect_terminal_encoding()
    if encoding.replace('_', '-') in ('utf-8', 'utf8'):
        return text

    for glyph, replacement in ICON_MAP.items():
        text = text.replace(glyph, replacement)

    try:
        return text.encode(encoding, errors='replace').decode(encoding)
    except LookupError:
        return text.encode('ascii', errors='replace').decode('ascii')
