"""HTML tag attribute parsing."""
import re
from typing import Dict

# name, then an optional value: "double", 'single' or bare
_ATTRIBUTE_PATTERN = re.compile(
    r'''\s*([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?'''
)


def parse_attributes(text: str) -> Dict[str, str]:
    """Parse the inner text of an HTML-like tag into an attribute map.

    Example: ``rel="stylesheet" href='x.css' media=all`` yields
    ``{'rel': 'stylesheet', 'href': 'x.css', 'media': 'all'}``.

    Names are lowercased and the last duplicate wins. Valueless attributes
    map to an empty string. Parsing stops at the first piece of text that
    is not a well-formed attribute (e.g. an unterminated quote), so a
    malformed tail never produces partial values.

    Args:
        text: Attribute text, without the tag name and angle brackets

    Returns:
        Dict mapping lowercase attribute names to values
    """
    attributes: Dict[str, str] = {}
    position = 0
    text = text.rstrip().rstrip('/')

    while position < len(text):
        match = _ATTRIBUTE_PATTERN.match(text, position)
        if not match or match.end() == position:
            break

        name = match.group(1).lower()
        position = match.end()
        for value in match.group(2, 3, 4):
            if value is not None:
                attributes[name] = value
                break
        else:
            # name= followed by something that is not a value
            if text[position:].lstrip().startswith('='):
                break
            attributes[name] = ''

    return attributes
