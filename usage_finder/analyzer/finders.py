"""Usage finders for static assets (stylesheets, scripts, images, public files).

Each finder declares the file types it scans and, per scanned extension,
the line matchers that recognise a reference to its target:

    MATCHERS = {'erb': ('match_helper', 'match_tag'), 'html': ('match_tag',)}

A matcher receives one line plus the SourceFile it came from and returns
True when the line references the target.
"""
import re
from functools import cached_property
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Pattern, Set, Tuple

from ..config import ProjectLayout
from .attributes import parse_attributes
from .collector import SourceFile, UsageCollector
from .resolver import PathResolver, canonical, is_within, template_basename
from .usage import Usage

Matcher = Callable[[str, SourceFile], bool]

# Ruby string literal, optionally preceded by a hash key (:media => / media:)
_STRING_ARGUMENT = re.compile(
    r'''(?P<key>:\w+\s*=>\s*|\b\w+:\s*)?(?P<quote>['"])(?P<value>[^'"]*)(?P=quote)'''
)
_ERB_CLOSE = '%>'
_OPEN_PAREN = re.compile(r'\s*\(')


def argument_segment(line: str, start: int) -> str:
    """Text holding the arguments of a call whose name ends at start.

    A parenthesized call ends at its matching closing parenthesis; without
    parentheses the arguments run to the closing ERB tag or the line end.
    """
    end = line.find(_ERB_CLOSE, start)
    if end == -1:
        end = len(line)

    opening = _OPEN_PAREN.match(line, start, end)
    if not opening:
        return line[start:end]

    depth = 0
    quote = None
    for index in range(opening.end() - 1, end):
        char = line[index]
        if quote:
            if char == quote:
                quote = None
        elif char in '\'"':
            quote = char
        elif char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return line[start:index + 1]
    return line[start:end]


def helper_arguments(pattern: Pattern, line: str) -> List[str]:
    """Extract the string literal arguments of every helper call on a line.

    Hash option values (``:media => "all"``) and interpolated strings are
    skipped; arguments end at the call's closing parenthesis or the closing
    ERB tag.

    Args:
        pattern: Compiled pattern matching the helper name
        line: Source line

    Returns:
        Positional string arguments, in order
    """
    arguments = []
    for call in pattern.finditer(line):
        for argument in _STRING_ARGUMENT.finditer(argument_segment(line, call.end())):
            value = argument.group('value')
            if argument.group('key') is None and value and '#{' not in value:
                arguments.append(value)
    return arguments


def tag_attributes(pattern: Pattern, line: str) -> Iterator[Dict[str, str]]:
    """Yield the parsed attributes of every tag matched by pattern on a line."""
    for tag in pattern.finditer(line):
        yield parse_attributes(tag.group(1))


def is_static_reference(value: Optional[str]) -> bool:
    """Check that an attribute value is a literal path worth resolving."""
    if not value or '<%' in value or '#{' in value:
        return False
    # Absolute URLs and pseudo schemes never point into the project
    return not re.match(r'^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)', value)


class UsageFinder:
    """Base class for finding the usages of one target file.

    Subclasses declare FILE_TYPES (extensions scanned, without the dot) and
    MATCHERS (extension -> names of matcher methods).
    """

    FILE_TYPES: Set[str] = set()
    MATCHERS: Dict[str, Tuple[str, ...]] = {}

    def __init__(self, target_file: str | Path, layout: ProjectLayout):
        """Initialize finder.

        Args:
            target_file: File whose usages are searched, absolute or
                relative to the project root
            layout: Directory conventions of the project
        """
        self.target_file = Path(target_file)
        self.layout = layout
        self.resolver = PathResolver(layout)
        self._usages: Optional[List[Usage]] = None
        # Candidate files that could not be read while scanning
        self.skipped: List[Path] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.target_file)!r})"

    @cached_property
    def full_target_path(self) -> Path:
        """Canonical absolute path of the target."""
        if self.target_file.is_absolute():
            return canonical(self.target_file)
        return canonical(self.layout.root / self.target_file)

    @cached_property
    def target_basename(self) -> str:
        """Target filename without extensions, used for naming conventions."""
        return template_basename(self.target_file)

    @property
    def file_types(self) -> Set[str]:
        return set(self.FILE_TYPES)

    def matchers_for(self, extension: str) -> List[Matcher]:
        """Bound matcher methods applying to files with the given extension."""
        if extension not in self.FILE_TYPES:
            return []
        return [getattr(self, name) for name in self.MATCHERS.get(extension, ())]

    def is_target(self, path: Path) -> bool:
        return path == self.full_target_path

    def usages(self) -> List[Usage]:
        """All usages of the target in the project, scanned once and memoized."""
        if self._usages is None:
            collector = UsageCollector(self.layout)
            self._usages = list(collector.each_usage(self))
            self.skipped = collector.skipped
        return self._usages

    def has_usages(self) -> bool:
        return bool(self.usages())


class AssetUsageFinder(UsageFinder):
    """Shared matching for assets referenced by a helper call or an HTML tag.

    Subclasses provide HELPER_PATTERN, TAG_PATTERN, ASSET_DIR, the attribute
    holding the reference (TAG_ATTRIBUTE) and, for helpers that append it,
    DEFAULT_EXTENSION.
    """

    HELPER_PATTERN: Pattern
    TAG_PATTERN: Pattern
    TAG_ATTRIBUTE = 'src'
    ASSET_DIR = ''
    DEFAULT_EXTENSION: Optional[str] = None

    def match_helper(self, line: str, source: SourceFile) -> bool:
        for name in helper_arguments(self.HELPER_PATTERN, line):
            if self.is_target(self.resolver.resolve_helper(name, self.ASSET_DIR, self.DEFAULT_EXTENSION)):
                return True
        return False

    def accepts_tag(self, attributes: Dict[str, str]) -> bool:
        return True

    def match_tag(self, line: str, source: SourceFile) -> bool:
        for attributes in tag_attributes(self.TAG_PATTERN, line):
            reference = attributes.get(self.TAG_ATTRIBUTE)
            if not self.accepts_tag(attributes) or not is_static_reference(reference):
                continue
            if self.is_target(self.resolver.resolve(reference, source.path)):
                return True
        return False


class StylesheetUsageFinder(AssetUsageFinder):
    """Finds stylesheet_link_tag calls, <link rel="stylesheet"> tags and @imports."""

    FILE_TYPES = {'rb', 'erb', 'rhtml', 'html', 'htm', 'css'}
    MATCHERS = {
        'rb': ('match_helper', 'match_tag'),
        'erb': ('match_helper', 'match_tag'),
        'rhtml': ('match_helper', 'match_tag'),
        'html': ('match_tag',),
        'htm': ('match_tag',),
        'css': ('match_import',),
    }

    HELPER_PATTERN = re.compile(r'\bstylesheet_link_tag\b')
    TAG_PATTERN = re.compile(r'<link\b([^>]*)', re.IGNORECASE)
    TAG_ATTRIBUTE = 'href'
    ASSET_DIR = 'stylesheets'
    DEFAULT_EXTENSION = '.css'

    # @import "x.css";  @import url(x.css);  @import url('x.css') screen;
    IMPORT_PATTERN = re.compile(
        r'''@import\s+(?:url\(\s*)?(['"]?)([^'"()\s;]+)\1''', re.IGNORECASE
    )

    def accepts_tag(self, attributes: Dict[str, str]) -> bool:
        return attributes.get('rel', '').strip().lower() == 'stylesheet'

    def match_import(self, line: str, source: SourceFile) -> bool:
        for directive in self.IMPORT_PATTERN.finditer(line):
            reference = directive.group(2)
            if is_static_reference(reference) and self.is_target(self.resolver.resolve(reference, source.path)):
                return True
        return False


class JavaScriptUsageFinder(AssetUsageFinder):
    """Finds javascript_include_tag calls and <script src> tags."""

    FILE_TYPES = {'rb', 'erb', 'rhtml', 'html', 'htm'}
    MATCHERS = {
        'rb': ('match_helper', 'match_tag'),
        'erb': ('match_helper', 'match_tag'),
        'rhtml': ('match_helper', 'match_tag'),
        'html': ('match_tag',),
        'htm': ('match_tag',),
    }

    HELPER_PATTERN = re.compile(r'\bjavascript_include_tag\b')
    TAG_PATTERN = re.compile(r'<script\b([^>]*)', re.IGNORECASE)
    ASSET_DIR = 'javascripts'
    DEFAULT_EXTENSION = '.js'


class ImageUsageFinder(AssetUsageFinder):
    """Finds image helpers, <img>/<input type="image"> tags and CSS url() references."""

    FILE_TYPES = {'rb', 'erb', 'rhtml', 'html', 'htm', 'css'}
    MATCHERS = {
        'rb': ('match_helper', 'match_tag'),
        'erb': ('match_helper', 'match_tag'),
        'rhtml': ('match_helper', 'match_tag'),
        'html': ('match_tag',),
        'htm': ('match_tag',),
        'css': ('match_css',),
    }

    HELPER_PATTERN = re.compile(r'\b(?:image_tag|image_submit_tag|image_path)\b')
    TAG_PATTERN = re.compile(r'<(?:img|input)\b([^>]*)', re.IGNORECASE)
    ASSET_DIR = 'images'

    # url(x.gif), url('x.gif')
    URL_PATTERN = re.compile(r'''\burl\(\s*(['"]?)([^'"()]+?)\1\s*\)''', re.IGNORECASE)
    # background-image: "x.gif";  background: '/images/x.gif'
    BACKGROUND_PATTERN = re.compile(r'''\bbackground(?:-image)?\s*:\s*(['"])([^'"]+)\1''', re.IGNORECASE)

    def match_css(self, line: str, source: SourceFile) -> bool:
        for pattern in (self.URL_PATTERN, self.BACKGROUND_PATTERN):
            for reference in pattern.finditer(line):
                value = reference.group(2).strip()
                if is_static_reference(value) and self.is_target(self.resolver.resolve(value, source.path)):
                    return True
        return False


class PublicFileUsageFinder(UsageFinder):
    """Finds raw src=/href= references to any other file served from public/."""

    FILE_TYPES = {'html', 'htm', 'erb', 'rhtml'}
    MATCHERS = {
        'html': ('match_reference',),
        'htm': ('match_reference',),
        'erb': ('match_reference',),
        'rhtml': ('match_reference',),
    }

    REFERENCE_PATTERN = re.compile(
        r'''(?<![\w-])(?:src|href)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))''', re.IGNORECASE
    )

    def matchers_for(self, extension: str) -> List[Matcher]:
        # Files outside the public directory are never served, so never referenced
        if not is_within(self.full_target_path, self.resolver.public_root):
            return []
        return super().matchers_for(extension)

    def match_reference(self, line: str, source: SourceFile) -> bool:
        for attribute in self.REFERENCE_PATTERN.finditer(line):
            reference = next(value for value in attribute.groups() if value is not None)
            if is_static_reference(reference) and self.is_target(self.resolver.resolve_public(reference, source.path)):
                return True
        return False
