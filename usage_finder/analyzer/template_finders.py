"""Usage finders for templates, partials and layouts.

Templates are referenced by logical names ('hello/index', 'layouts/test')
passed to render calls, so these finders resolve names against the views
tree instead of treating them as URLs. Logical names omit the format
suffixes template files carry ('.html.erb'), which is why most forms are
compared as path prefixes.
"""
import re
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .collector import SourceFile
from .finders import UsageFinder
from .resolver import CONTROLLER_SUFFIX, canonical, template_basename

RENDER_PATTERN = re.compile(r'\brender(?:_to_string)?\b')

# :template => "x"   template: "x"   :action => :edit
RENDER_OPTION_PATTERN = re.compile(
    r'''(?::(?P<symbol_key>\w+)\s*=>\s*|\b(?P<key>\w+):\s*)'''
    r'''(?:(?P<quote>['"])(?P<value>[^'"]*)(?P=quote)|:(?P<symbol_value>\w+))'''
)


def render_options(line: str) -> Iterator[Tuple[str, str]]:
    """Yield (option, value) pairs passed to render calls on a line.

    Only literal string and symbol values are reported; interpolated
    strings are dynamic and skipped.
    """
    for call in RENDER_PATTERN.finditer(line):
        end = line.find('%>', call.end())
        segment = line[call.end():end if end != -1 else len(line)]
        for option in RENDER_OPTION_PATTERN.finditer(segment):
            key = option.group('symbol_key') or option.group('key')
            value = option.group('value')
            if value is None:
                value = option.group('symbol_value')
            if value and '#{' not in value:
                yield key, value


class TemplateUsageFinder(UsageFinder):
    """Finds render calls naming a template through template:, action: or file:."""

    FILE_TYPES = {'rb', 'erb', 'rhtml', 'rxml'}
    MATCHERS = {
        'rb': ('match_render',),
        'erb': ('match_render',),
        'rhtml': ('match_render',),
        'rxml': ('match_render',),
    }

    def prefix_matches(self, reference: Path) -> bool:
        """Check that a logical template path names the target.

        'layouts/test' names layouts/test.html.erb but not layouts/test2.html.erb:
        whatever follows the reference in the target path must be a suffix.
        """
        target = str(self.full_target_path)
        prefix = str(reference)
        if not target.startswith(prefix):
            return False
        remainder = target[len(prefix):]
        return remainder == '' or remainder.startswith('.')

    def action_path(self, name: str, source: SourceFile) -> Optional[Path]:
        """Path of a template named relative to the calling controller's views."""
        directory = self.resolver.views_directory_for(source.path)
        if directory is None:
            return None
        return canonical(directory / name)

    def option_matches(self, option: str, value: str, source: SourceFile) -> bool:
        if option == 'template':
            return self.prefix_matches(self.resolver.views_path(value))

        if option == 'action':
            path = self.action_path(value, source)
            return path is not None and self.prefix_matches(path)

        if option == 'file':
            return self.is_target(self.resolver.project_path(value))

        return False

    def match_render(self, line: str, source: SourceFile) -> bool:
        return any(self.option_matches(option, value, source) for option, value in render_options(line))


class PartialTemplateUsageFinder(TemplateUsageFinder):
    """Finds render :partial calls for a partial (a template named '_name')."""

    def partial_path(self, name: str, source: SourceFile) -> Optional[Path]:
        """Resolve a partial name; callers omit the leading underscore.

        'shared/menu' -> <views>/shared/_menu
        'greeting'    -> <views of the calling controller>/_greeting
        """
        if '/' in name:
            reference = self.resolver.views_path(name)
        else:
            reference = self.action_path(name, source)
            if reference is None:
                return None
        return reference.with_name('_' + reference.name)

    def option_matches(self, option: str, value: str, source: SourceFile) -> bool:
        if option == 'partial':
            path = self.partial_path(value, source)
            return path is not None and self.prefix_matches(path)
        return super().option_matches(option, value, source)


class LayoutTemplateUsageFinder(TemplateUsageFinder):
    """Finds the controllers and render calls that apply a layout.

    A layout is used:
    1. by a controller declaring it explicitly (layout "name" / layout :name);
    2. implicitly by every controller without a declaration, when the layout
       is named after the controller or is the default layout;
    3. by any render call passing layout: "name".
    """

    MATCHERS = {
        'rb': ('match_render', 'match_layout_declaration', 'match_implicit_layout'),
        'erb': ('match_render',),
        'rhtml': ('match_render',),
        'rxml': ('match_render',),
    }

    DECLARATION_PATTERN = re.compile(
        r'''^\s*layout\s*(?:\(\s*)?(?:(['"])(?P<name>[^'"]+)\1|:(?P<symbol>\w+))'''
    )
    # layout nil / layout false / layout proc { ... } also count as declarations
    ANY_DECLARATION_PATTERN = re.compile(
        r'''^\s*layout\s*(?:\(\s*)?(?:['":]|nil\b|false\b|proc\b|lambda\b|->)'''
    )
    CLASS_PATTERN = re.compile(r'^\s*class\s+(?:\w+::)*\w+Controller\b')

    def names_target(self, name: str) -> bool:
        return template_basename(name) == self.target_basename

    def option_matches(self, option: str, value: str, source: SourceFile) -> bool:
        if option == 'layout':
            return self.names_target(value)
        return super().option_matches(option, value, source)

    def match_layout_declaration(self, line: str, source: SourceFile) -> bool:
        declaration = self.DECLARATION_PATTERN.match(line)
        if not declaration:
            return False
        return self.names_target(declaration.group('name') or declaration.group('symbol'))

    def match_implicit_layout(self, line: str, source: SourceFile) -> bool:
        if not self.CLASS_PATTERN.match(line):
            return False

        controller = source.path.stem
        if not controller.endswith(CONTROLLER_SUFFIX):
            return False
        if self.declares_layout(source.lines):
            return False

        controller_name = controller[:-len(CONTROLLER_SUFFIX)]
        return self.target_basename in (controller_name, self.layout.default_layout)

    def declares_layout(self, lines: List[str]) -> bool:
        """Check whether a controller explicitly chooses its layout."""
        return any(self.ANY_DECLARATION_PATTERN.match(line) for line in lines)
