"""Finder selection by target file type."""
from pathlib import Path
from typing import Dict, Optional, Type

from ..config import ProjectLayout
from .collector import file_extension
from .finders import (
    ImageUsageFinder,
    JavaScriptUsageFinder,
    PublicFileUsageFinder,
    StylesheetUsageFinder,
    UsageFinder,
)
from .resolver import canonical, is_within
from .template_finders import (
    LayoutTemplateUsageFinder,
    PartialTemplateUsageFinder,
    TemplateUsageFinder,
)


class UsageFinderFactory:
    """Map target files to the finder that knows how they are referenced."""

    ASSET_FINDERS: Dict[str, Type[UsageFinder]] = {
        'css': StylesheetUsageFinder,
        'js': JavaScriptUsageFinder,
        'png': ImageUsageFinder,
        'gif': ImageUsageFinder,
        'jpg': ImageUsageFinder,
    }

    TEMPLATE_EXTENSIONS = {'erb', 'rhtml', 'rxml'}

    def __init__(self, layout: ProjectLayout):
        """Initialize factory.

        Args:
            layout: Directory conventions of the project
        """
        self.layout = layout

    def finder_class(self, target_file: str | Path) -> Optional[Type[UsageFinder]]:
        """Pick the finder class for a target, or None for unsupported types."""
        target_file = Path(target_file)
        extension = file_extension(target_file)

        if extension in self.ASSET_FINDERS:
            return self.ASSET_FINDERS[extension]

        if extension in self.TEMPLATE_EXTENSIONS:
            if target_file.name.startswith('_'):
                return PartialTemplateUsageFinder
            if is_within(self._absolute(target_file), canonical(self.layout.layouts_root)):
                return LayoutTemplateUsageFinder
            return TemplateUsageFinder

        if is_within(self._absolute(target_file), canonical(self.layout.public_root)):
            return PublicFileUsageFinder

        return None

    def generate(self, target_file: str | Path) -> Optional[UsageFinder]:
        """Build the finder for a target file.

        Args:
            target_file: Absolute path, or path relative to the project root

        Returns:
            Finder instance, or None when no finder handles the file type
        """
        finder_class = self.finder_class(target_file)
        if finder_class is None:
            return None
        return finder_class(target_file, self.layout)

    def _absolute(self, target_file: Path) -> Path:
        if target_file.is_absolute():
            return canonical(target_file)
        return canonical(self.layout.root / target_file)
