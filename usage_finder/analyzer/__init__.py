"""Reference recognition: usages, path resolution, finders and their factory."""
from .collector import SourceFile, UsageCollector
from .factory import UsageFinderFactory
from .finders import (
    ImageUsageFinder,
    JavaScriptUsageFinder,
    PublicFileUsageFinder,
    StylesheetUsageFinder,
    UsageFinder,
)
from .resolver import PathResolver
from .template_finders import (
    LayoutTemplateUsageFinder,
    PartialTemplateUsageFinder,
    TemplateUsageFinder,
)
from .usage import UNAVAILABLE_TEXT, Usage

__all__ = [
    "ImageUsageFinder",
    "JavaScriptUsageFinder",
    "LayoutTemplateUsageFinder",
    "PartialTemplateUsageFinder",
    "PathResolver",
    "PublicFileUsageFinder",
    "SourceFile",
    "StylesheetUsageFinder",
    "TemplateUsageFinder",
    "UNAVAILABLE_TEXT",
    "Usage",
    "UsageCollector",
    "UsageFinder",
    "UsageFinderFactory",
]
