from pathlib import Path
from typing import Optional
import os

from ..config import ProjectLayout

CONTROLLER_SUFFIX = '_controller'


def canonical(path: str | Path) -> Path:
    """Absolute path with every '.' and '..' segment collapsed."""
    return Path(os.path.normpath(os.path.abspath(path)))


def strip_url_suffix(reference: str) -> str:
    """Drop the query string and fragment of a URL-ish reference ('x.css?123')."""
    for marker in ('?', '#'):
        index = reference.find(marker)
        if index != -1:
            reference = reference[:index]
    return reference


def template_basename(path: str | Path) -> str:
    """Filename with every extension removed: 'hello.html.erb' -> 'hello'."""
    return Path(path).name.split('.', 1)[0]


def is_within(path: Path, directory: Path) -> bool:
    """Check whether a canonical path lies inside a directory."""
    try:
        path.relative_to(directory)
        return True
    except ValueError:
        return False


class PathResolver:
    """
    Reference resolution engine.
    Turns the textual references found in project files into canonical
    absolute paths that can be compared with a target file.
    """

    def __init__(self, layout: ProjectLayout):
        self.layout = layout
        self.root = canonical(layout.root)
        self.public_root = canonical(layout.public_root)
        self.views_root = canonical(layout.views_root)
        self.controllers_root = canonical(layout.controllers_root)

    def resolve(self, reference: str, referencing_file: str | Path) -> Path:
        """
        Resolves an asset URL to the file it points at.

        Args:
            reference: The string used in the source ('/stylesheets/x.css', '../x.css').
            referencing_file: The file containing the reference.
        """
        reference = strip_url_suffix(reference)

        # Already an absolute path into the project: nothing left to resolve.
        # A URL can spell the same text when the public tree mirrors the
        # root's own path (root /app, href /app/x.css); the public file wins
        # whenever it exists.
        if os.path.isabs(reference) and is_within(canonical(reference), self.root):
            served = canonical(self.public_root / reference.lstrip('/'))
            return served if served.exists() else canonical(reference)

        # Root-relative URL, served from the public directory
        if reference.startswith('/'):
            return canonical(self.public_root / reference.lstrip('/'))

        return canonical(Path(referencing_file).parent / reference)

    def resolve_public(self, reference: str, referencing_file: str | Path) -> Path:
        """
        Resolves a raw src/href value for the public file finder.

        Relative references only make sense next to files that are served
        from the public directory themselves; everywhere else (templates
        rendered at arbitrary URLs) they are taken relative to the public root.
        """
        referencing_file = canonical(referencing_file)
        if reference.startswith('/') or is_within(referencing_file, self.public_root):
            return self.resolve(reference, referencing_file)
        return self.resolve(reference, self.public_root / 'index.html')

    def resolve_helper(self, name: str, asset_dir: str, extension: Optional[str] = None) -> Path:
        """
        Resolves the argument of an asset helper (stylesheet_link_tag 'main').

        Helper names live under public/<asset_dir> unless root-relative, and get
        the asset extension appended when they do not carry it.
        """
        name = strip_url_suffix(name)
        if extension and not name.endswith(extension):
            name += extension

        if name.startswith('/'):
            return canonical(self.public_root / name.lstrip('/'))
        return canonical(self.public_root / asset_dir / name)

    # -------------------------------------------------------------------------
    # Template Name Resolution
    # -------------------------------------------------------------------------

    def views_path(self, name: str) -> Path:
        """Logical template name relative to the views root ('layouts/test')."""
        return canonical(self.views_root / name.lstrip('/'))

    def project_path(self, name: str) -> Path:
        """Filesystem path, absolute or relative to the project root."""
        if os.path.isabs(name):
            return canonical(name)
        return canonical(self.root / name)

    def views_directory_for(self, calling_file: str | Path) -> Optional[Path]:
        """
        Determines the views directory a render call without a directory refers to.

        app/controllers/admin/users_controller.rb -> app/views/admin/users
        app/views/hello/index.html.erb            -> app/views/hello
        """
        calling_file = canonical(calling_file)

        if is_within(calling_file, self.controllers_root):
            stem = calling_file.stem
            if not stem.endswith(CONTROLLER_SUFFIX):
                return None
            relative = calling_file.parent.relative_to(self.controllers_root)
            return canonical(self.views_root / relative / stem[:-len(CONTROLLER_SUFFIX)])

        if is_within(calling_file, self.views_root):
            return calling_file.parent

        return None
