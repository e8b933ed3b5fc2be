"""Shared fixtures for the usage finder tests."""
from pathlib import Path
from typing import Dict

import pytest

from usage_finder.config import ProjectLayout


# Fixture project with a conventional layout (app/views, app/controllers, public)
SAMPLE_APP = (Path(__file__).parent / 'fixtures' / 'sample_app').resolve()


@pytest.fixture
def sample_layout() -> ProjectLayout:
    """Layout of the on-disk sample application."""
    return ProjectLayout(root=SAMPLE_APP)


@pytest.fixture
def make_project(tmp_path):
    """Build a project tree from a {relative path: content} mapping."""
    def _make(files: Dict[str, str]) -> ProjectLayout:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        return ProjectLayout(root=tmp_path)

    return _make


def locations(usages, root: Path):
    """(relative path, line number) pairs of usages, as a set."""
    return {(usage.file.relative_to(root).as_posix(), usage.line_number) for usage in usages}
