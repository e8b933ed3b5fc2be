"""Configuration management for the usage finder.

Loads the project's directory conventions from environment variables
(optionally from a .env file in the analysed project) and provides
centralized config access.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
from dotenv import dotenv_values

__version__ = "1.2.0"


class ProjectRootNotFound(ValueError):
    """Raised when the project root to analyse does not exist."""


@dataclass(frozen=True)
class ProjectLayout:
    """Directory conventions of a server-rendered web project.

    All directories except ``root`` are relative to the project root,
    ``layouts_dir`` is relative to the views directory.
    """
    root: Path
    public_dir: str = "public"
    views_dir: str = "app/views"
    controllers_dir: str = "app/controllers"
    layouts_dir: str = "layouts"
    default_layout: str = "application"
    excluded_dirs: Tuple[str, ...] = (".git", ".svn", ".hg")

    @property
    def public_root(self) -> Path:
        return self.root / self.public_dir

    @property
    def views_root(self) -> Path:
        return self.root / self.views_dir

    @property
    def controllers_root(self) -> Path:
        return self.root / self.controllers_dir

    @property
    def layouts_root(self) -> Path:
        return self.views_root / self.layouts_dir


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, project_root: str | Path = "."):
        """Initialize config for a project root, reading its .env file.

        Args:
            project_root: Root directory of the project to analyse

        Raises:
            ProjectRootNotFound: If the project root is not a directory
        """
        self.project_root = Path(project_root).resolve()
        self._validate_required()

        # Read, never exported: each root keeps its own .env values
        env_path = self.project_root / ".env"
        self._dotenv = dotenv_values(env_path) if env_path.is_file() else {}

    def _validate_required(self):
        """Validate that the project root exists.

        Raises:
            ProjectRootNotFound: If the root directory is missing
        """
        if not self.project_root.is_dir():
            raise ProjectRootNotFound(
                f"Project root does not exist: {self.project_root}"
            )

    def _get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look a variable up in the environment first, then in the project's .env."""
        value = os.environ.get(name)
        if value is None:
            value = self._dotenv.get(name)
        return default if value is None else value

    @property
    def public_dir(self) -> str:
        """Static asset root, relative to the project root."""
        return self._get("USAGE_FINDER_PUBLIC_DIR", "public")

    @property
    def views_dir(self) -> str:
        """Views root, relative to the project root."""
        return self._get("USAGE_FINDER_VIEWS_DIR", "app/views")

    @property
    def controllers_dir(self) -> str:
        """Controllers root, relative to the project root."""
        return self._get("USAGE_FINDER_CONTROLLERS_DIR", "app/controllers")

    @property
    def layouts_dir(self) -> str:
        """Layouts directory, relative to the views root."""
        return self._get("USAGE_FINDER_LAYOUTS_DIR", "layouts")

    @property
    def default_layout(self) -> str:
        """Name of the layout every controller falls back to.

        Returns:
            Layout name, ``application`` unless overridden
        """
        return self._get("USAGE_FINDER_DEFAULT_LAYOUT", "application")

    @property
    def excluded_dirs(self) -> Tuple[str, ...]:
        """Directory names never descended into while scanning.

        Priority:
        1. USAGE_FINDER_EXCLUDED_DIRS (comma separated)
        2. Version control directories

        Returns:
            Tuple of directory names
        """
        raw = self._get("USAGE_FINDER_EXCLUDED_DIRS")
        if raw is None:
            return (".git", ".svn", ".hg")
        return tuple(part.strip() for part in raw.split(",") if part.strip())

    def layout(self) -> ProjectLayout:
        """Build the ProjectLayout described by this configuration."""
        return ProjectLayout(
            root=self.project_root,
            public_dir=self.public_dir,
            views_dir=self.views_dir,
            controllers_dir=self.controllers_dir,
            layouts_dir=self.layouts_dir,
            default_layout=self.default_layout,
            excluded_dirs=self.excluded_dirs,
        )


# Singleton instance
_config: Optional[Config] = None


def get_config(project_root: str | Path = ".") -> Config:
    """Get or create the Config instance for a project root.

    The cached instance is replaced when a different root is requested.

    Returns:
        Config instance
    """
    global _config
    if _config is None or _config.project_root != Path(project_root).resolve():
        _config = Config(project_root)
    return _config
