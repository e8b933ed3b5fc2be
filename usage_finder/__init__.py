"""Static cross-reference engine for server-rendered web projects."""
from .config import __version__

__all__ = ["__version__"]
