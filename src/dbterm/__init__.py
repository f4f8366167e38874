"""dbterm - interactive terminal client for relational databases."""

from .constants import APP_VERSION as __version__

__all__ = ["__version__"]
