"""noten - incremental static page templating."""

from ._version import __version__

__all__ = ["__version__"]
