"""Browser-compatibility data compiler for CSS prefixing engines."""

from ._version import __version__

__all__ = ["__version__"]
