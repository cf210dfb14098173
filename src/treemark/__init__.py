"""Checkbox tree selection utilities.

This package builds a checkbox-annotated tree of a directory (honouring nested
ignore-rule files), lets callers select and deselect parts of it, and renders
the selection as an indented text diagram.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("treemark")
except PackageNotFoundError:
    __version__ = "unknown"
