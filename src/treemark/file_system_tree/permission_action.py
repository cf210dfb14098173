"""Permission action enum for handling unreadable subdirectories while building a tree."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when a subdirectory cannot be listed during tree building.

    The root directory always raises; this setting only covers directories below it.

    Values:
        RAISE: Raise DirectoryReadError and abandon the build (default behavior)
        IGNORE: Keep the directory as a folder without children and continue
    """

    RAISE = "raise"
    IGNORE = "ignore"
