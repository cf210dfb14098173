"""Filesystem access used by the tree builder.

The builder never touches ``os`` directly; it asks a ``FileSystem`` for directory
listings and rule file contents. ``LocalFileSystem`` is the real implementation,
tests can pass anything with the same two methods.
"""

import os
from pathlib import Path
from typing import List, NamedTuple, Optional, Protocol

from treemark.exceptions import DirectoryReadError
from treemark.types import PathType


class DirEntry(NamedTuple):
    """A single directory listing entry.

    Attributes:
        name (str): Base name of the entry.
        is_directory (bool): Whether the entry is (or links to) a directory.
    """

    name: str
    is_directory: bool


class FileSystem(Protocol):
    def list_entries(self, path: PathType) -> List[DirEntry]:
        """List the entries of a directory.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
        """
        ...

    def read_file_if_exists(self, path: PathType) -> Optional[str]:
        """Return the text of a file, or None if there is no such file.

        Raises:
            DirectoryReadError: If the file exists but cannot be read.
        """
        ...


class LocalFileSystem:
    """``FileSystem`` implementation backed by the local disk.

    Symbolic links are reported the way ``os.scandir`` sees them: a link to a
    directory is a directory. No cycle detection is done.

    Example:
        >>> fs = LocalFileSystem()
        >>> fs.read_file_if_exists("/definitely/not/here/.gitignore") is None
        True
    """

    def list_entries(self, path: PathType) -> List[DirEntry]:
        try:
            with os.scandir(path) as entries:
                return [DirEntry(entry.name, self._is_dir(entry)) for entry in entries]
        except OSError as e:
            raise DirectoryReadError(str(path), e.strerror or str(e)) from e

    def read_file_if_exists(self, path: PathType) -> Optional[str]:
        file_path = Path(path)
        if not file_path.is_file():
            return None
        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise DirectoryReadError(str(path), e.strerror or str(e)) from e

    @staticmethod
    def _is_dir(entry: "os.DirEntry[str]") -> bool:
        try:
            return entry.is_dir()
        except OSError:
            # Dangling or unreadable links are listed as plain files
            return False
