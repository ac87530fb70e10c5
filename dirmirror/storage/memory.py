"""
In-Memory Storage

Dictionary-backed storage with POSIX-style locations. Useful as a test
fixture and as a reference for writing other backends. Every mutating call is
recorded in ``operations`` so callers can count copies and deletions.

Author: dirmirror Project
License: MIT
"""

from typing import Dict, List, Set, Tuple

from ..utils.file_ops import calculate_bytes_signature, DEFAULT_ALGORITHM
from .base import Storage


def _clean(location: str) -> str:
    """Strip trailing separators (except for the bare root ``/``)."""
    stripped = location.rstrip("/")
    return stripped or "/"


def _parent(location: str) -> str:
    head, _, _ = location.rpartition("/")
    return head or "/"


def _prefix(directory: str) -> str:
    directory = _clean(directory)
    return directory if directory == "/" else directory + "/"


class InMemoryStorage(Storage):
    """
    Storage kept entirely in memory.

    The root ``/`` always exists. Files and directories are keyed by their
    cleaned location (no trailing separator).
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        self.algorithm = algorithm
        self.files: Dict[str, bytes] = {}
        self.directories: Set[str] = {"/"}
        self.operations: List[Tuple[str, ...]] = []

    # -- helpers for seeding and inspection --------------------------------

    def write_file(self, location: str, data) -> None:
        """Create or replace a file, creating its parent directories."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        location = _clean(location)
        self._make_dirs(_parent(location))
        self.files[location] = bytes(data)

    def read_file(self, location: str) -> bytes:
        """Return a file's content."""
        location = _clean(location)
        if location not in self.files:
            raise FileNotFoundError(f"File not found: {location}")
        return self.files[location]

    def exists(self, location: str) -> bool:
        location = _clean(location)
        return location in self.files or location in self.directories

    def count(self, operation: str) -> int:
        """Number of recorded calls of a mutating operation."""
        return sum(1 for op in self.operations if op[0] == operation)

    # -- Storage interface -------------------------------------------------

    def create_directory(self, directory: str) -> None:
        directory = _clean(directory)
        if directory in self.files:
            raise FileExistsError(f"A file exists at: {directory}")
        self.operations.append(("create_directory", directory))
        self._make_dirs(directory)

    def enumerate_files(self, directory: str) -> List[str]:
        if _clean(directory) not in self.directories:
            return []
        prefix = _prefix(directory)
        return sorted(
            location
            for location in self.files
            if location.startswith(prefix)
        )

    def enumerate_directories(self, directory: str) -> List[str]:
        if _clean(directory) not in self.directories:
            return []
        prefix = _prefix(directory)
        return sorted(
            location
            for location in self.directories
            if location.startswith(prefix) and location != _clean(directory)
        )

    def copy_file(self, source: str, target: str) -> None:
        source = _clean(source)
        target = _clean(target)
        if source not in self.files:
            raise FileNotFoundError(f"Source file not found: {source}")
        if _parent(target) not in self.directories:
            raise FileNotFoundError(f"Target directory not found: {_parent(target)}")
        if target in self.directories:
            raise IsADirectoryError(f"Target is a directory: {target}")
        self.operations.append(("copy_file", source, target))
        self.files[target] = self.files[source]

    def delete_file(self, location: str) -> None:
        location = _clean(location)
        if location not in self.files:
            raise FileNotFoundError(f"File not found: {location}")
        self.operations.append(("delete_file", location))
        del self.files[location]

    def delete_directory(self, location: str) -> None:
        location = _clean(location)
        if location not in self.directories or location == "/":
            raise FileNotFoundError(f"Directory not found: {location}")
        self.operations.append(("delete_directory", location))
        prefix = location + "/"
        self.files = {
            path: data for path, data in self.files.items()
            if not path.startswith(prefix)
        }
        self.directories = {
            path for path in self.directories
            if path != location and not path.startswith(prefix)
        }

    def signature(self, location: str) -> bytes:
        return calculate_bytes_signature(self.read_file(location), self.algorithm)

    def _make_dirs(self, directory: str) -> None:
        while directory not in self.directories:
            if directory in self.files:
                raise FileExistsError(f"A file exists at: {directory}")
            self.directories.add(directory)
            directory = _parent(directory)
