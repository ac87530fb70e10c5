"""
Storage Interface

The set of operations the synchronization engine needs from a backing store.
The engine depends only on this interface, so the same algorithm runs against
the local filesystem, an in-memory fixture, or any other store.

Locations are plain strings. Enumerations must return locations that start
with the directory location they were given, so that relative identifiers can
be derived by stripping that prefix.

Author: dirmirror Project
License: MIT
"""

from abc import ABC, abstractmethod
from typing import List


class Storage(ABC):
    """
    Abstract backing store for directory mirroring.

    Implementations raise ``OSError`` subclasses for I/O failures. They need
    not be thread-safe: the engine never calls a storage concurrently.
    """

    @abstractmethod
    def create_directory(self, directory: str) -> None:
        """
        Create a directory, including missing parents.

        Does nothing if the directory already exists.
        """

    @abstractmethod
    def enumerate_files(self, directory: str) -> List[str]:
        """
        Recursively list all files beneath a directory.

        Returns an empty list if the directory does not exist.
        """

    @abstractmethod
    def enumerate_directories(self, directory: str) -> List[str]:
        """
        Recursively list all subdirectories beneath a directory.

        The directory itself is not included. Returns an empty list if the
        directory does not exist.
        """

    @abstractmethod
    def copy_file(self, source: str, target: str) -> None:
        """
        Copy the full content of ``source`` to ``target``, overwriting it.

        Raises:
            IsADirectoryError: If target is an existing directory
            OSError: If source is missing or unreadable, or the parent
                directory of target does not exist
        """

    @abstractmethod
    def delete_file(self, location: str) -> None:
        """
        Delete a single file.

        Raises:
            OSError: If the file does not exist
        """

    @abstractmethod
    def delete_directory(self, location: str) -> None:
        """
        Delete a directory and everything beneath it.

        Raises:
            OSError: If the directory does not exist
        """

    @abstractmethod
    def signature(self, location: str) -> bytes:
        """
        Return the content signature of a file.

        Files with equal content must have equal signatures within one
        backend. A backend may use something cheaper than a full content
        digest as long as that holds.

        Raises:
            OSError: If the file cannot be read
        """
