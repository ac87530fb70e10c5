"""
Local Storage

Storage implementation backed by the local filesystem.

Author: dirmirror Project
License: MIT
"""

import errno
import os
import shutil
from pathlib import Path
from typing import List

from ..utils.logger import get_logger
from ..utils.file_ops import calculate_file_signature, DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from .base import Storage

logger = get_logger(__name__)


class LocalStorage(Storage):
    """
    Local filesystem storage.

    Enumerating a directory that does not exist yields nothing rather than
    failing: a missing source is an ordinary situation (first run, or a source
    that was removed since the last run). Signatures are full-content digests.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize local storage.

        Args:
            algorithm: Hash algorithm used for content signatures
            chunk_size: Read size used while hashing (bytes)
        """
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def create_directory(self, directory: str) -> None:
        Path(directory).mkdir(parents=True, exist_ok=True)

    def enumerate_files(self, directory: str) -> List[str]:
        return [
            os.path.join(dirpath, name)
            for dirpath, _, filenames in self._walk(directory)
            for name in filenames
        ]

    def enumerate_directories(self, directory: str) -> List[str]:
        return [
            os.path.join(dirpath, name)
            for dirpath, dirnames, _ in self._walk(directory)
            for name in dirnames
        ]

    def copy_file(self, source: str, target: str) -> None:
        # copy2 would otherwise place the file inside the directory
        if os.path.isdir(target):
            raise IsADirectoryError(errno.EISDIR, "Target is a directory", target)
        shutil.copy2(source, target)
        logger.debug(f"Copied: {source} -> {target}")

    def delete_file(self, location: str) -> None:
        os.remove(location)
        logger.debug(f"Deleted file: {location}")

    def delete_directory(self, location: str) -> None:
        if not os.path.isdir(location):
            raise FileNotFoundError(f"Directory not found: {location}")
        shutil.rmtree(location)
        logger.debug(f"Deleted directory: {location}")

    def signature(self, location: str) -> bytes:
        return calculate_file_signature(location, self.algorithm, self.chunk_size)

    @staticmethod
    def _walk(directory: str):
        if not os.path.isdir(directory):
            return iter(())

        def _raise(error: OSError):
            raise error

        return os.walk(directory, onerror=_raise)
