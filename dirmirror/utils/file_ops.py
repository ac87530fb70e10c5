"""
File Operation Utilities

Content signatures used for change detection (a fixed-size digest of a
file's full byte content, computed by streaming the file in bounded chunks)
and the directory overlap check that keeps a target out of its sources.

Author: dirmirror Project
License: MIT
"""

import hashlib
from typing import Union
import os

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK_SIZE = 16384


def _new_digest(algorithm: str):
    try:
        return hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")


def calculate_file_signature(
    file_path: Union[str, os.PathLike],
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> bytes:
    """
    Calculate the content signature of a file.

    The file is read in chunks of at most ``chunk_size`` bytes, so memory use
    stays bounded regardless of file size. Nothing is cached.

    Args:
        file_path: Path to the file
        algorithm: Hash algorithm (sha256, sha1, md5, blake2b, etc.)
        chunk_size: Size of chunks to read (bytes)

    Returns:
        Raw digest bytes

    Raises:
        OSError: If the file cannot be opened or read
        ValueError: If algorithm is unsupported or chunk_size is not positive
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive: {chunk_size}")

    hash_func = _new_digest(algorithm)

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.digest()


def calculate_bytes_signature(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Calculate the content signature of an in-memory byte string.

    Produces the same value as :func:`calculate_file_signature` for a file
    holding ``data``.
    """
    hash_func = _new_digest(algorithm)
    hash_func.update(data)
    return hash_func.digest()


def paths_overlap(first: Union[str, os.PathLike], second: Union[str, os.PathLike]) -> bool:
    """
    Check whether two directory paths are the same or one lies beneath the other.

    Both paths are made absolute and normalized first, so ``a``, ``./a/`` and
    ``/cwd/a`` all compare equal.

    Args:
        first: Directory path
        second: Directory path

    Returns:
        True if either directory contains (or is) the other
    """
    first = os.path.abspath(os.fspath(first))
    second = os.path.abspath(os.fspath(second))
    if first == second:
        return True

    return (
        first.startswith(second.rstrip(os.sep) + os.sep)
        or second.startswith(first.rstrip(os.sep) + os.sep)
    )
