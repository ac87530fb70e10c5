"""
Path Model

Normalizes directory roots and converts between storage locations and
root-relative identifiers, so trees rooted at different locations can be
compared entry by entry.

A root is always normalized to end with ``/``. Relative identifiers use ``/``
as separator on every platform.

Author: dirmirror Project
License: MIT
"""

import os
from typing import Union

Root = Union[str, os.PathLike]

SEPARATOR = "/"


def normalize_root(root: Root) -> str:
    """
    Normalize a directory root so that it ends with a separator.

    Args:
        root: Directory location (string or path-like)

    Returns:
        The root as a string ending with ``/`` (or the platform separator)

    Raises:
        TypeError: If the root is a bytes path
        ValueError: If the root is empty
    """
    root = os.fspath(root)
    if not isinstance(root, str):
        raise TypeError(f"Root must be a text path, got {type(root).__name__}")
    if not root:
        raise ValueError("Root must not be empty")
    if root.endswith(SEPARATOR) or root.endswith(os.sep):
        return root
    return root + SEPARATOR


def relative_id(root: str, location: Root) -> str:
    """
    Compute the root-relative identifier of a location.

    Args:
        root: Normalized root (see :func:`normalize_root`)
        location: Location of an entry beneath the root

    Returns:
        Relative identifier using ``/`` separators, without a trailing separator

    Raises:
        ValueError: If location is not beneath root
    """
    location = os.fspath(location)
    if not location.startswith(root) or len(location) == len(root):
        raise ValueError(f"Location {location!r} is not beneath root {root!r}")

    rel = location[len(root):]
    if os.sep != SEPARATOR:
        rel = rel.replace(os.sep, SEPARATOR)
    return rel.strip(SEPARATOR)


def join(root: str, rel_id: str) -> str:
    """Reconstruct the location of ``rel_id`` beneath a normalized root."""
    return root + rel_id


def is_within(rel_id: str, directory_rel_id: str) -> bool:
    """Whether ``rel_id`` equals ``directory_rel_id`` or lies beneath it."""
    return rel_id == directory_rel_id or rel_id.startswith(directory_rel_id + SEPARATOR)


def depth(rel_id: str) -> int:
    """Number of path components in a relative identifier."""
    return rel_id.count(SEPARATOR) + 1
