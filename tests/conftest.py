"""
Shared fixtures: a storage backend plus helpers to seed and inspect it, so
the same tests run against the local filesystem and the in-memory store.

Author: dirmirror Project
License: MIT
"""

import os
import pytest

from dirmirror.storage import LocalStorage, InMemoryStorage


class LocalWorkspace:
    """Local filesystem storage rooted in a pytest tmp_path."""

    def __init__(self, base):
        self.storage = LocalStorage()
        self.base = str(base)

    def path(self, *parts: str) -> str:
        return os.path.join(self.base, *parts)

    def write(self, location: str, data) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        os.makedirs(os.path.dirname(location), exist_ok=True)
        with open(location, "wb") as f:
            f.write(data)

    def read(self, location: str) -> bytes:
        with open(location, "rb") as f:
            return f.read()

    def mkdir(self, location: str) -> None:
        os.makedirs(location, exist_ok=True)

    def exists(self, location: str) -> bool:
        return os.path.exists(location)


class MemoryWorkspace:
    """In-memory storage with absolute POSIX locations."""

    def __init__(self):
        self.storage = InMemoryStorage()
        self.base = "/ws"

    def path(self, *parts: str) -> str:
        return "/".join((self.base,) + parts)

    def write(self, location: str, data) -> None:
        self.storage.write_file(location, data)

    def read(self, location: str) -> bytes:
        return self.storage.read_file(location)

    def mkdir(self, location: str) -> None:
        self.storage._make_dirs(location)

    def exists(self, location: str) -> bool:
        return self.storage.exists(location)


@pytest.fixture(params=["local", "memory"])
def workspace(request, tmp_path):
    """A storage backend with seeding helpers, once per backend."""
    if request.param == "local":
        return LocalWorkspace(tmp_path)
    return MemoryWorkspace()
