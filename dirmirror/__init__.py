"""
dirmirror

One-way directory mirroring: synchronizes one or more source directory trees
into a single target tree over a pluggable storage backend.

Author: dirmirror Project
License: MIT
"""

from .core.errors import ConflictError, ConfigError, DirMirrorError, IoError
from .core.sync_engine import SyncEngine, SyncReport, synchronize
from .storage import Storage, LocalStorage, InMemoryStorage

__version__ = "0.1.0"
__all__ = [
    'synchronize', 'SyncEngine', 'SyncReport',
    'Storage', 'LocalStorage', 'InMemoryStorage',
    'ConflictError', 'ConfigError', 'DirMirrorError', 'IoError'
]
