"""
dirmirror Core Module

Path model, synchronization engine and job orchestration.

Author: dirmirror Project
License: MIT
"""

from .errors import ConflictError, ConfigError, DirMirrorError, IoError
from .paths import normalize_root, relative_id
from .sync_engine import SyncEngine, SyncReport, DirectoryTree, scan_tree, synchronize
from .orchestrator import Orchestrator, JobResult, JobStatus

__all__ = [
    'ConflictError', 'ConfigError', 'DirMirrorError', 'IoError',
    'normalize_root', 'relative_id',
    'SyncEngine', 'SyncReport', 'DirectoryTree', 'scan_tree', 'synchronize',
    'Orchestrator', 'JobResult', 'JobStatus'
]
