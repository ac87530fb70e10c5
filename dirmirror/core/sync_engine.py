"""
Sync Engine

One-way mirroring of one or more source directory trees into a single target
tree. After a successful run the target holds exactly the union of the
sources: missing files are copied, changed files are overwritten, unchanged
files are left alone, and anything no source has any more is removed.

Files are identified across trees by their root-relative path. Two sources
holding a file at the same relative path is a conflict and aborts the run
before the target is touched. A target that overlaps one of the sources is
rejected outright, since mirroring would then rewrite the sources themselves.

Author: dirmirror Project
License: MIT
"""

import os
import time
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Union

from ..utils.logger import get_logger
from ..utils.file_ops import paths_overlap
from ..storage.base import Storage
from ..storage.local import LocalStorage
from .errors import ConflictError
from .paths import Root, normalize_root, relative_id, join, is_within, depth

logger = get_logger(__name__)

Sources = Union[Root, Sequence[Root]]


@dataclass(frozen=True)
class DirectoryTree:
    """Relative identifiers of every file and subdirectory beneath a root."""
    root: str
    files: FrozenSet[str]
    directories: FrozenSet[str]


@dataclass
class SyncReport:
    """Counters describing what one synchronization did."""
    sources: List[str]
    target: str
    files_copied: int = 0
    files_overwritten: int = 0
    files_unchanged: int = 0
    files_deleted: int = 0
    directories_created: int = 0
    directories_deleted: int = 0
    duration_seconds: float = 0.0

    @property
    def changed(self) -> bool:
        """Whether the target was modified in any way."""
        return any((
            self.files_copied,
            self.files_overwritten,
            self.files_deleted,
            self.directories_created,
            self.directories_deleted,
        ))

    def summary(self) -> str:
        return (
            f"{self.files_copied} copied, {self.files_overwritten} overwritten, "
            f"{self.files_unchanged} unchanged, {self.files_deleted} deleted, "
            f"{self.directories_created} dirs created, {self.directories_deleted} dirs deleted"
        )


def scan_tree(root: str, storage: Storage) -> DirectoryTree:
    """
    Compute the relative identifiers of all entries beneath a root.

    A root that does not exist yields an empty tree.

    Args:
        root: Normalized root
        storage: Storage to enumerate with

    Returns:
        DirectoryTree for the root
    """
    files = frozenset(relative_id(root, location) for location in storage.enumerate_files(root))
    directories = frozenset(
        relative_id(root, location) for location in storage.enumerate_directories(root)
    )
    return DirectoryTree(root=root, files=files, directories=directories)


def assign_owners(source_trees: Iterable[DirectoryTree], target: str) -> Dict[str, str]:
    """
    Map every source file's relative identifier to the source root that owns it.

    Sources are scanned in order; the first one to hold a relative path owns
    it. Directories are not considered.

    Raises:
        ConflictError: On the first relative path held by a second source
    """
    owners: Dict[str, str] = {}
    for tree in source_trees:
        for rel_id in sorted(tree.files):
            owner = owners.setdefault(rel_id, tree.root)
            if owner != tree.root:
                raise ConflictError(owner, tree.root, target, rel_id)
    return owners


def _normalize_sources(sources: Sources) -> List[str]:
    if isinstance(sources, (str, bytes, os.PathLike)):
        sources = [sources]

    roots: List[str] = []
    for source in sources:
        root = normalize_root(source)
        if root in roots:
            logger.debug(f"Ignoring repeated source: {root}")
            continue
        roots.append(root)

    if not roots:
        raise ValueError("At least one source directory is required")
    return roots


def _check_overlap(source_roots: List[str], target_root: str):
    """Reject a target that equals a source or is nested with one."""
    for root in source_roots:
        if paths_overlap(root, target_root):
            raise ValueError(f"Source '{root}' and target '{target_root}' overlap")


def _top_most(rel_ids: Iterable[str]) -> List[str]:
    """Drop every identifier that lies beneath another one in the set."""
    kept: List[str] = []
    for rel_id in sorted(rel_ids, key=lambda r: (depth(r), r)):
        if not any(is_within(rel_id, parent) for parent in kept):
            kept.append(rel_id)
    return kept


class SyncEngine:
    """
    Directory mirroring engine.

    Holds a storage and nothing else between runs; every call recomputes all
    state from the current source and target trees.
    """

    def __init__(self, storage: Optional[Storage] = None):
        """
        Initialize sync engine.

        Args:
            storage: Backing store (a new LocalStorage when omitted)
        """
        self.storage = storage if storage is not None else LocalStorage()

    def synchronize(self, sources: Sources, target: Root) -> SyncReport:
        """
        Mirror the sources into the target.

        Args:
            sources: One source root or an ordered sequence of source roots.
                Order only matters for conflict reporting.
            target: Target root

        Returns:
            SyncReport with counters for this run

        Raises:
            ConflictError: If two sources contain a file at the same relative path
            OSError: If the storage fails; the target may be partially updated
                and a re-run converges it
            ValueError: If no sources are given, or a source and the target
                overlap
        """
        started = time.monotonic()
        source_roots = _normalize_sources(sources)
        target_root = normalize_root(target)
        _check_overlap(source_roots, target_root)
        report = SyncReport(sources=source_roots, target=target_root)
        storage = self.storage

        logger.info(f"Synchronizing {', '.join(source_roots)} -> {target_root}")

        storage.create_directory(target_root)

        source_trees = [scan_tree(root, storage) for root in source_roots]
        target_tree = scan_tree(target_root, storage)

        try:
            assign_owners(source_trees, target_root)
        except ConflictError as e:
            logger.error(str(e))
            raise

        all_source_files = frozenset().union(*(tree.files for tree in source_trees))
        all_source_dirs = frozenset().union(*(tree.directories for tree in source_trees))

        if self._remove_changed_kinds(target_tree, all_source_files, all_source_dirs, report):
            target_tree = scan_tree(target_root, storage)

        self._create_directories(all_source_dirs - target_tree.directories, target_root, report)
        self._copy_missing_files(source_trees, target_tree, report)
        self._overwrite_changed_files(source_trees, target_tree, report)
        self._delete_files(target_tree.files - all_source_files, target_root, report)
        self._delete_directories(target_tree.directories - all_source_dirs, target_root, report)

        report.duration_seconds = time.monotonic() - started
        logger.info(f"Synchronized {target_root}: {report.summary()}")
        return report

    def _remove_changed_kinds(self, target_tree: DirectoryTree, source_files: FrozenSet[str],
                              source_dirs: FrozenSet[str], report: SyncReport) -> bool:
        """
        Remove target entries whose path is the other kind of entry in a source.

        A target file where a source has a directory (or the reverse) would
        block creating the directory or copying the file.

        Returns:
            True if anything was removed
        """
        stale_files = target_tree.files & source_dirs
        stale_dirs = target_tree.directories & source_files
        if stale_files or stale_dirs:
            logger.info(f"Replacing {len(stale_files) + len(stale_dirs)} entries that changed kind")
        self._delete_files(stale_files, target_tree.root, report)
        self._delete_directories(stale_dirs, target_tree.root, report)
        return bool(stale_files or stale_dirs)

    def _create_directories(self, rel_ids: FrozenSet[str], target_root: str, report: SyncReport):
        for rel_id in sorted(rel_ids, key=lambda r: (depth(r), r)):
            self.storage.create_directory(join(target_root, rel_id))
            report.directories_created += 1

    def _copy_missing_files(self, source_trees: List[DirectoryTree], target_tree: DirectoryTree,
                            report: SyncReport):
        for tree in source_trees:
            for rel_id in sorted(tree.files - target_tree.files):
                self.storage.copy_file(join(tree.root, rel_id), join(target_tree.root, rel_id))
                report.files_copied += 1

    def _overwrite_changed_files(self, source_trees: List[DirectoryTree], target_tree: DirectoryTree,
                                 report: SyncReport):
        for tree in source_trees:
            for rel_id in sorted(tree.files & target_tree.files):
                source_location = join(tree.root, rel_id)
                target_location = join(target_tree.root, rel_id)
                if self.storage.signature(source_location) == self.storage.signature(target_location):
                    report.files_unchanged += 1
                    continue
                self.storage.copy_file(source_location, target_location)
                report.files_overwritten += 1

    def _delete_files(self, rel_ids: FrozenSet[str], target_root: str, report: SyncReport):
        for rel_id in sorted(rel_ids):
            self.storage.delete_file(join(target_root, rel_id))
            report.files_deleted += 1

    def _delete_directories(self, rel_ids: FrozenSet[str], target_root: str, report: SyncReport):
        # Nested extraneous directories go away with their top-most ancestor.
        for rel_id in _top_most(rel_ids):
            self.storage.delete_directory(join(target_root, rel_id))
            report.directories_deleted += 1


def synchronize(sources: Sources, target: Root, storage: Optional[Storage] = None) -> None:
    """
    Mirror one or more source directories into a target directory.

    Args:
        sources: One source root or an ordered sequence of source roots
        target: Target root
        storage: Backing store (a new LocalStorage when omitted)

    Raises:
        ConflictError: If two sources contain a file at the same relative path
        OSError: If the storage fails
    """
    SyncEngine(storage).synchronize(sources, target)
