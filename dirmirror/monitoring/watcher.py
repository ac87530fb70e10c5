"""
Source Watcher

Monitors the source directories of mirror jobs using the watchdog library.
Any change under a job's sources marks the job pending; once the sources
have been quiet for the debounce period the job is handed to a callback.

Author: dirmirror Project
License: MIT
"""

import os
import time
from typing import Callable, Dict, List, Optional
from threading import Lock
from watchdog.observers import Observer
from watchdog.events import FileSystemEvent, FileSystemEventHandler

from ..utils.logger import get_logger
from ..config.schema import MirrorJob

logger = get_logger(__name__)


class SourceChangeHandler(FileSystemEventHandler):
    """
    File system event handler for the sources of one mirror job.

    Every event (create, modify, delete, move) resets the job's quiet timer.
    Events for files and directories alike count, since both are mirrored.
    """

    def __init__(
        self,
        job: MirrorJob,
        on_change: Callable[[MirrorJob], None],
        debounce_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the source change handler.

        Args:
            job: Mirror job whose sources are watched
            on_change: Callback(job) once the sources have settled
            debounce_seconds: Quiet period required before the callback fires
            clock: Time source (seconds)
        """
        super().__init__()
        self.job = job
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self._clock = clock

        self._last_event: Optional[float] = None
        self._lock = Lock()

    def on_any_event(self, event: FileSystemEvent):
        """Record that something changed beneath a source."""
        if event.event_type in ("opened", "closed", "closed_no_write"):
            return

        with self._lock:
            self._last_event = self._clock()
        logger.debug(f"[{self.job.name}] {event.event_type}: {event.src_path}")

    @property
    def is_pending(self) -> bool:
        with self._lock:
            return self._last_event is not None

    def process_pending(self) -> bool:
        """
        Fire the callback if a change is pending and the sources are quiet.

        Should be called periodically by the watcher.

        Returns:
            True if the callback was invoked
        """
        with self._lock:
            if self._last_event is None:
                return False
            if self._clock() - self._last_event < self.debounce_seconds:
                return False
            self._last_event = None

        logger.info(f"Sources of '{self.job.name}' changed, triggering sync")
        try:
            self.on_change(self.job)
        except Exception as e:
            logger.error(f"Error handling change for '{self.job.name}': {e}", exc_info=True)
        return True


class FileWatcher:
    """
    Watches the sources of all mirror jobs that request it.

    Sources that do not exist when the watcher starts are skipped: they
    contribute nothing to the mirror until they appear, and the next scheduled
    or manual run picks them up.
    """

    def __init__(self, on_change: Callable[[MirrorJob], None], debounce_seconds: float = 2.0):
        """
        Initialize file watcher.

        Args:
            on_change: Callback(job) when a job's sources have changed and settled
            debounce_seconds: Quiet period before a job is triggered
        """
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self.observer = Observer()
        self._handlers: Dict[str, SourceChangeHandler] = {}
        self._watched_paths: Dict[str, List[str]] = {}
        self._is_running = False

    def add_job(self, job: MirrorJob) -> List[str]:
        """
        Watch the sources of a mirror job.

        Args:
            job: Mirror job

        Returns:
            Source paths that are actually being watched
        """
        if job.name in self._handlers:
            logger.debug(f"Job already being watched: {job.name}")
            return self._watched_paths[job.name]

        handler = SourceChangeHandler(job, self.on_change, self.debounce_seconds)
        watched = []

        for source in job.sources:
            if not os.path.isdir(source):
                logger.warning(f"[{job.name}] Source does not exist, not watching: {source}")
                continue
            self.observer.schedule(handler, source, recursive=True)
            watched.append(source)
            logger.debug(f"[{job.name}] Watching {source}")

        self._handlers[job.name] = handler
        self._watched_paths[job.name] = watched
        return watched

    def start(self):
        """Start watching."""
        if self._is_running:
            logger.warning("FileWatcher already running")
            return

        self.observer.start()
        self._is_running = True

        count = sum(len(paths) for paths in self._watched_paths.values())
        logger.info(f"FileWatcher started, monitoring {count} source directories")

    def stop(self):
        """Stop watching."""
        if not self._is_running:
            return

        self.observer.stop()
        self.observer.join(timeout=5.0)
        self._is_running = False

        logger.info("FileWatcher stopped")

    def process_pending(self) -> int:
        """
        Trigger every job whose sources have settled (call periodically).

        Returns:
            Number of jobs triggered
        """
        return sum(1 for handler in list(self._handlers.values()) if handler.process_pending())

    def get_watched_folders(self) -> Dict[str, List[str]]:
        """Watched source directories per job name."""
        return {name: list(paths) for name, paths in self._watched_paths.items()}

    @property
    def is_running(self) -> bool:
        return self._is_running
