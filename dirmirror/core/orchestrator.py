"""
Orchestrator

Runs configured mirror jobs, either once or as a long-running service that
re-runs jobs when their sources change and on cron schedules.

A job that fails with an I/O error is retried as a whole: synchronization is
idempotent, so re-running it over a half-updated target converges. Conflicts
are never retried.

Author: dirmirror Project
License: MIT
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from threading import Event, Lock
from typing import Callable, List, Optional

from ..utils.logger import get_logger
from ..config.schema import Config, MirrorJob
from ..monitoring.watcher import FileWatcher
from ..scheduler.task_scheduler import TaskScheduler
from .errors import ConflictError
from .sync_engine import SyncEngine, SyncReport

logger = get_logger(__name__)

HISTORY_LIMIT = 100


class JobStatus(Enum):
    """Outcome of a mirror job run."""
    COMPLETED = "completed"
    CONFLICT = "conflict"
    FAILED = "failed"


@dataclass
class JobResult:
    """Result of one mirror job run (including its retries)."""
    name: str
    status: JobStatus
    report: Optional[SyncReport] = None
    error: Optional[str] = None
    attempts: int = 1
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        return self.status == JobStatus.COMPLETED

    def __repr__(self) -> str:
        return f"JobResult(name={self.name}, status={self.status.value}, attempts={self.attempts})"


class Orchestrator:
    """
    Coordinates the sync engine, the source watcher and the scheduler.

    Only one job runs at a time; watcher and scheduler threads queue up on a
    lock.
    """

    def __init__(
        self,
        config: Config,
        engine: Optional[SyncEngine] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize orchestrator.

        Args:
            config: Application configuration
            engine: Sync engine (defaults to one over local storage)
            sleep: Used to wait between retries
        """
        self.config = config
        self.engine = engine or SyncEngine()
        self._sleep = sleep

        self.watcher = FileWatcher(
            on_change=self.run_job,
            debounce_seconds=config.monitoring.debounce_seconds
        )
        self.scheduler = TaskScheduler(run_callback=self.run_job)

        self.history: List[JobResult] = []
        self._run_lock = Lock()
        self._stop_event = Event()
        self._running = False

        logger.debug("Orchestrator initialized")

    def run_job(self, job: MirrorJob) -> JobResult:
        """
        Run one mirror job, retrying on I/O errors.

        Args:
            job: Mirror job

        Returns:
            JobResult describing the outcome
        """
        retries = self.config.scheduling.retry_attempts
        delay = self.config.scheduling.retry_delay

        with self._run_lock:
            attempt = 0
            while True:
                attempt += 1
                try:
                    report = self.engine.synchronize(job.sources, job.target)
                    result = JobResult(job.name, JobStatus.COMPLETED, report=report, attempts=attempt)
                    break
                except ConflictError as e:
                    result = JobResult(job.name, JobStatus.CONFLICT, error=str(e), attempts=attempt)
                    break
                except OSError as e:
                    if attempt > retries:
                        logger.error(f"[{job.name}] Giving up after {attempt} attempts: {e}")
                        result = JobResult(job.name, JobStatus.FAILED, error=str(e), attempts=attempt)
                        break
                    logger.warning(
                        f"[{job.name}] Attempt {attempt} failed: {e}; retrying in {delay}s"
                    )
                    self._sleep(delay)

            self._record(result)

        return result

    def run_all(self) -> List[JobResult]:
        """Run every enabled job once, in configuration order."""
        jobs = self.config.enabled_mirrors()
        if not jobs:
            logger.warning("No enabled mirror jobs configured")
        return [self.run_job(job) for job in jobs]

    def start(self):
        """Start watching and scheduling the enabled jobs."""
        if self._running:
            logger.warning("Orchestrator already running")
            return

        default_schedule = self.config.scheduling.default_schedule

        for job in self.config.enabled_mirrors():
            if job.watch:
                self.watcher.add_job(job)
            schedule = job.schedule or default_schedule
            if schedule:
                self.scheduler.add_mirror_job(job, schedule)

        self._stop_event.clear()
        self.watcher.start()
        self.scheduler.start()
        self._running = True

        logger.info("Orchestrator started")

    def run_forever(self):
        """Process watcher events until stop() is called."""
        if not self._running:
            self.start()

        poll_interval = self.config.monitoring.poll_interval
        while not self._stop_event.wait(poll_interval):
            self.watcher.process_pending()

    def stop(self):
        """Stop the watcher and the scheduler."""
        self._stop_event.set()
        if not self._running:
            return

        self.watcher.stop()
        self.scheduler.stop()
        self._running = False

        logger.info("Orchestrator stopped")

    def get_history(self, limit: int = HISTORY_LIMIT) -> List[JobResult]:
        """Most recent job results, oldest first."""
        return self.history[-limit:]

    def _record(self, result: JobResult):
        self.history.append(result)
        if len(self.history) > HISTORY_LIMIT:
            self.history = self.history[-HISTORY_LIMIT:]

        if result.ok:
            logger.info(f"[{result.name}] {result.report.summary()}")
