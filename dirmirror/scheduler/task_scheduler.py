"""
Task Scheduler

APScheduler integration for periodic mirror runs.

Author: dirmirror Project
License: MIT
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.jobstores.base import JobLookupError
from typing import Callable, List

from ..utils.logger import get_logger
from ..config.schema import MirrorJob

logger = get_logger(__name__)

JOB_ID_PREFIX = "mirror:"


def parse_cron(expression: str) -> CronTrigger:
    """
    Build a UTC cron trigger from a five-field expression.

    Format: "minute hour day month day_of_week"

    Raises:
        ValueError: If the expression is malformed
    """
    parts = expression.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {expression}")

    return CronTrigger(
        minute=parts[0],
        hour=parts[1],
        day=parts[2],
        month=parts[3],
        day_of_week=parts[4],
        timezone='UTC'
    )


class TaskScheduler:
    """
    Runs mirror jobs on cron schedules.

    Missed runs are coalesced and a job never runs twice at once.
    """

    def __init__(self, run_callback: Callable[[MirrorJob], None]):
        """
        Initialize task scheduler.

        Args:
            run_callback: Function called with the job to run
        """
        self.run_callback = run_callback
        self.scheduler = BackgroundScheduler(
            timezone='UTC',
            job_defaults={
                'coalesce': True,
                'max_instances': 1
            }
        )

    def start(self):
        """Start the scheduler."""
        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.start()
        logger.info("Scheduler started")

    def stop(self):
        """Stop the scheduler."""
        if not self.scheduler.running:
            return

        self.scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")

    def add_mirror_job(self, job: MirrorJob, schedule: str):
        """
        Schedule a mirror job.

        Args:
            job: Mirror job to run
            schedule: Cron expression

        Raises:
            ValueError: If the cron expression is malformed
        """
        trigger = parse_cron(schedule)
        job_id = f"{JOB_ID_PREFIX}{job.name}"

        # replace_existing only applies to jobs already in a job store, not to
        # jobs still pending before start()
        if self.scheduler.get_job(job_id):
            self.scheduler.remove_job(job_id)

        self.scheduler.add_job(
            func=self._execute_job,
            args=[job],
            trigger=trigger,
            id=job_id,
            name=f"Mirror: {job.name}",
            replace_existing=True
        )

        logger.info(f"Scheduled '{job.name}' with schedule: {schedule}")

    def remove_mirror_job(self, name: str) -> bool:
        """
        Remove a scheduled mirror job.

        Returns:
            True if a job was removed
        """
        try:
            self.scheduler.remove_job(f"{JOB_ID_PREFIX}{name}")
        except JobLookupError:
            logger.warning(f"No scheduled job for '{name}'")
            return False

        logger.info(f"Removed schedule for '{name}'")
        return True

    def _execute_job(self, job: MirrorJob):
        logger.info(f"Executing scheduled run of '{job.name}'")
        try:
            self.run_callback(job)
        except Exception as e:
            logger.error(f"Error in scheduled run of '{job.name}': {e}", exc_info=True)

    def get_jobs(self) -> List[dict]:
        """
        Get list of scheduled jobs.

        Returns:
            List of job information dictionaries
        """
        jobs = []

        for job in self.scheduler.get_jobs():
            # Jobs added before start() have no next run time yet
            next_run = getattr(job, 'next_run_time', None)

            jobs.append({
                'id': job.id,
                'name': job.name,
                'next_run': next_run.isoformat() if next_run else None,
                'trigger': str(job.trigger)
            })

        return jobs
