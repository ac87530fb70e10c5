"""
Unit Tests for the Task Scheduler

Author: dirmirror Project
License: MIT
"""

import pytest
from unittest.mock import Mock

from dirmirror.config.schema import MirrorJob
from dirmirror.scheduler.task_scheduler import TaskScheduler, parse_cron


@pytest.fixture
def job():
    return MirrorJob(name="nightly", sources=["/srv/a"], target="/srv/b")


class TestParseCron:
    """Test suite for cron parsing."""

    def test_valid_expression(self):
        trigger = parse_cron("*/15 * * * *")
        assert "minute='*/15'" in str(trigger)

    def test_wrong_field_count(self):
        with pytest.raises(ValueError, match="Invalid cron expression"):
            parse_cron("* * *")

    def test_invalid_field_value(self):
        with pytest.raises(ValueError):
            parse_cron("99 * * * *")


class TestTaskScheduler:
    """Test suite for mirror job scheduling."""

    def test_add_and_list_jobs(self, job):
        scheduler = TaskScheduler(run_callback=Mock())

        scheduler.add_mirror_job(job, "0 3 * * *")

        jobs = scheduler.get_jobs()
        assert len(jobs) == 1
        assert jobs[0]["id"] == "mirror:nightly"
        assert jobs[0]["name"] == "Mirror: nightly"

    def test_replace_existing(self, job):
        scheduler = TaskScheduler(run_callback=Mock())

        scheduler.add_mirror_job(job, "0 3 * * *")
        scheduler.add_mirror_job(job, "0 4 * * *")

        jobs = scheduler.get_jobs()
        assert len(jobs) == 1
        assert "hour='4'" in jobs[0]["trigger"]

    def test_replace_existing_while_running(self, job):
        scheduler = TaskScheduler(run_callback=Mock())
        scheduler.add_mirror_job(job, "0 3 * * *")
        scheduler.start()
        try:
            scheduler.add_mirror_job(job, "30 5 * * *")

            jobs = scheduler.get_jobs()
            assert len(jobs) == 1
            assert "minute='30'" in jobs[0]["trigger"]
        finally:
            scheduler.stop()

    def test_remove_job(self, job):
        scheduler = TaskScheduler(run_callback=Mock())
        scheduler.add_mirror_job(job, "0 3 * * *")
        scheduler.start()
        try:
            assert scheduler.get_jobs()[0]["next_run"] is not None
            assert scheduler.remove_mirror_job("nightly") is True
            assert scheduler.remove_mirror_job("nightly") is False
            assert scheduler.get_jobs() == []
        finally:
            scheduler.stop()

    def test_invalid_schedule_rejected(self, job):
        scheduler = TaskScheduler(run_callback=Mock())

        with pytest.raises(ValueError):
            scheduler.add_mirror_job(job, "every day")

    def test_execute_calls_back(self, job):
        callback = Mock()
        scheduler = TaskScheduler(run_callback=callback)

        scheduler._execute_job(job)

        callback.assert_called_once_with(job)

    def test_execute_contains_errors(self, job):
        scheduler = TaskScheduler(run_callback=Mock(side_effect=OSError("disk")))

        scheduler._execute_job(job)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
