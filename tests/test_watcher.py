"""
Unit Tests for Source Watching

Tests the debounce logic with synthetic events and a controllable clock, and
the watcher's handling of missing sources.

Author: dirmirror Project
License: MIT
"""

import pytest
from unittest.mock import Mock
from watchdog.events import FileCreatedEvent, FileDeletedEvent, DirCreatedEvent

from dirmirror.config.schema import MirrorJob
from dirmirror.monitoring.watcher import FileWatcher, SourceChangeHandler


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def job(tmp_path):
    source = tmp_path / "source"
    source.mkdir()
    return MirrorJob(name="docs", sources=[str(source)], target=str(tmp_path / "target"), watch=True)


class TestSourceChangeHandler:
    """Test suite for debounced change handling."""

    def test_no_event_no_callback(self, job):
        callback = Mock()
        handler = SourceChangeHandler(job, callback, debounce_seconds=2.0, clock=FakeClock())

        assert handler.process_pending() is False
        callback.assert_not_called()

    def test_callback_after_quiet_period(self, job):
        """Test that the job fires once the debounce period has passed."""
        clock = FakeClock()
        callback = Mock()
        handler = SourceChangeHandler(job, callback, debounce_seconds=2.0, clock=clock)

        handler.on_any_event(FileCreatedEvent("/src/a.txt"))
        assert handler.is_pending
        assert handler.process_pending() is False

        clock.now += 2.5
        assert handler.process_pending() is True
        callback.assert_called_once_with(job)
        assert not handler.is_pending

    def test_new_events_reset_the_timer(self, job):
        """Test that a burst of events triggers a single run."""
        clock = FakeClock()
        callback = Mock()
        handler = SourceChangeHandler(job, callback, debounce_seconds=2.0, clock=clock)

        handler.on_any_event(FileCreatedEvent("/src/a.txt"))
        clock.now += 1.5
        handler.on_any_event(DirCreatedEvent("/src/sub"))
        clock.now += 1.5
        assert handler.process_pending() is False

        handler.on_any_event(FileDeletedEvent("/src/a.txt"))
        clock.now += 2.0
        assert handler.process_pending() is True
        assert handler.process_pending() is False
        assert callback.call_count == 1

    def test_callback_errors_are_contained(self, job):
        """Test that a failing callback does not break the handler."""
        clock = FakeClock()
        callback = Mock(side_effect=RuntimeError("boom"))
        handler = SourceChangeHandler(job, callback, debounce_seconds=0, clock=clock)

        handler.on_any_event(FileCreatedEvent("/src/a.txt"))

        assert handler.process_pending() is True
        assert not handler.is_pending


class TestFileWatcher:
    """Test suite for FileWatcher registration."""

    def test_add_job_watches_existing_sources(self, job, tmp_path):
        missing = str(tmp_path / "missing")
        job = job.model_copy(update={"sources": job.sources + [missing]})
        watcher = FileWatcher(on_change=Mock())

        watched = watcher.add_job(job)

        assert watched == [job.sources[0]]
        assert watcher.get_watched_folders() == {"docs": [job.sources[0]]}

    def test_add_job_twice(self, job):
        watcher = FileWatcher(on_change=Mock())

        watcher.add_job(job)
        watcher.add_job(job)

        assert list(watcher.get_watched_folders()) == ["docs"]

    def test_start_and_stop(self, job):
        watcher = FileWatcher(on_change=Mock())
        watcher.add_job(job)

        watcher.start()
        try:
            assert watcher.is_running
        finally:
            watcher.stop()

        assert not watcher.is_running

    def test_process_pending_counts_triggered_jobs(self, job):
        callback = Mock()
        watcher = FileWatcher(on_change=callback, debounce_seconds=0)
        watcher.add_job(job)

        assert watcher.process_pending() == 0
        watcher._handlers["docs"].on_any_event(FileCreatedEvent("/x"))
        assert watcher.process_pending() == 1
        callback.assert_called_once_with(job)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
