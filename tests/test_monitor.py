"""Tests for the SystemMonitor class."""

import os
from queue import Queue

from procsift.models import ProcessRecord, Snapshot
from procsift.monitor import SystemMonitor


class TestSystemMonitor:
    """Tests for SystemMonitor class."""

    def test_monitor_creation(self):
        """Test SystemMonitor can be instantiated."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue)

        assert monitor.poll_rate == 1.0
        assert not monitor.is_running

    def test_monitor_custom_poll_rate(self):
        """Test SystemMonitor with custom poll rate."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=2.5)

        assert monitor.poll_rate == 2.5

    def test_poll_rate_minimum(self):
        """Test poll rate has a minimum value."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.0)
        assert monitor.poll_rate >= 0.1

        monitor.poll_rate = 0.01  # Very small value
        assert monitor.poll_rate >= 0.1  # Should be clamped to minimum

    def test_monitor_start_stop(self):
        """Test SystemMonitor can be started and stopped."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.1)

        assert not monitor.is_running

        monitor.start()
        assert monitor.is_running

        monitor.stop()
        assert not monitor.is_running

    def test_monitor_start_idempotent(self):
        """Test starting an already running monitor is safe."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.1)

        monitor.start()
        thread1 = monitor._thread

        monitor.start()  # Should not create a new thread
        thread2 = monitor._thread

        assert thread1 is thread2
        monitor.stop()

    def test_monitor_collects_data(self):
        """Test SystemMonitor collects and queues snapshots."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.1)

        monitor.start()

        try:
            snapshot = queue.get(timeout=2.0)
            assert isinstance(snapshot, Snapshot)
            assert isinstance(snapshot.records, tuple)
            assert snapshot.timestamp > 0
            assert len(snapshot) > 0
        finally:
            monitor.stop()

    def test_monitor_keeps_polling(self):
        """Test monitor keeps producing snapshots."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.1)

        monitor.start()

        try:
            snapshot1 = queue.get(timeout=2.0)
            snapshot2 = queue.get(timeout=2.0)

            assert snapshot1 is not snapshot2
            assert snapshot2.timestamp >= snapshot1.timestamp
        finally:
            monitor.stop()

    def test_collect_snapshot_includes_this_process(self):
        """Test the test runner itself shows up with a handle."""
        monitor = SystemMonitor(Queue())

        snapshot = monitor.collect_snapshot()

        own = [record for record in snapshot.records if record.pid == os.getpid()]
        assert len(own) == 1
        assert own[0].handle is not None
        assert own[0].handle.pid == os.getpid()

    def test_collected_records_have_required_fields(self):
        """Test collected records are well formed."""
        monitor = SystemMonitor(Queue())

        snapshot = monitor.collect_snapshot()

        for record in snapshot.records:
            assert isinstance(record, ProcessRecord)
            assert record.pid >= 0
            assert isinstance(record.name, str)
            assert record.username is None or isinstance(record.username, str)

    def test_collected_pids_are_unique(self):
        """Test no two records in a snapshot share a PID."""
        monitor = SystemMonitor(Queue())

        snapshot = monitor.collect_snapshot()

        pids = [record.pid for record in snapshot.records]
        assert len(pids) == len(set(pids))

    def test_daemon_thread(self):
        """Test monitor thread is a daemon thread."""
        queue: Queue[Snapshot] = Queue()
        monitor = SystemMonitor(queue, poll_rate=0.1)

        monitor.start()

        try:
            assert monitor._thread is not None
            assert monitor._thread.daemon is True
            assert monitor._thread.name == "SystemMonitor"
        finally:
            monitor.stop()
