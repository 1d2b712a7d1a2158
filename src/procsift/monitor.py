"""Background process sampler for procsift."""

import threading
import time
from queue import Queue

import psutil
import structlog

from procsift.models import ProcessRecord, Snapshot

log = structlog.get_logger()


class SystemMonitor:
    """
    Sampler that collects process snapshots using psutil.

    Runs in a separate daemon thread and pushes immutable snapshots to a
    thread-safe Queue. Processes that exit mid-poll, zombies and processes
    we may not inspect never interrupt the loop.
    """

    def __init__(
        self,
        update_queue: Queue[Snapshot],
        poll_rate: float = 1.0,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            update_queue: Thread-safe queue to push snapshots to.
            poll_rate: How often to poll the system (in seconds). Default 1.0s.
        """
        self._queue = update_queue
        self._poll_rate = max(0.1, poll_rate)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="SystemMonitor",
        )
        self._thread.start()
        log.info("monitor_started", poll_rate=self._poll_rate)

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
            log.info("monitor_stopped")

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            try:
                self._queue.put(self.collect_snapshot())
            except Exception:
                # Keep sampling; the next poll may succeed
                log.exception("snapshot_failed")

            self._stop_event.wait(timeout=self._poll_rate)

    def collect_snapshot(self) -> Snapshot:
        """Collect one snapshot of all running processes."""
        return Snapshot(timestamp=time.time(), records=tuple(self._collect_processes()))

    def _collect_processes(self) -> list[ProcessRecord]:
        """
        Collect records for all running processes.

        Uses psutil.process_iter() with the attributes we need prefetched.
        An unreadable username is recorded as None.
        """
        records: list[ProcessRecord] = []

        for proc in psutil.process_iter(attrs=["pid", "name", "username"], ad_value=None):
            try:
                info = proc.info
                records.append(
                    ProcessRecord(
                        pid=info["pid"],
                        name=info.get("name") or "",
                        username=info.get("username"),
                        handle=proc,
                    )
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

        return records
