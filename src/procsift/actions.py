"""Signal delivery to processes."""

import signal
from collections.abc import Callable

import psutil
import structlog

from procsift.models import ProcessRecord

log = structlog.get_logger()

_SIGNAL_NAMES = (
    "SIGHUP",
    "SIGINT",
    "SIGQUIT",
    "SIGKILL",
    "SIGTERM",
    "SIGSTOP",
    "SIGCONT",
    "SIGUSR1",
    "SIGUSR2",
)

# Signals offered to the user, limited to those this platform defines
SUPPORTED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name) for name in _SIGNAL_NAMES if hasattr(signal, name)
)


def _deliver(
    record: ProcessRecord, label: str, deliver: Callable[[psutil.Process], None]
) -> bool:
    if record.handle is None:
        log.warning("signal_no_handle", pid=record.pid, signal=label)
        return False
    try:
        deliver(record.handle)
    except psutil.NoSuchProcess:
        log.info("signal_process_gone", pid=record.pid, signal=label)
        return False
    except psutil.AccessDenied:
        log.warning("signal_access_denied", pid=record.pid, signal=label)
        return False
    log.info("signal_sent", pid=record.pid, name=record.name, signal=label)
    return True


def send_signal(record: ProcessRecord, sig: signal.Signals) -> bool:
    """
    Send ``sig`` to the process behind ``record``.

    Returns True on success. A process that has exited, or one we may not
    signal, is logged and reported as False.
    """
    return _deliver(record, sig.name, lambda proc: proc.send_signal(sig))


def kill(record: ProcessRecord) -> bool:
    """Forcefully kill the process (SIGKILL on POSIX)."""
    return _deliver(record, "kill", lambda proc: proc.kill())


def terminate(record: ProcessRecord) -> bool:
    """Ask the process to terminate (SIGTERM on POSIX)."""
    return _deliver(record, "terminate", lambda proc: proc.terminate())
