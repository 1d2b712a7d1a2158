"""Data models for procsift."""

from dataclasses import dataclass, field

import psutil


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable view of one process within a snapshot."""

    pid: int
    name: str
    username: str | None  # None when the owner could not be resolved
    handle: psutil.Process | None = field(default=None, compare=False, repr=False)


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Point-in-time set of process records, unique by PID."""

    timestamp: float
    records: tuple[ProcessRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)
