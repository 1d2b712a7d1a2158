"""Shared test fixtures for procsift."""

import pytest

from procsift.models import ProcessRecord, Snapshot


def make_record(pid: int, username: str | None, name: str) -> ProcessRecord:
    """Create a ProcessRecord without an OS handle."""
    return ProcessRecord(pid=pid, name=name, username=username)


@pytest.fixture
def snapshot() -> Snapshot:
    """The three-process snapshot used across search scenarios."""
    return Snapshot(
        timestamp=1000.0,
        records=(
            make_record(1001, "root", "init"),
            make_record(2002, "alice", "firefox"),
            make_record(2200, "alice", "Find"),
        ),
    )


@pytest.fixture
def mixed_snapshot() -> Snapshot:
    """Snapshot with duplicate owners/names and an unresolved owner."""
    return Snapshot(
        timestamp=2000.0,
        records=(
            make_record(40, "bob", "sshd"),
            make_record(7, "root", "systemd"),
            make_record(310, None, "kworker"),
            make_record(12, "Alice", "bash"),
            make_record(95, "bob", "bash"),
            make_record(3, "alice", "Bash"),
        ),
    )
