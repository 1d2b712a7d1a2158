"""Ordering of process records."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from procsift.matching import normalize
from procsift.models import ProcessRecord


class SortKey(Enum):
    """Sort keys for the process table."""

    PID = "pid"
    OWNER = "owner"
    NAME = "name"


class Direction(Enum):
    """Sort direction."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    def __invert__(self) -> "Direction":
        if self is Direction.ASCENDING:
            return Direction.DESCENDING
        return Direction.ASCENDING


@dataclass(slots=True, frozen=True)
class SortState:
    """Active sort key and direction."""

    key: SortKey = SortKey.PID
    direction: Direction = Direction.ASCENDING

    def select(self, key: SortKey) -> "SortState":
        """
        Return the state after the user picks ``key``.

        Picking the active key flips the direction; any other key becomes
        active in ascending order.
        """
        if key is self.key:
            return SortState(key, ~self.direction)
        return SortState(key, Direction.ASCENDING)


def _key_func(key: SortKey, case_sensitive: bool) -> Callable[[ProcessRecord], object]:
    if key is SortKey.PID:
        return lambda p: p.pid
    if key is SortKey.OWNER:
        return lambda p: normalize(p.username or "", case_sensitive)
    return lambda p: normalize(p.name, case_sensitive)


def sort_records(
    records: Iterable[ProcessRecord],
    key: SortKey,
    direction: Direction,
    case_sensitive: bool = False,
) -> list[ProcessRecord]:
    """
    Sort records by ``key``.

    The sort is stable in both directions: records with equal keys keep
    their input order.
    """
    return sorted(
        records,
        key=_key_func(key, case_sensitive),
        reverse=direction is Direction.DESCENDING,
    )
