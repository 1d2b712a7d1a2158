"""Filtered and ordered view over the latest snapshot."""

from collections.abc import Callable

from procsift.filtering import filter_records
from procsift.models import ProcessRecord, Snapshot
from procsift.query import FailureKind, Invalid, Labeled, Query, SearchMode, build_query
from procsift.sorting import SortKey, SortState, sort_records


class ResultView:
    """
    Result set shown to the user.

    Every refresh rebuilds the query, the filtered list and the ordering
    from scratch. Only the sort state survives between refreshes.
    """

    def __init__(self, sort_state: SortState | None = None) -> None:
        self._sort_state = sort_state or SortState()
        self._mode = SearchMode()
        self._query: Query = Labeled()
        self._filtered: list[ProcessRecord] = []
        self._records: tuple[ProcessRecord, ...] = ()

    @property
    def sort_state(self) -> SortState:
        """Get current sort key and direction."""
        return self._sort_state

    @property
    def records(self) -> tuple[ProcessRecord, ...]:
        """Get the filtered records in display order."""
        return self._records

    @property
    def query(self) -> Query:
        """Get the query used by the last refresh."""
        return self._query

    @property
    def error(self) -> str | None:
        """Message for an invalid pattern, if the last search had one."""
        if isinstance(self._query, Invalid) and self._query.kind is FailureKind.PATTERN:
            return self._query.message
        return None

    def __len__(self) -> int:
        return len(self._records)

    def refresh(
        self, snapshot: Snapshot, text: str, mode: SearchMode
    ) -> tuple[ProcessRecord, ...]:
        """Recompute the view from a snapshot and the current search."""
        self._mode = mode
        self._query = build_query(text, mode)
        self._filtered = filter_records(snapshot.records, self._query, mode)
        self._resort()
        return self._records

    def select_sort(self, key: SortKey) -> SortState:
        """Apply a sort key selection and reorder the current records."""
        self._sort_state = self._sort_state.select(key)
        self._resort()
        return self._sort_state

    def apply_to_all(self, action: Callable[[ProcessRecord], object]) -> int:
        """
        Invoke ``action`` once for every visible record, in display order.

        Returns the number of records the action was invoked for.
        """
        records = self._records
        for record in records:
            action(record)
        return len(records)

    def _resort(self) -> None:
        self._records = tuple(
            sort_records(
                self._filtered,
                self._sort_state.key,
                self._sort_state.direction,
                case_sensitive=self._mode.case_sensitive,
            )
        )
