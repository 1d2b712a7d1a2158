"""Filter a snapshot's records down to those matching a query."""

from collections.abc import Iterable

from procsift.matching import matches
from procsift.models import ProcessRecord
from procsift.query import Invalid, Query, SearchMode


def filter_records(
    records: Iterable[ProcessRecord],
    query: Query,
    mode: SearchMode,
) -> list[ProcessRecord]:
    """
    Return the records matching ``query``, in input order.

    The returned list holds the same record objects as ``records``.
    An invalid query yields an empty list.
    """
    if isinstance(query, Invalid):
        return []
    return [record for record in records if matches(query, record, mode)]
