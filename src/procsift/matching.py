"""Match a query against a single process record."""

from procsift.models import ProcessRecord
from procsift.query import (
    Invalid,
    LabelClause,
    Labeled,
    NameClause,
    OwnerClause,
    PidClause,
    PlainSubstring,
    Query,
    RegexQuery,
    SearchMode,
)


def normalize(text: str, case_sensitive: bool) -> str:
    """Case-fold ``text`` unless the search is case sensitive."""
    return text if case_sensitive else text.casefold()


def _contains(haystack: str, needle: str, case_sensitive: bool) -> bool:
    return normalize(needle, case_sensitive) in normalize(haystack, case_sensitive)


def clause_matches(clause: LabelClause, record: ProcessRecord, mode: SearchMode) -> bool:
    """Check one label clause against a record."""
    if isinstance(clause, PidClause):
        return record.pid == clause.pid
    if isinstance(clause, OwnerClause):
        if record.username is None:
            return False
        return _contains(record.username, clause.text, mode.case_sensitive)
    if isinstance(clause, NameClause):
        if clause.pattern is not None:
            return clause.pattern.search(record.name) is not None
        return _contains(record.name, clause.text, mode.case_sensitive)
    raise TypeError(f"Unknown label clause: {clause!r}")


def matches(query: Query, record: ProcessRecord, mode: SearchMode) -> bool:
    """
    Check whether ``record`` satisfies ``query``.

    Case normalization applies to plain and label searches only. Regular
    expressions are matched verbatim; use an inline ``(?i)`` flag for a
    case-insensitive pattern.
    """
    if isinstance(query, Invalid):
        return False
    if isinstance(query, PlainSubstring):
        return _contains(record.name, query.text, mode.case_sensitive)
    if isinstance(query, RegexQuery):
        return query.pattern.search(record.name) is not None
    if isinstance(query, Labeled):
        # Every clause is evaluated, left to right
        result = True
        for clause in query.clauses:
            result = clause_matches(clause, record, mode) and result
        return result
    raise TypeError(f"Unknown query: {query!r}")
