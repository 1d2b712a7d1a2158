"""Tests for the filter pipeline."""

import pytest

from procsift.filtering import filter_records
from procsift.query import SearchMode, build_query

LABEL_MODE = SearchMode(label_search=True)


def run(snapshot, text, mode):
    return filter_records(snapshot.records, build_query(text, mode), mode)


def pids(records):
    return [record.pid for record in records]


class TestScenarios:
    """Searches over the three-process snapshot."""

    def test_name_label_is_case_insensitive_substring(self, snapshot):
        """name:find matches only 'Find'."""
        assert pids(run(snapshot, "name:find", LABEL_MODE)) == [2200]

    def test_pid_and_owner(self, snapshot):
        """pid:2002 owner:alice matches firefox."""
        assert pids(run(snapshot, "pid:2002 owner:alice", LABEL_MODE)) == [2002]

    def test_unknown_owner_is_empty(self, snapshot):
        """owner:"bob" matches nothing without error."""
        assert run(snapshot, 'owner:"bob"', LABEL_MODE) == []

    def test_non_numeric_pid_fails_closed(self, snapshot):
        """pid:abc matches nothing."""
        assert run(snapshot, "pid:abc", LABEL_MODE) == []

    def test_plain_search(self, snapshot):
        """Plain mode matches names by substring."""
        assert pids(run(snapshot, "fi", SearchMode())) == [2002, 2200]

    def test_plain_search_case_sensitive(self, snapshot):
        assert pids(run(snapshot, "fi", SearchMode(case_sensitive=True))) == [2002]

    def test_regex_search(self, snapshot):
        assert pids(run(snapshot, "^[iF]", SearchMode(regex=True))) == [1001, 2200]

    def test_invalid_regex_is_empty(self, snapshot):
        assert run(snapshot, "(", SearchMode(regex=True)) == []

    def test_label_regex_applies_to_name(self, snapshot):
        mode = SearchMode(label_search=True, regex=True)
        assert pids(run(snapshot, "owner:alice name:^f", mode)) == [2002]

    def test_empty_label_query_matches_all(self, snapshot):
        assert pids(run(snapshot, "", LABEL_MODE)) == [1001, 2002, 2200]


@pytest.mark.parametrize(
    "text",
    [
        "pid:abc",
        "user:root",
        'name:"unterminated',
        "name:fire junk",
        "pid:2002 owner:",
        "init",
        'name:"init"x',
        "   ",
        "pid:2002 ",
        " pid:2002",
    ],
)
def test_malformed_label_queries_return_nothing(snapshot, text):
    """Malformed label queries never return the full snapshot."""
    assert run(snapshot, text, LABEL_MODE) == []


@pytest.mark.parametrize(
    "clauses",
    [
        ["owner:bob", "name:bash"],
        ["owner:alice", "name:bash"],
        ["name:s", "owner:o"],
        ["pid:95", "owner:bob", "name:ba"],
        ["owner:a", "name:b", "name:sh"],
    ],
)
def test_label_query_is_intersection_of_clauses(mixed_snapshot, clauses):
    """A query returns exactly the records every single clause returns."""
    combined = set(pids(run(mixed_snapshot, " ".join(clauses), LABEL_MODE)))

    expected = set(pids(mixed_snapshot.records))
    for clause in clauses:
        expected &= set(pids(run(mixed_snapshot, clause, LABEL_MODE)))

    assert combined == expected
    reversed_query = " ".join(reversed(clauses))
    assert set(pids(run(mixed_snapshot, reversed_query, LABEL_MODE))) == combined


def test_preserves_input_order(mixed_snapshot):
    """Matches come back in snapshot order."""
    assert pids(run(mixed_snapshot, "bash", SearchMode())) == [12, 95, 3]


def test_returns_same_record_objects(snapshot):
    """Records are passed through, not copied."""
    result = run(snapshot, "", SearchMode())
    assert all(a is b for a, b in zip(result, snapshot.records))


def test_unresolved_owner_excluded_only_for_owner_clause(mixed_snapshot):
    """A record without an owner still matches other searches."""
    assert 310 in pids(run(mixed_snapshot, "name:kworker", LABEL_MODE))
    assert 310 not in pids(run(mixed_snapshot, 'owner:""', LABEL_MODE))


def test_repeated_runs_are_identical(mixed_snapshot):
    """Filtering holds no state between calls."""
    first = run(mixed_snapshot, "owner:bob", LABEL_MODE)
    second = run(mixed_snapshot, "owner:bob", LABEL_MODE)
    assert first == second
