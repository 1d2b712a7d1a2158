"""Search query parsing for procsift.

Three search styles are supported, selected by :class:`SearchMode`:

- plain substring against the process name (the default);
- a regular expression against the process name (``regex``);
- label queries such as ``pid:643 owner:root name:"fire fox"`` (``label_search``).

:func:`build_query` turns the raw search text into one of the query variants
below. It never raises: malformed input produces an :class:`Invalid` query
that matches no process.
"""

import re
from dataclasses import dataclass
from enum import Enum

import structlog

log = structlog.get_logger()

LABELS = ("pid", "owner", "name")


@dataclass(slots=True, frozen=True)
class SearchMode:
    """The three independent search toggles."""

    case_sensitive: bool = False
    regex: bool = False
    label_search: bool = False


class FailureKind(Enum):
    """Why a query could not be built."""

    PARSE = "parse"
    PATTERN = "pattern"


class QueryParseError(ValueError):
    """Raised when a label query is malformed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} (at column {position + 1})")
        self.position = position


@dataclass(slots=True, frozen=True)
class PidClause:
    pid: int


@dataclass(slots=True, frozen=True)
class OwnerClause:
    text: str


@dataclass(slots=True, frozen=True)
class NameClause:
    text: str
    pattern: re.Pattern | None = None  # compiled only in regex mode


LabelClause = PidClause | OwnerClause | NameClause


@dataclass(slots=True, frozen=True)
class PlainSubstring:
    """Substring search against the process name."""

    text: str


@dataclass(slots=True, frozen=True)
class RegexQuery:
    """Regular expression search against the process name."""

    pattern: re.Pattern


@dataclass(slots=True, frozen=True)
class Labeled:
    """Label clauses combined with AND, in input order."""

    clauses: tuple[LabelClause, ...] = ()


@dataclass(slots=True, frozen=True)
class Invalid:
    """A query that could not be built. Matches nothing."""

    kind: FailureKind
    message: str


Query = PlainSubstring | RegexQuery | Labeled | Invalid


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    """Read a quoted string starting at the opening quote.

    Returns the unescaped value and the index just past the closing quote.
    """
    chars: list[str] = []
    i = start + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            if i + 1 >= len(text):
                break
            chars.append(text[i + 1])
            i += 2
            continue
        if char == '"':
            return "".join(chars), i + 1
        chars.append(char)
        i += 1
    raise QueryParseError("unterminated quote", start)


def _read_bare(text: str, start: int) -> tuple[str, int]:
    """Read a run of non-whitespace characters."""
    i = start
    while i < len(text) and not text[i].isspace():
        i += 1
    return text[start:i], i


def _read_value(text: str, start: int) -> tuple[str, int]:
    if start >= len(text) or text[start].isspace():
        raise QueryParseError("missing value", start)
    if text[start] == '"':
        value, end = _read_quoted(text, start)
        if end < len(text) and not text[end].isspace():
            raise QueryParseError("unexpected text after closing quote", end)
        return value, end
    return _read_bare(text, start)


def _make_clause(label: str, value: str, position: int, regex: bool) -> LabelClause:
    if label == "pid":
        if not value.isascii() or not value.isdigit():
            raise QueryParseError(f"pid must be a non-negative integer, got {value!r}", position)
        return PidClause(int(value))
    if label == "owner":
        return OwnerClause(value)
    # re.error propagates to build_query, which reports it as a pattern failure
    return NameClause(value, re.compile(value) if regex else None)


def parse_labels(text: str, regex: bool = False) -> tuple[LabelClause, ...]:
    """
    Parse a label query into its clauses.

    Args:
        text: Query such as ``pid:643 owner:root name:"firefox"``.
        regex: Compile ``name`` values as regular expressions.

    Raises:
        QueryParseError: Unknown label, bad quoting, empty value, leading or
            trailing whitespace, or a non-numeric pid.
        re.error: A ``name`` value is not a valid pattern (regex mode only).
    """
    clauses: list[LabelClause] = []
    if not text:
        return ()
    if text[0].isspace():
        raise QueryParseError("unexpected leading whitespace", 0)

    i = 0
    while True:
        start = i
        colon = text.find(":", start)
        token_end = _read_bare(text, start)[1]
        if colon == -1 or colon > token_end:
            raise QueryParseError("expected label:value", start)
        label = text[start:colon]
        if label not in LABELS:
            raise QueryParseError(f"unknown label {label!r}", start)

        value_start = colon + 1
        value, i = _read_value(text, value_start)
        clauses.append(_make_clause(label, value, value_start, regex))

        if i >= len(text):
            break
        separator = i
        while i < len(text) and text[i].isspace():
            i += 1
        if i >= len(text):
            raise QueryParseError("unexpected trailing whitespace", separator)

    return tuple(clauses)


def build_query(text: str, mode: SearchMode) -> Query:
    """Build the query for ``text`` under ``mode``. Never raises."""
    if mode.label_search:
        if text == "":
            return Labeled()
        try:
            return Labeled(parse_labels(text, regex=mode.regex))
        except QueryParseError as e:
            log.debug("label_query_invalid", query=text, error=str(e))
            return Invalid(FailureKind.PARSE, str(e))
        except re.error as e:
            log.debug("name_pattern_invalid", query=text, error=str(e))
            return Invalid(FailureKind.PATTERN, f"Invalid name pattern: {e}")

    if mode.regex:
        try:
            return RegexQuery(re.compile(text))
        except re.error as e:
            log.debug("pattern_invalid", query=text, error=str(e))
            return Invalid(FailureKind.PATTERN, f"Invalid pattern: {e}")

    return PlainSubstring(text)
