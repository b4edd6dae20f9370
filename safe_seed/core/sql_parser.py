"""Parse SQL seed files: strip comments, detect destructive operations, split statements.

Quoted literals are recognised everywhere so that comment markers and
semicolons inside them are left alone:

- single-quoted strings, with ``''`` and backslash escapes
- double-quoted identifiers, with ``""`` and backslash escapes
- PostgreSQL dollar-quoted bodies (``$$ ... $$`` or ``$tag$ ... $tag$``)
"""

import logging
import re
from typing import Optional

from safe_seed.core.models import SafetyClass, Statement

logger = logging.getLogger(__name__)

# Label -> pattern, checked against comment-free text
DANGEROUS_PATTERNS: dict[str, re.Pattern[str]] = {
    "DELETE FROM": re.compile(r"\bDELETE\s+FROM\b", re.IGNORECASE),
    "TRUNCATE": re.compile(r"\bTRUNCATE\s+(?:TABLE\s+)?", re.IGNORECASE),
    "DROP": re.compile(
        r"\bDROP\s+(TABLE|SCHEMA|DATABASE|INDEX|VIEW|FUNCTION|TRIGGER)\b",
        re.IGNORECASE,
    ),
    # Matched one statement at a time, see _STATEMENT_SCOPED
    "ALTER TABLE ... DROP": re.compile(
        r"\bALTER\s+TABLE\b.*?\bDROP\b", re.IGNORECASE | re.DOTALL
    ),
}

# Patterns that must not match across a statement terminator
_STATEMENT_SCOPED = {"ALTER TABLE ... DROP"}

# Statements that would end or replace the per-file transaction
TRANSACTION_CONTROL = re.compile(
    r"\A(?:BEGIN|START\s+TRANSACTION|COMMIT|END|ABORT|ROLLBACK(?!\s+TO\b)"
    r"|PREPARE\s+TRANSACTION)\b",
    re.IGNORECASE,
)

_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


def _literal_end(sql: str, start: int) -> Optional[int]:
    """
    Return the index just past the literal starting at ``start``.

    Returns None when no literal starts there. An unterminated literal
    runs to the end of the text.
    """
    char = sql[start]
    length = len(sql)

    if char in ("'", '"'):
        i = start + 1
        while i < length:
            current = sql[i]
            if current == "\\":
                i += 2
                continue
            if current == char:
                if i + 1 < length and sql[i + 1] == char:
                    i += 2
                    continue
                return i + 1
            i += 1
        return length

    if char == "$":
        # $1 parameters and identifiers containing $ are not dollar quotes
        if start > 0 and (sql[start - 1].isalnum() or sql[start - 1] == "_"):
            return None
        match = _DOLLAR_TAG.match(sql, start)
        if match:
            tag = match.group(0)
            close = sql.find(tag, match.end())
            return length if close == -1 else close + len(tag)

    return None


def strip_comments(sql: str) -> str:
    """
    Remove ``--`` line comments and ``/* */`` block comments.

    Line comments keep their terminating newline; block comments are
    replaced by a single space so surrounding tokens stay separated.
    """
    parts: list[str] = []
    i = 0
    plain_start = 0
    length = len(sql)

    while i < length:
        end = _literal_end(sql, i)
        if end is not None:
            i = end
            continue

        if sql.startswith("--", i):
            parts.append(sql[plain_start:i])
            newline = sql.find("\n", i)
            i = length if newline == -1 else newline
            plain_start = i
            continue

        if sql.startswith("/*", i):
            parts.append(sql[plain_start:i])
            parts.append(" ")
            close = sql.find("*/", i + 2)
            i = length if close == -1 else close + 2
            plain_start = i
            continue

        i += 1

    parts.append(sql[plain_start:])
    return "".join(parts)


def find_dangerous_operations(sql: str) -> list[str]:
    """
    List the destructive operations found in SQL text.

    Comments are stripped first, so commented-out statements never match.

    Example:
        >>> find_dangerous_operations("drop table foo; DELETE FROM bar;")
        ['DELETE FROM', 'DROP TABLE']
    """
    normalized = strip_comments(sql)
    found = []
    statements: Optional[list[Statement]] = None

    for label, pattern in DANGEROUS_PATTERNS.items():
        if label in _STATEMENT_SCOPED:
            if statements is None:
                statements = split_statements(normalized)
            if any(pattern.search(s.sql) for s in statements):
                found.append(label)
        elif label == "DROP":
            objects = {m.group(1).upper() for m in pattern.finditer(normalized)}
            found.extend(f"DROP {obj}" for obj in sorted(objects))
        elif pattern.search(normalized):
            found.append(label)

    return found


def classify(sql: str) -> SafetyClass:
    """
    Classify a whole seed file as safe or dangerous.

    A single destructive statement makes the entire file dangerous.
    """
    operations = find_dangerous_operations(sql)
    if operations:
        logger.debug(f"Dangerous operations detected: {', '.join(operations)}")
        return SafetyClass.DANGEROUS
    return SafetyClass.SAFE


def split_statements(sql: str) -> list[Statement]:
    """
    Split SQL text into statements on top-level semicolons.

    Args:
        sql: Raw seed file contents (comments are stripped here)

    Returns:
        Non-empty, trimmed statements numbered from 1

    Example:
        >>> [s.sql for s in split_statements("INSERT INTO t(v) VALUES ('a;b');")]
        ["INSERT INTO t(v) VALUES ('a;b')"]
    """
    text = strip_comments(sql)
    pieces = []
    start = 0
    i = 0
    length = len(text)

    while i < length:
        end = _literal_end(text, i)
        if end is not None:
            i = end
            continue
        if text[i] == ";":
            pieces.append(text[start:i])
            start = i + 1
        i += 1

    pieces.append(text[start:])

    statements = [piece.strip() for piece in pieces if piece.strip()]
    return [Statement(index=n, sql=stmt) for n, stmt in enumerate(statements, start=1)]


def find_transaction_control(statements: list[Statement]) -> list[Statement]:
    """
    Return the statements that begin, end or abandon a transaction.

    ``ROLLBACK TO SAVEPOINT`` and ``SAVEPOINT`` stay inside the current
    transaction and are not reported.

    Example:
        >>> [s.index for s in find_transaction_control(split_statements("BEGIN; SELECT 1; COMMIT;"))]
        [1, 3]
    """
    return [s for s in statements if TRANSACTION_CONTROL.match(s.sql)]
