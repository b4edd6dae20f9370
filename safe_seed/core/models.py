"""
Core data models for safe-seed.

Defines the data structures passed between the parser, the executor and
the CLI: seed files, statements, per-file results and the batch report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class SafetyClass(str, Enum):
    """Classification of a seed file's SQL text."""

    SAFE = "safe"
    DANGEROUS = "dangerous"


class ExecutionStatus(str, Enum):
    """Outcome of running one seed file."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class SeedFile:
    """A .sql file inside the seeds directory."""

    path: Path

    @property
    def name(self) -> str:
        """File name used for ordering and operator messages."""
        return self.path.name

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class Statement:
    """
    A single SQL command extracted from a seed file.

    Attributes:
        index: 1-based position within the file
        sql: Statement text, trimmed, without the terminating semicolon
    """

    index: int
    sql: str

    @property
    def summary(self) -> str:
        """First line of the statement, shortened for log output."""
        first_line = self.sql.splitlines()[0] if self.sql else ""
        return first_line if len(first_line) <= 80 else first_line[:77] + "..."


@dataclass
class ExecutionResult:
    """
    Outcome of executing one seed file.

    Attributes:
        file: The seed file
        status: succeeded, failed or blocked
        statements_executed: Statements run before commit or failure
        error: Exception describing a failure (read or statement error)
        failed_statement_index: 1-based index of the failing statement
        dangerous_operations: Matched operation labels for blocked files
        reason: Human-readable explanation for blocked files
    """

    file: SeedFile
    status: ExecutionStatus
    statements_executed: int = 0
    error: Optional[Exception] = None
    failed_statement_index: Optional[int] = None
    dangerous_operations: list[str] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is ExecutionStatus.SUCCEEDED


@dataclass
class BatchReport:
    """Aggregate outcome of executing several seed files in order."""

    results: list[ExecutionResult] = field(default_factory=list)
    not_attempted: list[str] = field(default_factory=list)

    def add(self, result: ExecutionResult) -> None:
        self.results.append(result)

    def _count(self, status: ExecutionStatus) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def succeeded(self) -> int:
        return self._count(ExecutionStatus.SUCCEEDED)

    @property
    def failed(self) -> int:
        return self._count(ExecutionStatus.FAILED)

    @property
    def blocked(self) -> int:
        return self._count(ExecutionStatus.BLOCKED)

    @property
    def ok(self) -> bool:
        """True when every file in the batch was attempted and succeeded."""
        return not self.not_attempted and all(r.succeeded for r in self.results)
