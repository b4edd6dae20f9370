"""
safe-seed - Transactional SQL seed runner for PostgreSQL.

This package provides tools for:
- Discovering ordered seed files (001_*.sql, 002_*.sql, ...)
- Blocking files that contain destructive operations unless forced
- Splitting seed files into statements without breaking string literals
- Running each file in its own transaction
"""

__version__ = "0.1.0"

from safe_seed.core import (
    BatchReport,
    ExecutionResult,
    ExecutionStatus,
    SafetyClass,
    SeedFile,
    SeedFileExecutor,
    Statement,
    classify,
    discover_files,
    split_statements,
)

__all__ = [
    "BatchReport",
    "ExecutionResult",
    "ExecutionStatus",
    "SafetyClass",
    "SeedFile",
    "SeedFileExecutor",
    "Statement",
    "classify",
    "discover_files",
    "split_statements",
    "__version__",
]
