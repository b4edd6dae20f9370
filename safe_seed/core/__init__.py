"""Core functionality for safe-seed."""

from safe_seed.core.executor import SeedFileExecutor, discover_files
from safe_seed.core.models import (
    BatchReport,
    ExecutionResult,
    ExecutionStatus,
    SafetyClass,
    SeedFile,
    Statement,
)
from safe_seed.core.sql_parser import (
    classify,
    find_dangerous_operations,
    find_transaction_control,
    split_statements,
    strip_comments,
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
    "find_dangerous_operations",
    "find_transaction_control",
    "split_statements",
    "strip_comments",
]
