"""Custom exceptions with helpful error messages."""

from pathlib import Path


class SafeSeedError(Exception):
    """Base exception for safe-seed errors."""

    pass


class ConfigError(SafeSeedError):
    """Configuration file could not be parsed or validated."""

    def __init__(self, path: Path, detail: str):
        self.path = path
        super().__init__(
            f"Invalid configuration in '{path}': {detail}\n\n"
            f"Suggestions:\n"
            f"1. Compare the file with the output of 'safe-seed init'\n"
            f"2. Only [database] and [seed] sections are recognised"
        )


class SeedDirectoryNotFoundError(SafeSeedError):
    """Seeds directory does not exist."""

    def __init__(self, directory: Path):
        self.directory = directory
        super().__init__(
            f"SQL seeds directory not found: {directory}\n\n"
            f"Suggestions:\n"
            f"1. Check the seeds_dir setting in safe-seed.toml\n"
            f"2. Create the directory: mkdir -p {directory}"
        )


class SeedFileNotFoundError(SafeSeedError):
    """Explicitly requested seed file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"SQL file not found: {path}\n\n"
            f"Suggestions:\n"
            f"1. Check the file name spelling (names are relative to the seeds directory)\n"
            f"2. Use 'safe-seed list' to see available files"
        )


class SeedReadError(SafeSeedError):
    """Seed file exists but could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading file {path.name}: {reason}")


class StatementExecutionError(SafeSeedError):
    """Database rejected a statement; the file's transaction was rolled back."""

    def __init__(self, file_name: str, index: int, statement: str, cause: Exception):
        self.file_name = file_name
        self.index = index
        self.statement = statement
        self.cause = cause
        super().__init__(
            f"Statement {index} of {file_name} failed: {str(cause).strip()}"
        )


class TransactionControlError(SafeSeedError):
    """Seed file issues its own BEGIN/COMMIT/ROLLBACK."""

    def __init__(self, file_name: str, index: int, statement: str):
        self.file_name = file_name
        self.index = index
        self.statement = statement
        super().__init__(
            f"Statement {index} of {file_name} controls the transaction: {statement}\n\n"
            f"Suggestions:\n"
            f"1. Remove BEGIN/COMMIT/ROLLBACK; every file already runs in its own transaction\n"
            f"2. Split the file in two if it needs two separate commits"
        )
