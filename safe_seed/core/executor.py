"""Execute SQL seed files, one transaction per file."""

import logging
from pathlib import Path

from safe_seed.core.models import (
    BatchReport,
    ExecutionResult,
    ExecutionStatus,
    SeedFile,
    Statement,
)
from safe_seed.core.sql_parser import (
    find_dangerous_operations,
    find_transaction_control,
    split_statements,
)
from safe_seed.db import SeedConnection
from safe_seed.exceptions import (
    SeedDirectoryNotFoundError,
    SeedReadError,
    StatementExecutionError,
    TransactionControlError,
)
from safe_seed.operator import Operator

logger = logging.getLogger(__name__)


def discover_files(directory: Path | str) -> list[SeedFile]:
    """
    List the .sql files directly inside a directory, sorted by name.

    Args:
        directory: Seeds directory

    Returns:
        Seed files in execution order (001_..., 002_..., ...)

    Raises:
        SeedDirectoryNotFoundError: If directory doesn't exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise SeedDirectoryNotFoundError(directory)

    files = [SeedFile(path) for path in directory.glob("*.sql") if path.is_file()]
    return sorted(files, key=lambda seed_file: seed_file.name)


class SeedFileExecutor:
    """
    Apply seed files to a database with danger checks and per-file atomicity.

    Every file runs inside its own transaction. A failing statement rolls
    back the whole file; files already committed in the same batch stay
    committed.
    """

    def __init__(
        self,
        conn: SeedConnection,
        operator: Operator,
        command: str = "safe-seed seed",
    ):
        """
        Initialize executor.

        Args:
            conn: Connection exposing begin/execute/commit/rollback
            operator: Prompts and output for the person running the seed
            command: Command shown when telling the operator how to force a file
        """
        self.conn = conn
        self.operator = operator
        self.command = command

    def execute_file(self, seed_file: SeedFile, force: bool = False) -> ExecutionResult:
        """
        Execute one seed file.

        Args:
            seed_file: File to execute
            force: Allow files with destructive operations (after confirmation)

        Returns:
            ExecutionResult; errors are reported in the result, never raised
        """
        self.operator.info(f"📄 Executing: {seed_file.name}")

        try:
            sql = seed_file.read_text()
        except (OSError, UnicodeDecodeError) as e:
            error = SeedReadError(seed_file.path, str(e))
            logger.warning(str(error))
            self.operator.error(f"  ❌ {error}")
            return ExecutionResult(seed_file, ExecutionStatus.FAILED, error=error)

        statements = split_statements(sql)
        control = find_transaction_control(statements)
        if control:
            return self._reject_transaction_control(seed_file, control[0])

        operations = find_dangerous_operations(sql)
        if operations:
            blocked = self._guard_dangerous(seed_file, operations, force)
            if blocked is not None:
                return blocked

        return self._execute_statements(seed_file, statements)

    def execute_batch(self, files: list[SeedFile], force: bool = False) -> BatchReport:
        """
        Execute seed files in order.

        After a file does not succeed the operator decides whether to carry
        on (default) or stop; stopped files are listed in
        ``BatchReport.not_attempted``.
        """
        report = BatchReport()

        for position, seed_file in enumerate(files):
            result = self.execute_file(seed_file, force)
            report.add(result)

            remaining = files[position + 1 :]
            if result.succeeded or not remaining:
                continue
            if not self.operator.confirm("Continue with remaining files?", default=True):
                report.not_attempted = [f.name for f in remaining]
                self.operator.warn(f"Stopped. {len(remaining)} file(s) not executed.")
                break

        logger.info(
            f"Batch finished: {report.succeeded} succeeded, "
            f"{report.failed} failed, {report.blocked} blocked"
        )
        return report

    def override_command(self, seed_file: SeedFile) -> str:
        """Command the operator can run to force a dangerous file."""
        return f"{self.command} {seed_file.name} --force"

    def _guard_dangerous(
        self, seed_file: SeedFile, operations: list[str], force: bool
    ) -> ExecutionResult | None:
        """Return a blocked result, or None when the operator allowed execution."""
        found = ", ".join(operations)

        if not force:
            self.operator.error(f"⚠️  DANGER: SQL file contains {found} operations!")
            self.operator.warn("This command is designed to PREVENT data loss.")
            self.operator.line("If you are absolutely certain you want to proceed:")
            self.operator.line(f"  {self.override_command(seed_file)}")
            logger.info(f"{seed_file.name} blocked: {found}")
            return ExecutionResult(
                seed_file,
                ExecutionStatus.BLOCKED,
                dangerous_operations=operations,
                reason="force mode not set",
            )

        self.operator.warn(f"⚠️  FORCE MODE: Executing file with {found} operations...")
        if not self.operator.confirm("Are you absolutely sure?", default=False):
            self.operator.warn("Execution cancelled.")
            return ExecutionResult(
                seed_file,
                ExecutionStatus.BLOCKED,
                dangerous_operations=operations,
                reason="operator declined confirmation",
            )
        return None

    def _reject_transaction_control(
        self, seed_file: SeedFile, statement: Statement
    ) -> ExecutionResult:
        error = TransactionControlError(seed_file.name, statement.index, statement.summary)
        logger.warning(f"{seed_file.name} rejected: statement {statement.index} is {statement.summary}")
        self.operator.error(f"  ❌ {error}")
        return ExecutionResult(
            seed_file,
            ExecutionStatus.FAILED,
            error=error,
            failed_statement_index=statement.index,
        )

    def _execute_statements(
        self, seed_file: SeedFile, statements: list[Statement]
    ) -> ExecutionResult:
        try:
            self.conn.begin()
        except Exception as e:
            logger.error(f"Could not open transaction for {seed_file.name}: {e}")
            self.operator.error(f"  ❌ Could not start a transaction: {e}")
            return ExecutionResult(seed_file, ExecutionStatus.FAILED, error=e)

        executed = 0
        for statement in statements:
            try:
                self.conn.execute(statement.sql)
            except Exception as e:
                error = StatementExecutionError(
                    seed_file.name, statement.index, statement.sql, e
                )
                self._rollback(seed_file)
                self.operator.error(f"  ❌ Error executing {seed_file.name}:")
                self.operator.error(f"     {error}")
                self.operator.warn("     Transaction rolled back. No changes were made.")
                return ExecutionResult(
                    seed_file,
                    ExecutionStatus.FAILED,
                    statements_executed=executed,
                    error=error,
                    failed_statement_index=statement.index,
                )

            executed += 1
            logger.debug(f"{seed_file.name} [{statement.index}] {statement.summary}")
            self.operator.line(f"  ✓ Statement {statement.index} executed")

        try:
            self.conn.commit()
        except Exception as e:
            self._rollback(seed_file)
            self.operator.error(f"  ❌ Commit failed for {seed_file.name}: {e}")
            self.operator.warn("     Transaction rolled back. No changes were made.")
            return ExecutionResult(
                seed_file, ExecutionStatus.FAILED, statements_executed=executed, error=e
            )

        self.operator.success(f"{seed_file.name} executed successfully")
        return ExecutionResult(
            seed_file, ExecutionStatus.SUCCEEDED, statements_executed=executed
        )

    def _rollback(self, seed_file: SeedFile) -> None:
        try:
            self.conn.rollback()
        except Exception as e:
            # The server aborts the transaction itself once the connection drops
            logger.error(f"Rollback of {seed_file.name} failed: {e}")
