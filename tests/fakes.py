"""In-memory connection and scripted operator used by the unit tests."""


class FakeDatabaseError(Exception):
    """Raised by FakeConnection for statements configured to fail."""


class FakeConnection:
    """
    In-memory stand-in for a database connection.

    Statements executed inside a transaction are only moved to
    ``committed`` on commit, so tests can assert what a real database
    would have kept.
    """

    def __init__(self, fail_on: str | None = None, fail_commit: bool = False):
        self.fail_on = fail_on
        self.fail_commit = fail_commit
        self.committed: list[str] = []
        self.pending: list[str] = []
        self.in_transaction = False
        self.calls: list[str] = []
        self.closed = False

    def begin(self) -> None:
        assert not self.in_transaction, "nested transaction"
        self.calls.append("BEGIN")
        self.in_transaction = True

    def execute(self, sql: str) -> None:
        assert self.in_transaction, f"statement outside transaction: {sql}"
        self.calls.append(sql)
        if self.fail_on is not None and self.fail_on in sql:
            raise FakeDatabaseError(f'syntax error at or near "{self.fail_on}"')
        self.pending.append(sql)

    def commit(self) -> None:
        self.calls.append("COMMIT")
        if self.fail_commit:
            raise FakeDatabaseError("deferred constraint violated")
        self.committed.extend(self.pending)
        self.pending = []
        self.in_transaction = False

    def rollback(self) -> None:
        self.calls.append("ROLLBACK")
        self.pending = []
        self.in_transaction = False

    def server_version(self) -> str:
        return "PostgreSQL 16.4 (fake)"

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ScriptedOperator:
    """Operator that answers prompts from a script and records all output."""

    def __init__(self, answers: list[bool] | None = None):
        self.answers = list(answers or [])
        self.questions: list[str] = []
        self.messages: list[tuple[str, str]] = []

    def _record(self, level: str, message: str) -> None:
        self.messages.append((level, message))

    def info(self, message: str) -> None:
        self._record("info", message)

    def line(self, message: str) -> None:
        self._record("line", message)

    def success(self, message: str) -> None:
        self._record("success", message)

    def warn(self, message: str) -> None:
        self._record("warn", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    def confirm(self, question: str, default: bool) -> bool:
        self.questions.append(question)
        if self.answers:
            return self.answers.pop(0)
        return default

    @property
    def output(self) -> str:
        return "\n".join(message for _, message in self.messages)
