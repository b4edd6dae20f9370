"""Tests for the safe-seed command line."""

import os
from pathlib import Path

import psycopg
import pytest
from click.testing import CliRunner, Result

from fakes import FakeConnection
from safe_seed.cli.main import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("SAFE_SEED_"):
            monkeypatch.delenv(name)


@pytest.fixture
def config_file(tmp_path: Path, seeds_dir: Path) -> Path:
    path = tmp_path / "safe-seed.toml"
    path.write_text(f'[seed]\nseeds_dir = "{seeds_dir.as_posix()}"\n')
    return path


class Harness:
    """Runs the CLI against a FakeConnection and records connection attempts."""

    def __init__(self, config_file: Path, conn: FakeConnection):
        self.config_file = config_file
        self.conn = conn
        self.connect_calls = 0

    def connect(self, database_config) -> FakeConnection:
        self.connect_calls += 1
        return self.conn

    def invoke(self, *args: str, input: str | None = None) -> Result:
        return CliRunner().invoke(
            cli,
            ["--config", str(self.config_file), *args],
            obj={"connect": self.connect},
            input=input,
        )


@pytest.fixture
def harness(config_file: Path, conn: FakeConnection) -> Harness:
    return Harness(config_file, conn)


class TestSeedCommand:
    """Tests for `safe-seed seed`."""

    def test_all_files_succeed(self, harness: Harness, write_seed) -> None:
        write_seed("002_users.sql", "INSERT INTO users VALUES (1);")
        write_seed("001_roles.sql", "INSERT INTO roles VALUES (1);")

        result = harness.invoke("seed")

        assert result.exit_code == 0, result.output
        assert "Found 2 SQL file(s) to execute:" in result.output
        assert result.output.index("001_roles.sql") < result.output.index("002_users.sql")
        assert "All SQL files executed successfully! (2 file(s))" in result.output
        assert harness.conn.committed == ["INSERT INTO roles VALUES (1)", "INSERT INTO users VALUES (1)"]
        assert harness.conn.closed is True

    def test_blocked_file_continues_and_fails_overall(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "INSERT INTO a VALUES (1);")
        write_seed("002_b.sql", "DELETE FROM b;")
        write_seed("003_c.sql", "INSERT INTO c VALUES (1);")

        result = harness.invoke("seed", input="\n")

        assert result.exit_code == 1
        assert "safe-seed seed 002_b.sql --force" in result.output
        assert "2 succeeded, 0 failed, 1 blocked" in result.output
        assert harness.conn.committed == ["INSERT INTO a VALUES (1)", "INSERT INTO c VALUES (1)"]

    def test_stop_after_failure(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "DROP TABLE a;")
        write_seed("002_b.sql", "INSERT INTO b VALUES (1);")

        result = harness.invoke("seed", input="n\n")

        assert result.exit_code == 1
        assert "1 not attempted" in result.output
        assert harness.conn.calls == []

    def test_single_file(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "INSERT INTO a VALUES (1);")
        write_seed("002_b.sql", "INSERT INTO b VALUES (1);")

        result = harness.invoke("seed", "002_b.sql")

        assert result.exit_code == 0, result.output
        assert harness.conn.committed == ["INSERT INTO b VALUES (1)"]

    def test_single_file_failure(self, config_file: Path, write_seed) -> None:
        harness = Harness(config_file, FakeConnection(fail_on="oops"))
        write_seed("001_a.sql", "INSERT INTO a VALUES (1);\nSELECT oops;")

        result = harness.invoke("seed", "001_a.sql")

        assert result.exit_code == 1
        assert "Statement 2 of 001_a.sql failed" in result.output
        assert harness.conn.committed == []

    def test_single_file_missing(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "SELECT 1;")

        result = harness.invoke("seed", "999_missing.sql")

        assert result.exit_code == 1
        assert "SQL file not found" in result.output
        assert harness.connect_calls == 0

    def test_force_with_confirmation(self, harness: Harness, write_seed) -> None:
        write_seed("001_reset.sql", "TRUNCATE cache;")

        result = harness.invoke("seed", "001_reset.sql", "--force", input="y\n")

        assert result.exit_code == 0, result.output
        assert "FORCE MODE" in result.output
        assert harness.conn.committed == ["TRUNCATE cache"]

    def test_force_without_interaction_declines(self, harness: Harness, write_seed) -> None:
        """Test that --no-interaction takes the safe default."""
        write_seed("001_reset.sql", "TRUNCATE cache;")

        result = harness.invoke("seed", "001_reset.sql", "--force", "--no-interaction")

        assert result.exit_code == 1
        assert "non-interactive" in result.output
        assert harness.conn.calls == []

    def test_missing_directory_is_created(self, harness: Harness, tmp_path: Path) -> None:
        target = tmp_path / "new" / "seeds"

        result = harness.invoke("seed", "--seeds-dir", str(target))

        assert result.exit_code == 1
        assert target.is_dir()
        assert "Nothing to seed." in result.output
        assert harness.connect_calls == 0

    def test_empty_directory_is_success(self, harness: Harness) -> None:
        result = harness.invoke("seed")

        assert result.exit_code == 0
        assert "No SQL files found" in result.output
        assert harness.connect_calls == 0

    def test_production_guard_declined(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "SELECT 1;")

        result = harness.invoke("seed", "--env", "production", input="n\n")

        assert result.exit_code == 1
        assert "PRODUCTION" in result.output
        assert "Seeding cancelled." in result.output
        assert harness.connect_calls == 0

    def test_production_guard_accepted(self, harness: Harness, write_seed) -> None:
        write_seed("001_a.sql", "SELECT 1;")

        result = harness.invoke("seed", "--env", "production", input="y\n")

        assert result.exit_code == 0, result.output
        assert harness.conn.committed == ["SELECT 1"]

    def test_connection_failure(self, config_file: Path, write_seed) -> None:
        write_seed("001_a.sql", "SELECT 1;")

        def refuse(database_config):
            raise psycopg.OperationalError("connection refused")

        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "seed"], obj={"connect": refuse}
        )

        assert result.exit_code == 1
        assert "could not connect" in result.output
        assert "connection refused" in result.output

    def test_invalid_config(self, tmp_path: Path, conn: FakeConnection) -> None:
        bad = tmp_path / "bad.toml"
        bad.write_text("[unknown]\n")

        result = Harness(bad, conn).invoke("seed")

        assert result.exit_code == 1
        assert "unknown sections" in result.output


class TestListCommand:
    """Tests for `safe-seed list`."""

    def test_lists_classification_and_counts(self, harness: Harness, write_seed) -> None:
        write_seed("002_cleanup.sql", "DELETE FROM sessions; SELECT 1;")
        write_seed("001_roles.sql", "INSERT INTO roles VALUES ('a;b');")

        result = harness.invoke("list")

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == [
            "001_roles.sql  [safe]  1 statement(s)",
            "002_cleanup.sql  [DANGEROUS]  2 statement(s)",
        ]
        assert harness.connect_calls == 0

    def test_missing_directory(self, harness: Harness, tmp_path: Path) -> None:
        result = harness.invoke("list", "--seeds-dir", str(tmp_path / "absent"))

        assert result.exit_code == 1
        assert "not found" in result.output


class TestCheckCommand:
    """Tests for `safe-seed check`."""

    def test_reports_server_version(self, harness: Harness) -> None:
        result = harness.invoke("check", "--database-url", "postgresql://app:pw@db.example.com:6543/postgres")

        assert result.exit_code == 0, result.output
        assert "app@db.example.com:6543/postgres" in result.output
        assert "pw@" not in result.output
        assert "Connected: PostgreSQL 16.4 (fake)" in result.output
        assert harness.conn.closed is True

    def test_warns_about_default_url(self, harness: Harness) -> None:
        result = harness.invoke("check")

        assert "database url is not configured" in result.output


class TestInitCommand:
    """Tests for `safe-seed init`."""

    def test_writes_config(self, tmp_path: Path) -> None:
        target = tmp_path / "safe-seed.toml"

        result = CliRunner().invoke(cli, ["init", "--path", str(target)], obj={})

        assert result.exit_code == 0
        assert "[database]" in target.read_text()

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        target = tmp_path / "safe-seed.toml"
        target.write_text("# mine\n")

        result = CliRunner().invoke(cli, ["init", "--path", str(target)], obj={})

        assert result.exit_code == 1
        assert target.read_text() == "# mine\n"

    def test_overwrite(self, tmp_path: Path) -> None:
        target = tmp_path / "safe-seed.toml"
        target.write_text("# mine\n")

        result = CliRunner().invoke(cli, ["init", "--path", str(target), "--overwrite"], obj={})

        assert result.exit_code == 0
        assert "[seed]" in target.read_text()
