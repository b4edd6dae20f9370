"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from fakes import FakeConnection, ScriptedOperator
from safe_seed import SeedFileExecutor


@pytest.fixture
def seeds_dir(tmp_path: Path) -> Path:
    """Empty seeds directory."""
    directory = tmp_path / "seeds"
    directory.mkdir()
    return directory


@pytest.fixture
def write_seed(seeds_dir: Path):
    """Write a seed file into the seeds directory and return its path."""

    def _write(name: str, sql: str) -> Path:
        path = seeds_dir / name
        path.write_text(sql, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def operator() -> ScriptedOperator:
    return ScriptedOperator()


@pytest.fixture
def executor(conn: FakeConnection, operator: ScriptedOperator) -> SeedFileExecutor:
    return SeedFileExecutor(conn, operator)
