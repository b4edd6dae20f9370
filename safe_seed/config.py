"""
Configuration management for safe-seed.

Loads and validates configuration from safe-seed.toml files using Pydantic.
Values missing from the file fall back to SAFE_SEED_* environment variables.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from safe_seed.exceptions import ConfigError

CONFIG_FILENAME = "safe-seed.toml"


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="SAFE_SEED_DATABASE_")

    url: str = Field(
        default="postgresql://postgres@localhost:5432/postgres",
        description="PostgreSQL connection URL",
    )
    connect_timeout: int = Field(
        default=10, ge=1, description="Connection timeout in seconds"
    )
    sslmode: Optional[str] = Field(
        default=None,
        description="libpq sslmode (hosted Postgres usually needs 'require')",
    )
    application_name: str = Field(
        default="safe-seed", description="Reported in pg_stat_activity"
    )


class SeedConfig(BaseSettings):
    """Seed file configuration."""

    model_config = SettingsConfigDict(env_prefix="SAFE_SEED_")

    seeds_dir: str = Field(
        default="database/seeds/sql", description="Directory containing seed SQL files"
    )
    environment: str = Field(
        default="local", description="Name of the environment being seeded"
    )
    production_environments: list[str] = Field(
        default=["production"],
        description="Environments that require an explicit confirmation",
    )


class Config(BaseSettings):
    """Main configuration for safe-seed."""

    model_config = SettingsConfigDict(env_prefix="SAFE_SEED_")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Args:
            path: Path to safe-seed.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            unknown = set(data) - {"database", "seed"}
            if unknown:
                raise ConfigError(config_path, f"unknown sections: {sorted(unknown)}")
            # Sections are built explicitly so missing keys still read the environment
            return cls(
                database=DatabaseConfig(**data.get("database", {})),
                seed=SeedConfig(**data.get("seed", {})),
            )
        except (tomllib.TOMLDecodeError, ValidationError) as e:
            raise ConfigError(config_path, str(e)) from e

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from safe-seed.toml.

        Searches for safe-seed.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir} or parent directories. "
            f"Run 'safe-seed init' to create one."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write safe-seed.toml
        """
        config_path = Path(path)

        sslmode_line = (
            f'sslmode = "{self.database.sslmode}"'
            if self.database.sslmode
            else '# sslmode = "require"'
        )
        environments = ", ".join(f'"{env}"' for env in self.seed.production_environments)

        # Written by hand so the file keeps its comments
        toml_content = f"""# safe-seed configuration
# Environment variables (SAFE_SEED_DATABASE_URL, SAFE_SEED_SEEDS_DIR, ...)
# are used for any value left out of this file.

[database]
url = "{self.database.url}"
connect_timeout = {self.database.connect_timeout}
{sslmode_line}
application_name = "{self.database.application_name}"

[seed]
seeds_dir = "{self.seed.seeds_dir}"
environment = "{self.seed.environment}"
production_environments = [{environments}]
"""

        config_path.write_text(toml_content)

    def get_seeds_dir(self) -> Path:
        """Get the seeds directory as a Path object."""
        return Path(self.seed.seeds_dir)

    def is_production(self) -> bool:
        """Check whether the configured environment needs a production guard."""
        return self.seed.environment in self.seed.production_environments
