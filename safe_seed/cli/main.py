"""CLI commands for safe-seed."""

import logging
import sys
from pathlib import Path

import click
import psycopg

from safe_seed.config import CONFIG_FILENAME, Config, DatabaseConfig
from safe_seed.core.executor import SeedFileExecutor, discover_files
from safe_seed.core.models import SafetyClass, SeedFile
from safe_seed.core.sql_parser import classify, split_statements
from safe_seed.db import PsycopgConnection, describe_target
from safe_seed.exceptions import (
    ConfigError,
    SeedDirectoryNotFoundError,
    SeedFileNotFoundError,
)
from safe_seed.operator import ClickOperator

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="safe-seed")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Path to {CONFIG_FILENAME} (default: search from current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """safe-seed - apply SQL seed files without losing data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    # Tests swap this for an in-memory connection
    ctx.obj.setdefault("connect", PsycopgConnection.connect)


def _load_config(ctx: click.Context) -> Config:
    config_path = ctx.obj.get("config_path")
    try:
        if config_path is not None:
            return Config.from_toml(config_path)
        try:
            return Config.find_and_load()
        except FileNotFoundError:
            logger.debug(f"No {CONFIG_FILENAME} found, using defaults and environment")
            return Config()
    except (FileNotFoundError, ConfigError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _connect(ctx: click.Context, config: Config):
    try:
        return ctx.obj["connect"](config.database)
    except psycopg.Error as e:
        click.echo(
            f"Error: could not connect to {describe_target(config.database.url)}: {e}",
            err=True,
        )
        sys.exit(1)


@cli.command()
@click.argument("file_name", metavar="[FILE]", required=False)
@click.option("--force", is_flag=True, help="Allow files with DELETE/TRUNCATE/DROP after confirmation")
@click.option("--seeds-dir", type=click.Path(file_okay=False, path_type=Path), help="Override seeds directory")
@click.option("--database-url", help="Override database URL")
@click.option("--env", "environment", help="Override environment name")
@click.option("--no-interaction", is_flag=True, help="Answer every prompt with its default")
@click.pass_context
def seed(
    ctx: click.Context,
    file_name: str | None,
    force: bool,
    seeds_dir: Path | None,
    database_url: str | None,
    environment: str | None,
    no_interaction: bool,
) -> None:
    """Execute one seed FILE, or every .sql file in the seeds directory."""
    config = _load_config(ctx)
    if seeds_dir is not None:
        config.seed.seeds_dir = str(seeds_dir)
    if database_url is not None:
        config.database.url = database_url
    if environment is not None:
        config.seed.environment = environment

    operator = ClickOperator(interactive=not no_interaction)
    directory = config.get_seeds_dir()

    try:
        files = discover_files(directory)
    except SeedDirectoryNotFoundError:
        operator.error(f"SQL seeds directory not found: {directory}")
        operator.info("Creating directory...")
        directory.mkdir(parents=True, exist_ok=True)
        operator.success(f"Directory created. Please add SQL files to {directory}")
        operator.warn("Nothing to seed.")
        sys.exit(1)

    if config.is_production():
        if not operator.confirm(
            f"⚠️  You are in PRODUCTION environment ({config.seed.environment}). Continue?",
            default=False,
        ):
            operator.warn("Seeding cancelled.")
            sys.exit(1)

    if file_name:
        path = directory / file_name
        if not path.is_file():
            operator.error(str(SeedFileNotFoundError(path)))
            sys.exit(1)

        with _connect(ctx, config) as conn:
            executor = SeedFileExecutor(conn, operator)
            result = executor.execute_file(SeedFile(path), force=force)
        sys.exit(0 if result.succeeded else 1)

    if not files:
        operator.warn(f"No SQL files found in {directory}")
        operator.info("Add SQL files with .sql extension to seed the database.")
        return

    operator.info(f"Found {len(files)} SQL file(s) to execute:")
    for seed_file in files:
        operator.line(f"  - {seed_file.name}")
    operator.line("")

    with _connect(ctx, config) as conn:
        executor = SeedFileExecutor(conn, operator)
        report = executor.execute_batch(files, force=force)

    operator.line("")
    if report.ok:
        operator.success(f"All SQL files executed successfully! ({report.succeeded} file(s))")
        return

    summary = (
        f"⚠️  Completed with errors: {report.succeeded} succeeded, "
        f"{report.failed} failed, {report.blocked} blocked"
    )
    if report.not_attempted:
        summary += f", {len(report.not_attempted)} not attempted"
    operator.warn(summary)
    sys.exit(1)


@cli.command(name="list")
@click.option("--seeds-dir", type=click.Path(file_okay=False, path_type=Path), help="Override seeds directory")
@click.pass_context
def list_files(ctx: click.Context, seeds_dir: Path | None) -> None:
    """List seed files in execution order with their safety classification."""
    config = _load_config(ctx)
    directory = seeds_dir if seeds_dir is not None else config.get_seeds_dir()

    try:
        files = discover_files(directory)
    except SeedDirectoryNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not files:
        click.echo(f"No SQL files found in {directory}")
        return

    for seed_file in files:
        try:
            sql = seed_file.read_text()
        except (OSError, UnicodeDecodeError) as e:
            click.secho(f"{seed_file.name}  [unreadable: {e}]", fg="red")
            continue

        count = len(split_statements(sql))
        if classify(sql) is SafetyClass.DANGEROUS:
            click.secho(f"{seed_file.name}  [DANGEROUS]  {count} statement(s)", fg="red")
        else:
            click.echo(f"{seed_file.name}  [safe]  {count} statement(s)")


@cli.command()
@click.option("--database-url", help="Override database URL")
@click.pass_context
def check(ctx: click.Context, database_url: str | None) -> None:
    """Check configuration and test the database connection."""
    config = _load_config(ctx)
    if database_url is not None:
        config.database.url = database_url

    click.echo("📋 Configuration Check:")
    click.echo(f"  Target:      {describe_target(config.database.url)}")
    click.echo(f"  Seeds dir:   {config.get_seeds_dir()}")
    click.echo(f"  Environment: {config.seed.environment}")
    if config.database.url == DatabaseConfig.model_fields["url"].default:
        click.secho("  ⚠️  database url is not configured, using the default", fg="yellow")

    click.echo("🔌 Connection Test:")
    with _connect(ctx, config) as conn:
        try:
            version = conn.server_version()
        except psycopg.Error as e:
            click.echo(f"  ❌ Query failed: {e}", err=True)
            sys.exit(1)

    click.secho(f"  ✅ Connected: {version}", fg="green")


@cli.command()
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(CONFIG_FILENAME),
    show_default=True,
    help="Where to write the configuration file",
)
@click.option("--overwrite", is_flag=True, help="Replace an existing file")
def init(path: Path, overwrite: bool) -> None:
    """Write a default configuration file."""
    if path.exists() and not overwrite:
        click.echo(f"Error: {path} already exists (use --overwrite to replace it)", err=True)
        sys.exit(1)

    Config().to_toml(path)
    click.echo(f"✓ Wrote {path}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
