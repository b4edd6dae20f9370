"""Operator interaction: prompts and console output for whoever runs the seeder."""

from typing import Protocol

import click


class Operator(Protocol):
    """Capability the executor needs to talk to the person running it."""

    def info(self, message: str) -> None: ...
    def line(self, message: str) -> None: ...
    def success(self, message: str) -> None: ...
    def warn(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def confirm(self, question: str, default: bool) -> bool: ...


class ClickOperator:
    """Operator backed by the terminal through click."""

    def __init__(self, interactive: bool = True):
        """Initialize operator.

        Args:
            interactive: When False, every prompt is answered with its default
        """
        self.interactive = interactive

    def info(self, message: str) -> None:
        click.secho(message, fg="green")

    def line(self, message: str) -> None:
        click.echo(message)

    def success(self, message: str) -> None:
        click.secho(f"✅ {message}", fg="green", bold=True)

    def warn(self, message: str) -> None:
        click.secho(message, fg="yellow")

    def error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)

    def confirm(self, question: str, default: bool) -> bool:
        if not self.interactive:
            answer = "yes" if default else "no"
            click.echo(f"{question} [{answer}, non-interactive]")
            return default
        return click.confirm(question, default=default)
