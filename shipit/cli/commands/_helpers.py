"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from shipit import __version__
from shipit.core.errors import ErrorCode
from shipit.core.result import Err, Result
from shipit.output.errors import print_release_error
from shipit.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from shipit.cli.context import CLIContext


def exit_on_error[T](
    result: Result[T, ReleaseError],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.RELEASE_FAILED,
) -> None:
    """Exit with error_code if result is Err, otherwise return.

    Replaces the pattern:
        if isinstance(result, Err):
            print_release_error(result.error, ctx.console)
            raise typer.Exit(code=1)
    """
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=int(error_code))


def exit_with_usage(message: str, usage: str) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    typer.echo(f"usage: {usage}", err=True)
    raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))


def show_version(value: bool) -> None:
    """Eager --version callback."""
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))
