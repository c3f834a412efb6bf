from __future__ import annotations

import typer

from shipit.cli.commands._helpers import exit_on_error, exit_with_usage, show_version
from shipit.cli.context import build_context
from shipit.services.release.executor import StepExecutor
from shipit.services.release.model import ReleaseRequest
from shipit.services.release.orchestrator import ReleaseOrchestrator

USAGE = "shipit [patch|minor|major|<version>] [--preid ID] [--dry-run] [--verbose] [--notes TEXT]"


def release(
    bump: str | None = typer.Argument(
        None,
        help="patch, minor, major or an explicit version. Optional with --preid.",
        show_default=False,
    ),
    preid: str | None = typer.Option(
        None,
        "--preid",
        help="Pre-release identifier, e.g. beta (gives 1.2.3-beta.0).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Run checks, tests and build; print everything that would be published.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Echo commands and stream their output."),
    notes: str | None = typer.Option(None, "--notes", help="Appended to the release title."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Bump, test, build, tag, push and publish a release."""
    if bump is None and preid is None:
        exit_with_usage("a version bump or --preid is required", USAGE)

    ctx = build_context()
    request = ReleaseRequest(
        bump=bump,
        preid=preid,
        dry_run=dry_run,
        verbose=verbose,
        notes=notes,
    )
    executor = StepExecutor(
        cwd=ctx.root,
        console=ctx.console,
        dry_run=dry_run,
        verbose=verbose,
        runner=ctx.runner,
    )
    orchestrator = ReleaseOrchestrator(
        root=ctx.root,
        console=ctx.console,
        executor=executor,
        http=ctx.http,
        token=ctx.token,
    )
    exit_on_error(orchestrator.run(request), ctx)
