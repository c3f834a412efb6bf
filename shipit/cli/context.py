from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import typer

from shipit.core.errors import ErrorCode
from shipit.core.manifest import MANIFEST_FILE
from shipit.output.console import ConsoleProtocol, RichConsole
from shipit.platform.http import HttpClient, RealHttpClient
from shipit.services.release.config import TOKEN_ENV_VAR
from shipit.services.release.executor import CommandRunner, default_runner
from shipit.services.release.timeouts import HOSTING_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    console: ConsoleProtocol
    token: str | None
    http: HttpClient
    runner: CommandRunner = field(default=default_runner)


def build_context() -> CLIContext:
    root = Path.cwd()
    if not (root / MANIFEST_FILE).is_file():
        typer.echo(f"error: no {MANIFEST_FILE} in {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.RELEASE_FAILED))

    token = os.environ.get(TOKEN_ENV_VAR, "").strip() or None
    return CLIContext(
        root=root,
        console=RichConsole(),
        token=token,
        http=RealHttpClient(timeout=HOSTING_TIMEOUT_SECONDS),
    )
