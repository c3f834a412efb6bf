"""Command execution boundary for the release pipeline.

Two kinds of commands exist:

- required: always run, even with --dry-run (tests, build, fetch, clone)
- guarded: anything that publishes or records the release (add, commit,
  tag, push, publish); only printed with --dry-run

A non-zero exit never terminates the process here. It comes back as
Err(ReleaseError) and the state machine stops at the current step.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Protocol

from shipit.core.result import Err, Ok, Result
from shipit.output.console import ConsoleProtocol, Style
from shipit.platform.process import ProcessError
from shipit.platform.process import run as run_process
from shipit.platform.process import run_streaming
from shipit.services.release.errors import ReleaseError, ReleaseErrorKind
from shipit.services.release.model import StepResult
from shipit.services.release.timeouts import GIT_NETWORK_TIMEOUT_SECONDS, GIT_TIMEOUT_SECONDS

__all__ = [
    "CommandRunner",
    "ScriptedRunner",
    "StepExecutor",
    "default_runner",
    "format_command",
]

_NETWORK_GIT_COMMANDS = frozenset({"fetch", "push", "pull", "clone"})


class CommandRunner(Protocol):
    def __call__(
        self,
        cmd: list[str],
        *,
        cwd: Path,
        on_line: Callable[[str], None] | None,
    ) -> Result[str, ProcessError]: ...


def _timeout_for(cmd: list[str]) -> float | None:
    if not cmd or cmd[0] != "git":
        # Tests, builds and publishing may legitimately take a long time.
        return None
    if len(cmd) > 1 and cmd[1] in _NETWORK_GIT_COMMANDS:
        return GIT_NETWORK_TIMEOUT_SECONDS
    return GIT_TIMEOUT_SECONDS


def default_runner(
    cmd: list[str],
    *,
    cwd: Path,
    on_line: Callable[[str], None] | None,
) -> Result[str, ProcessError]:
    if on_line is None:
        return run_process(cmd, cwd=cwd, timeout=_timeout_for(cmd))
    return run_streaming(cmd, cwd=cwd, on_line=on_line, timeout=_timeout_for(cmd))


def format_command(cmd: list[str]) -> str:
    return " ".join(f'"{part}"' if not part or " " in part else part for part in cmd)


@dataclass(frozen=True, slots=True)
class StepExecutor:
    """Runs pipeline commands in cwd.

    Attributes:
        cwd: Directory commands run in.
        console: Where command echoes and streamed output go.
        dry_run: Suppress guarded commands.
        verbose: Echo commands and stream their output.
        runner: Process adapter; replaced in tests.
    """

    cwd: Path
    console: ConsoleProtocol
    dry_run: bool = False
    verbose: bool = False
    runner: CommandRunner = field(default=default_runner)

    def at(self, cwd: Path) -> StepExecutor:
        """Same settings, different working directory."""
        return replace(self, cwd=cwd)

    def _execute(self, cmd: list[str]) -> Result[str, ProcessError]:
        on_line: Callable[[str], None] | None = None
        if self.verbose:
            self.console.print(f"$ {format_command(cmd)}", Style.DIM)
            on_line = self.console.print
        return self.runner(cmd, cwd=self.cwd, on_line=on_line)

    def run_required(
        self,
        cmd: list[str],
        *,
        kind: ReleaseErrorKind = "command_failed",
    ) -> Result[StepResult, ReleaseError]:
        """Run cmd regardless of dry-run; a non-zero exit is an error."""
        result = self._execute(cmd)
        if isinstance(result, Err):
            e = result.error
            return Err(
                ReleaseError(
                    kind=kind,
                    message=e.output or str(e),
                    hint=f"command: {format_command(cmd)} (exit {e.returncode})",
                )
            )
        return Ok(StepResult(exit_code=0, output=result.value))

    def run_guarded(
        self,
        cmd: list[str],
        *,
        kind: ReleaseErrorKind = "command_failed",
    ) -> Result[StepResult | None, ReleaseError]:
        """Run cmd unless dry-run is on; Ok(None) means it was skipped."""
        if self.dry_run:
            self.console.dry_run(format_command(cmd))
            return Ok(None)
        return self.run_required(cmd, kind=kind)


class ScriptedRunner:
    """CommandRunner for tests.

    Commands are matched by prefix; the first matching rule wins and
    anything unmatched succeeds with empty output.

    Usage:
        runner = ScriptedRunner()
        runner.fail(["npm", "run", "build"], output="tsc: error")
        runner.respond(["git", "status"], "## main...origin/main [behind 2]")
        executor = StepExecutor(cwd=root, console=MockConsole(), runner=runner)
    """

    def __init__(self) -> None:
        self._rules: list[tuple[tuple[str, ...], str, int]] = []
        self._hooks: list[tuple[tuple[str, ...], Callable[[list[str], Path], None]]] = []
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    def respond(self, prefix: list[str], output: str) -> None:
        self._rules.append((tuple(prefix), output, 0))

    def fail(self, prefix: list[str], *, output: str = "", returncode: int = 1) -> None:
        self._rules.append((tuple(prefix), output, returncode))

    def on(self, prefix: list[str], hook: Callable[[list[str], Path], None]) -> None:
        """Call hook(cmd, cwd) when a matching command runs (e.g. to fake a clone)."""
        self._hooks.append((tuple(prefix), hook))

    def commands(self) -> list[tuple[str, ...]]:
        return [cmd for cmd, _ in self.calls]

    def ran(self, prefix: list[str]) -> bool:
        p = tuple(prefix)
        return any(cmd[: len(p)] == p for cmd in self.commands())

    def __call__(
        self,
        cmd: list[str],
        *,
        cwd: Path,
        on_line: Callable[[str], None] | None,
    ) -> Result[str, ProcessError]:
        key = tuple(cmd)
        self.calls.append((key, cwd))

        for prefix, hook in self._hooks:
            if key[: len(prefix)] == prefix:
                hook(cmd, cwd)

        for prefix, output, returncode in self._rules:
            if key[: len(prefix)] != prefix:
                continue
            if on_line is not None:
                for line in output.splitlines():
                    on_line(line)
            if returncode != 0:
                return Err(ProcessError(command=key, returncode=returncode, stdout=output, stderr=""))
            return Ok(output)
        return Ok("")
