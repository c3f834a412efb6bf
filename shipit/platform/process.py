"""Subprocess execution with Result-based error handling.

Commands are always argv lists; nothing goes through a shell.

Usage:
    result = run(["git", "status", "--porcelain"], cwd=Path("."))
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(error.output)
"""

from __future__ import annotations

import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from shipit.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, -1 when the process could not run or timed out.
        stdout: Standard output (for streamed runs, the merged output).
        stderr: Standard error.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Everything the command printed, stderr first."""
        parts = [p.strip() for p in (self.stderr, self.stdout) if p.strip()]
        return "\n".join(parts)

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Environment (inherits the current one if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    on_line: Callable[[str], None],
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command, forwarding each output line as it arrives.

    stderr is merged into stdout. The full output is still collected and
    returned (or attached to the error) so failures can be reported.
    With a timeout the process is killed once it expires.
    """
    lines: list[str] = []
    timed_out = threading.Event()
    try:
        with subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as proc:
            watchdog: threading.Timer | None = None
            if timeout is not None:

                def _kill() -> None:
                    timed_out.set()
                    proc.kill()

                watchdog = threading.Timer(timeout, _kill)
                watchdog.daemon = True
                watchdog.start()
            try:
                if proc.stdout is None:
                    raise ValueError("stdout pipe was not opened")
                for line in proc.stdout:
                    line = line.rstrip("\n")
                    lines.append(line)
                    on_line(line)
                returncode = proc.wait()
            finally:
                if watchdog is not None:
                    watchdog.cancel()
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    output = "\n".join(lines)
    if timed_out.is_set():
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=output,
                stderr=f"Command timed out after {timeout}s",
            )
        )
    if returncode != 0:
        return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout=output, stderr=""))
    return Ok(output)
