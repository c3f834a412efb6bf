"""Git commands used by a release.

Git wraps a StepExecutor so every git call follows the pipeline's
required/guarded policy:

    git = Git(executor)
    status = git.status()          # always runs
    git.commit("Release v1.2.0")   # suppressed with --dry-run
"""

from __future__ import annotations

from shipit.core.result import Err, Ok, Result
from shipit.git.repository import GitStatus, parse_status
from shipit.services.release.errors import ReleaseError
from shipit.services.release.executor import StepExecutor
from shipit.services.release.model import StepResult

__all__ = ["Git"]


class Git:
    """Git commands for one working tree, run through a StepExecutor."""

    def __init__(self, executor: StepExecutor) -> None:
        self.executor = executor

    def pending_changes(self) -> Result[list[str], ReleaseError]:
        """Tracked files that differ from HEAD (staged or not)."""
        result = self.executor.run_required(["git", "diff-index", "--name-only", "HEAD", "--"])
        if isinstance(result, Err):
            return result
        return Ok([ln for ln in result.value.output.splitlines() if ln.strip()])

    def fetch(self) -> Result[StepResult, ReleaseError]:
        return self.executor.run_required(["git", "fetch"])

    def status(self) -> Result[GitStatus, ReleaseError]:
        result = self.executor.run_required(["git", "status", "--porcelain=v1", "-b"])
        if isinstance(result, Err):
            return result
        return Ok(parse_status(result.value.output))

    def add(self, *paths: str) -> Result[StepResult | None, ReleaseError]:
        return self.executor.run_guarded(["git", "add", *paths])

    def add_all(self) -> Result[StepResult | None, ReleaseError]:
        return self.executor.run_guarded(["git", "add", "-A", "."])

    def unstage(self, *paths: str) -> Result[StepResult, ReleaseError]:
        return self.executor.run_required(["git", "reset", "--quiet", "HEAD", "--", *paths])

    def commit(self, message: str) -> Result[StepResult | None, ReleaseError]:
        return self.executor.run_guarded(["git", "commit", "-m", message])

    def tag(self, tag: str, message: str) -> Result[StepResult | None, ReleaseError]:
        """Create an annotated tag.

        Markdown headings in the message must survive, so comment stripping
        is turned off.
        """
        return self.executor.run_guarded(
            ["git", "tag", "-a", "--cleanup=whitespace", f"--message={message}", tag]
        )

    def push(self) -> Result[StepResult | None, ReleaseError]:
        return self.executor.run_guarded(["git", "push"])

    def push_tags(self) -> Result[StepResult | None, ReleaseError]:
        return self.executor.run_guarded(["git", "push", "--tags"])

    def clone(self, url: str, dest: str) -> Result[StepResult, ReleaseError]:
        return self.executor.run_required(["git", "clone", url, dest])
