from __future__ import annotations

from pathlib import Path

from shipit.core.result import Err, Ok
from shipit.output.console import MockConsole
from shipit.services.release.executor import ScriptedRunner, StepExecutor
from shipit.services.release.vcs import Git


def _git(tmp_path: Path, *, dry_run: bool = False) -> tuple[Git, ScriptedRunner]:
    runner = ScriptedRunner()
    executor = StepExecutor(cwd=tmp_path, console=MockConsole(), dry_run=dry_run, runner=runner)
    return Git(executor), runner


def test_pending_changes(tmp_path: Path) -> None:
    git, runner = _git(tmp_path)
    runner.respond(["git", "diff-index"], "package.json\nsrc/index.js\n")

    result = git.pending_changes()

    assert isinstance(result, Ok)
    assert result.value == ["package.json", "src/index.js"]


def test_pending_changes_clean(tmp_path: Path) -> None:
    git, _ = _git(tmp_path)

    result = git.pending_changes()

    assert isinstance(result, Ok)
    assert result.value == []


def test_status_parses_divergence(tmp_path: Path) -> None:
    git, runner = _git(tmp_path)
    runner.respond(["git", "status"], "## main...origin/main [behind 4]\n")

    result = git.status()

    assert isinstance(result, Ok)
    assert result.value.behind == 4
    assert runner.commands() == [("git", "status", "--porcelain=v1", "-b")]


def test_tag_keeps_markdown(tmp_path: Path) -> None:
    git, runner = _git(tmp_path)

    git.tag("v1.0.0", "# v1.0.0\n\n* fix")

    assert runner.commands() == [
        ("git", "tag", "-a", "--cleanup=whitespace", "--message=# v1.0.0\n\n* fix", "v1.0.0")
    ]


def test_writes_are_guarded(tmp_path: Path) -> None:
    git, runner = _git(tmp_path, dry_run=True)

    for result in (git.add("package.json"), git.add_all(), git.commit("Release v1"), git.push(), git.push_tags()):
        assert isinstance(result, Ok)
        assert result.value is None
    assert runner.calls == []


def test_reads_run_in_dry_run(tmp_path: Path) -> None:
    git, runner = _git(tmp_path, dry_run=True)

    git.fetch()
    git.clone("acme/widget-dist", "tmp-bower-repo")
    git.unstage("package.json")

    assert runner.commands() == [
        ("git", "fetch"),
        ("git", "clone", "acme/widget-dist", "tmp-bower-repo"),
        ("git", "reset", "--quiet", "HEAD", "--", "package.json"),
    ]


def test_fetch_failure(tmp_path: Path) -> None:
    git, runner = _git(tmp_path)
    runner.fail(["git", "fetch"], output="Could not resolve host", returncode=128)

    result = git.fetch()

    assert isinstance(result, Err)
    assert result.error.kind == "command_failed"
    assert "Could not resolve host" in result.error.message
