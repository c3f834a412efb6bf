from __future__ import annotations

from pathlib import Path

from shipit.core.config import ReleaseConfiguration
from shipit.core.result import Err, Ok
from shipit.output.console import MockConsole, Style
from shipit.services.release.executor import ScriptedRunner, StepExecutor
from shipit.services.release.mirror import mirror_secondary_repo


def _settings(tmp_path: Path) -> ReleaseConfiguration:
    return ReleaseConfiguration(
        secondary_repo_url="git@github.com:acme/widget-bower.git",
        secondary_repo_build_output_dir=tmp_path / "amd",
        secondary_repo_work_dir=tmp_path / "tmp-bower-repo",
    )


def _fake_clone(cmd: list[str], cwd: Path) -> None:
    dest = cwd / cmd[-1]
    (dest / ".git").mkdir(parents=True)
    (dest / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (dest / "stale.js").write_text("old build", encoding="utf-8")


def _setup(tmp_path: Path, *, dry_run: bool = False) -> tuple[StepExecutor, ScriptedRunner, MockConsole]:
    amd = tmp_path / "amd"
    amd.mkdir()
    (amd / "widget.js").write_text("new build", encoding="utf-8")

    runner = ScriptedRunner()
    runner.on(["git", "clone"], _fake_clone)
    console = MockConsole()
    executor = StepExecutor(cwd=tmp_path, console=console, dry_run=dry_run, runner=runner)
    return executor, runner, console


def test_mirror_commits_tags_and_pushes(tmp_path: Path) -> None:
    executor, runner, _ = _setup(tmp_path)
    work = tmp_path / "tmp-bower-repo"
    seen: list[set[str]] = []
    runner.on(["git", "add"], lambda _cmd, cwd: seen.append({p.name for p in cwd.iterdir()}))

    result = mirror_secondary_repo(executor=executor, settings=_settings(tmp_path), tag="v1.1.0", console=MockConsole())

    assert isinstance(result, Ok)
    assert seen == [{".git", "widget.js"}]
    assert runner.calls == [
        (("git", "clone", "git@github.com:acme/widget-bower.git", str(work)), tmp_path),
        (("git", "add", "-A", "."), work),
        (("git", "commit", "-m", "Release v1.1.0"), work),
        (("git", "tag", "-a", "--cleanup=whitespace", "--message=v1.1.0", "v1.1.0"), work),
        (("git", "push"), work),
        (("git", "push", "--tags"), work),
    ]
    assert not work.exists()


def test_mirror_replaces_existing_work_dir(tmp_path: Path) -> None:
    executor, _, _ = _setup(tmp_path, dry_run=True)
    leftover = tmp_path / "tmp-bower-repo"
    leftover.mkdir()
    (leftover / "junk").write_text("x", encoding="utf-8")

    result = mirror_secondary_repo(executor=executor, settings=_settings(tmp_path), tag="v1.1.0", console=MockConsole())

    assert isinstance(result, Ok)
    assert not (leftover / "junk").exists()
    assert (leftover / "widget.js").exists()


def test_mirror_dry_run_keeps_clone(tmp_path: Path) -> None:
    executor, runner, console = _setup(tmp_path, dry_run=True)
    work = tmp_path / "tmp-bower-repo"

    result = mirror_secondary_repo(executor=executor, settings=_settings(tmp_path), tag="v2.0.0", console=console)

    assert isinstance(result, Ok)
    assert runner.commands() == [("git", "clone", "git@github.com:acme/widget-bower.git", str(work))]
    assert sorted(p.name for p in work.iterdir()) == [".git", "widget.js"]
    assert console.count(Style.DRY_RUN) == 6
    assert console.messages[-1] == f"[rm -rf {work}] DRY RUN"


def test_mirror_requires_build_output(tmp_path: Path) -> None:
    runner = ScriptedRunner()
    executor = StepExecutor(cwd=tmp_path, console=MockConsole(), runner=runner)

    result = mirror_secondary_repo(executor=executor, settings=_settings(tmp_path), tag="v1.1.0", console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "mirror_failed"
    assert runner.calls == []


def test_mirror_clone_failure(tmp_path: Path) -> None:
    executor, runner, _ = _setup(tmp_path)
    runner.fail(["git", "clone"], output="Repository not found", returncode=128)

    result = mirror_secondary_repo(executor=executor, settings=_settings(tmp_path), tag="v1.1.0", console=MockConsole())

    assert isinstance(result, Err)
    assert "Repository not found" in result.error.message
    assert not runner.ran(["git", "push"])
