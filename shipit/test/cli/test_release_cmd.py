from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from shipit import __version__
from shipit.cli.context import CLIContext
from shipit.core.errors import ErrorCode
from shipit.output.console import MockConsole
from shipit.platform.http import MockHttpClient
from shipit.services.release.executor import ScriptedRunner


def _ctx(tmp_path: Path, runner: ScriptedRunner, console: MockConsole) -> CLIContext:
    data = {"name": "widget", "version": "1.0.0", "scripts": {"test": "jest"}}
    (tmp_path / "package.json").write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return CLIContext(
        root=tmp_path,
        console=console,
        token=None,
        http=MockHttpClient(),
        runner=runner,
    )


def _release(**overrides: object) -> None:
    import shipit.cli.commands.release_cmd as release_cmd

    args: dict[str, object] = {
        "bump": None,
        "preid": None,
        "dry_run": False,
        "verbose": False,
        "notes": None,
        "version": False,
    }
    args.update(overrides)
    release_cmd.release(**args)  # type: ignore[arg-type]


def test_release_succeeds(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import shipit.cli.commands.release_cmd as release_cmd

    runner = ScriptedRunner()
    console = MockConsole()
    monkeypatch.setattr(release_cmd, "build_context", lambda: _ctx(tmp_path, runner, console))

    _release(bump="patch")

    assert runner.ran(["npm", "publish"])
    assert console.messages[-1] == "Version v1.0.1 released!"


def test_release_failure_exits_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import shipit.cli.commands.release_cmd as release_cmd

    runner = ScriptedRunner()
    runner.respond(["git", "diff-index"], "package.json\n")
    console = MockConsole()
    monkeypatch.setattr(release_cmd, "build_context", lambda: _ctx(tmp_path, runner, console))

    with pytest.raises(typer.Exit) as exc:
        _release(bump="minor")

    assert exc.value.exit_code == int(ErrorCode.RELEASE_FAILED)
    assert "Git repository must be clean" in console.messages


def test_release_dry_run_flag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import shipit.cli.commands.release_cmd as release_cmd

    runner = ScriptedRunner()
    console = MockConsole()
    monkeypatch.setattr(release_cmd, "build_context", lambda: _ctx(tmp_path, runner, console))

    _release(bump="patch", dry_run=True)

    assert not runner.ran(["npm", "publish"])
    assert "[npm publish] DRY RUN" in console.messages


def test_release_requires_bump_or_preid(monkeypatch: pytest.MonkeyPatch) -> None:
    import shipit.cli.commands.release_cmd as release_cmd

    def unexpected() -> CLIContext:
        raise AssertionError("context must not be built")

    monkeypatch.setattr(release_cmd, "build_context", unexpected)

    with pytest.raises(typer.Exit) as exc:
        _release()

    assert exc.value.exit_code == 1


def test_build_context_requires_manifest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from shipit.cli.context import build_context

    monkeypatch.chdir(tmp_path)

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == 1


def test_build_context_reads_token(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from shipit.cli.context import build_context

    (tmp_path / "package.json").write_text('{"version": "1.0.0"}', encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GITHUB_TOKEN", " abc ")

    ctx = build_context()

    assert ctx.root.resolve() == tmp_path.resolve()
    assert ctx.token == "abc"


def test_app_version_flag() -> None:
    from shipit.cli.app import app

    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_app_usage_error_without_arguments() -> None:
    from shipit.cli.app import app

    result = CliRunner().invoke(app, [])

    assert result.exit_code == 1
