from __future__ import annotations

import json
from pathlib import Path

from shipit.core.manifest import PackageManifest
from shipit.core.result import Err, Ok
from shipit.output.console import MockConsole
from shipit.services.release.changelog import (
    changelog_declared,
    ensure_changelog_tool,
    generate_changelog,
    render_release_section,
)
from shipit.services.release.executor import ScriptedRunner, StepExecutor


def _manifest(tmp_path: Path, dev: dict[str, str]) -> PackageManifest:
    data: dict[str, object] = {"version": "1.0.0", "devDependencies": dev}
    return PackageManifest(path=tmp_path / "package.json", data=data, source_text=json.dumps(data))


def test_declared_by_either_package(tmp_path: Path) -> None:
    assert changelog_declared(_manifest(tmp_path, {"rf-changelog": "^0.5"}))
    assert changelog_declared(_manifest(tmp_path, {"mt-changelog": "^1.0"}))
    assert not changelog_declared(_manifest(tmp_path, {"jest": "^29"}))


def test_inactive_when_not_declared(tmp_path: Path) -> None:
    result = ensure_changelog_tool(_manifest(tmp_path, {}), which=lambda _: None)

    assert isinstance(result, Ok)
    assert result.value is False


def test_active_when_installed(tmp_path: Path) -> None:
    manifest = _manifest(tmp_path, {"rf-changelog": "^0.5"})
    result = ensure_changelog_tool(manifest, which=lambda name: f"/usr/bin/{name}")

    assert isinstance(result, Ok)
    assert result.value is True


def test_declared_but_not_installed(tmp_path: Path) -> None:
    manifest = _manifest(tmp_path, {"mt-changelog": "^1.0"})
    result = ensure_changelog_tool(manifest, which=lambda _: None)

    assert isinstance(result, Err)
    assert result.error.kind == "missing_changelog_tool"
    assert result.error.hint == "Run: npm install"


def test_generate_and_render(tmp_path: Path) -> None:
    runner = ScriptedRunner()
    runner.respond(["changelog", "--title=v1.1.0 Faster", "-s"], "\n# v1.1.0 Faster\n\n* speedup\n\n")
    executor = StepExecutor(cwd=tmp_path, console=MockConsole(), runner=runner)

    generated = generate_changelog(executor, title="v1.1.0 Faster", path=tmp_path / "CHANGELOG.md")
    section = render_release_section(executor, title="v1.1.0 Faster")

    assert isinstance(generated, Ok)
    assert isinstance(section, Ok)
    assert section.value == "# v1.1.0 Faster\n\n* speedup"
    assert runner.commands()[0] == (
        "changelog",
        "--title=v1.1.0 Faster",
        "--out",
        str(tmp_path / "CHANGELOG.md"),
    )
