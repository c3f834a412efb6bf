"""Changelog generation through the `changelog` executable.

Projects opt in by listing rf-changelog or mt-changelog in devDependencies;
both packages install the same `changelog` binary.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

from shipit.core.manifest import PackageManifest
from shipit.core.result import Err, Ok, Result
from shipit.services.release.config import CHANGELOG_EXECUTABLE, CHANGELOG_PACKAGES
from shipit.services.release.errors import ReleaseError
from shipit.services.release.executor import StepExecutor
from shipit.services.release.model import StepResult

Which = Callable[[str], str | None]


def changelog_declared(manifest: PackageManifest) -> bool:
    return any(name in manifest.dev_dependencies for name in CHANGELOG_PACKAGES)


def ensure_changelog_tool(
    manifest: PackageManifest,
    *,
    which: Which = shutil.which,
) -> Result[bool, ReleaseError]:
    """Return whether changelog generation is active for this project."""
    if not changelog_declared(manifest):
        return Ok(False)
    if which(CHANGELOG_EXECUTABLE) is None:
        return Err(
            ReleaseError(
                kind="missing_changelog_tool",
                message=(
                    'The "[rf|mt]-changelog" package is present in "devDependencies", '
                    "but it is not installed."
                ),
                hint="Run: npm install",
            )
        )
    return Ok(True)


def generate_changelog(
    executor: StepExecutor,
    *,
    title: str,
    path: Path,
) -> Result[StepResult, ReleaseError]:
    return executor.run_required([CHANGELOG_EXECUTABLE, f"--title={title}", "--out", str(path)])


def render_release_section(executor: StepExecutor, *, title: str) -> Result[str, ReleaseError]:
    """The changelog section for this release, as printed by `changelog -s`."""
    result = executor.run_required([CHANGELOG_EXECUTABLE, f"--title={title}", "-s"])
    if isinstance(result, Err):
        return result
    return Ok(result.value.output.strip())
