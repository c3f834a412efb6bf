"""Secondary repository mirror.

Some projects ship built artifacts through a second git repository (the
historical use was a bower package). The mirror is refreshed on every
release: clone it, replace everything but .git with the build output,
then commit, tag and push under the same version tag.
"""

from __future__ import annotations

from pathlib import Path

from shipit.core.config import ReleaseConfiguration
from shipit.core.result import Err, Ok, Result
from shipit.output.console import ConsoleProtocol
from shipit.platform.files import clear_directory, copy_tree_contents, remove_tree
from shipit.services.release.config import VCS_METADATA_DIR
from shipit.services.release.errors import ReleaseError
from shipit.services.release.executor import StepExecutor
from shipit.services.release.vcs import Git


def _fs_error(action: str, path: Path, e: OSError) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="mirror_failed",
            message=f"failed to {action}: {path}",
            hint=str(e),
        )
    )


def mirror_secondary_repo(
    *,
    executor: StepExecutor,
    settings: ReleaseConfiguration,
    tag: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    url = settings.secondary_repo_url
    if url is None:
        return Err(ReleaseError(kind="mirror_failed", message="no secondary repository configured"))

    work_dir = settings.secondary_repo_work_dir
    build_dir = settings.secondary_repo_build_output_dir
    if not build_dir.is_dir():
        return Err(
            ReleaseError(
                kind="mirror_failed",
                message=f"build output directory not found: {build_dir}",
                hint='Check "secondaryRepoBuildOutputDir" and the build script.',
            )
        )

    try:
        remove_tree(work_dir)
    except OSError as e:
        return _fs_error("remove", work_dir, e)

    cloned = Git(executor).clone(url, str(work_dir))
    if isinstance(cloned, Err):
        return cloned

    try:
        clear_directory(work_dir, keep=frozenset({VCS_METADATA_DIR}))
        copy_tree_contents(build_dir, work_dir)
    except OSError as e:
        return _fs_error("populate", work_dir, e)

    git = Git(executor.at(work_dir))
    for step in (
        git.add_all,
        lambda: git.commit(f"Release {tag}"),
        lambda: git.tag(tag, tag),
        git.push,
        git.push_tags,
    ):
        result = step()
        if isinstance(result, Err):
            return result

    if executor.dry_run:
        # Nothing was pushed; keep the prepared clone around for inspection.
        console.dry_run(f"rm -rf {work_dir}")
        return Ok(None)

    try:
        remove_tree(work_dir)
    except OSError as e:
        return _fs_error("remove", work_dir, e)
    return Ok(None)
