"""The release state machine.

Steps run strictly in RELEASE_STEPS order. Preflight and the three checks
finish before anything is written; from the version bump on, the only undo
is the build-failure rollback of package.json. A failed GitHub release is
reported and skipped because the tag has already been pushed at that point.
"""

from __future__ import annotations

import shutil
from dataclasses import replace
from pathlib import Path
from typing import Any

from shipit.core.config import CONFIG_TABLE, load_release_configuration
from shipit.core.manifest import load_manifest, restore_manifest, write_manifest
from shipit.core.result import Err, Ok, Result
from shipit.output.console import ConsoleProtocol, Style
from shipit.platform.http import HttpClient
from shipit.services.release.changelog import (
    Which,
    ensure_changelog_tool,
    generate_changelog,
    render_release_section,
)
from shipit.services.release.config import (
    BUILD_COMMAND,
    BUILD_SCRIPT,
    CHANGELOG_FILE,
    MANIFEST_FILE,
    PUBLISH_COMMAND,
    TEST_COMMAND,
)
from shipit.services.release.errors import ReleaseError
from shipit.services.release.executor import StepExecutor
from shipit.services.release.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from shipit.services.release.hosting import HostingRelease, publish_release
from shipit.services.release.mirror import mirror_secondary_repo
from shipit.services.release.model import ReleaseContext, ReleaseRequest, next_step
from shipit.services.release.repo_identity import RepoSlug, parse_repository
from shipit.services.release.semver import resolve_version
from shipit.services.release.vcs import Git

StepResultT = Result[StepOutcome[ReleaseContext], ReleaseError]


class ReleaseOrchestrator:
    """Runs one release.

    Attributes:
        root: Project root containing package.json.
        console: Output sink.
        executor: Command executor bound to root.
        http: Client for the GitHub releases API.
        token: GitHub token; None skips the hosting release.
    """

    def __init__(
        self,
        *,
        root: Path,
        console: ConsoleProtocol,
        executor: StepExecutor,
        http: HttpClient,
        token: str | None,
        which: Which = shutil.which,
    ) -> None:
        self.root = root
        self.console = console
        self.executor = executor
        self.http = http
        self.token = token or None
        self._which = which
        self._git = Git(executor)

    def run(self, request: ReleaseRequest) -> Result[ReleaseContext, ReleaseError]:
        if request.dry_run:
            self.console.print("DRY RUN", Style.DRY_RUN)

        initial = self._load(request)
        if isinstance(initial, Err):
            return initial

        handlers: dict[str, StepHandler[ReleaseContext]] = {
            "preflight": self._preflight,
            "clean_check": self._clean_check,
            "freshness_check": self._freshness_check,
            "test_check": self._test_check,
            "version_bump": self._version_bump,
            "build": self._build,
            "changelog": self._changelog,
            "commit_and_tag": self._commit_and_tag,
            "push": self._push,
            "hosting_release": self._hosting_release,
            "registry_publish": self._registry_publish,
            "secondary_mirror": self._secondary_mirror,
            "done": self._done,
        }
        return run_state_machine(
            initial_state=initial.value,
            get_step=lambda ctx: ctx.step,
            handlers=handlers,
            on_advance=self._on_advance,
        )

    def _load(self, request: ReleaseRequest) -> Result[ReleaseContext, ReleaseError]:
        manifest = load_manifest(self.root / MANIFEST_FILE)
        if isinstance(manifest, Err):
            return Err(ReleaseError(kind="invalid_manifest", message=manifest.error.message))

        settings = load_release_configuration(manifest.value, root=self.root)
        if isinstance(settings, Err):
            return Err(
                ReleaseError(
                    kind="invalid_manifest",
                    message=settings.error.message,
                    hint=f'Fix the "{CONFIG_TABLE}" section of {MANIFEST_FILE}.',
                )
            )

        return Ok(
            ReleaseContext(
                step="preflight",
                request=request,
                manifest=manifest.value,
                settings=settings.value,
            )
        )

    def _on_advance(self, ctx: ReleaseContext) -> None:
        if self.executor.verbose:
            self.console.print(f"step: {ctx.step}", Style.DIM)

    @staticmethod
    def _next(ctx: ReleaseContext, **changes: Any) -> StepResultT:
        return Ok(advance(replace(ctx, step=next_step(ctx.step), **changes)))

    # -- preconditions ------------------------------------------------------

    def _preflight(self, ctx: ReleaseContext) -> StepResultT:
        request = ctx.request
        # Validate the bump now so a typo fails before the test suite runs.
        resolved = resolve_version(ctx.manifest.version, request.bump, request.preid)
        if isinstance(resolved, Err):
            return resolved

        changelog = ensure_changelog_tool(ctx.manifest, which=self._which)
        if isinstance(changelog, Err):
            return changelog

        if self.token is not None:
            slug = self._repo_slug(ctx)
            if isinstance(slug, Err):
                if not request.dry_run:
                    return slug
                # Nothing is posted in a dry run; report and carry on.
                self.console.warning(f"{slug.error.message}; the GitHub release would fail")
                return self._next(ctx, changelog_active=changelog.value)
            return self._next(ctx, changelog_active=changelog.value, repo_slug=slug.value)

        return self._next(ctx, changelog_active=changelog.value)

    def _repo_slug(self, ctx: ReleaseContext) -> Result[RepoSlug, ReleaseError]:
        url = ctx.manifest.repository_url
        if url is None:
            return Err(
                ReleaseError(
                    kind="unrecognized_url",
                    message=f'{MANIFEST_FILE} has no "repository" field',
                    hint="Needed to publish the GitHub release; unset GITHUB_TOKEN to skip it.",
                )
            )
        return parse_repository(url)

    def _clean_check(self, ctx: ReleaseContext) -> StepResultT:
        pending = self._git.pending_changes()
        if isinstance(pending, Err):
            return pending
        if pending.value:
            return Err(
                ReleaseError(
                    kind="dirty_working_tree",
                    message="Git repository must be clean",
                    hint="pending: " + ", ".join(pending.value),
                )
            )
        self.console.info("No pending changes")
        return self._next(ctx)

    def _freshness_check(self, ctx: ReleaseContext) -> StepResultT:
        fetched = self._git.fetch()
        if isinstance(fetched, Err):
            return fetched
        status = self._git.status()
        if isinstance(status, Err):
            return status
        behind = status.value.behind
        if behind:
            return Err(
                ReleaseError(
                    kind="stale_branch",
                    message=f"Your repo is behind by {behind} commits",
                    hint="Run: git pull",
                )
            )
        self.console.info("Current with latest changes from remote")
        return self._next(ctx)

    def _test_check(self, ctx: ReleaseContext) -> StepResultT:
        self.console.info("Running: linting and tests")
        result = self.executor.run_required(list(TEST_COMMAND), kind="test_failed")
        if isinstance(result, Err):
            return result
        self.console.success("Completed: linting and tests")
        return self._next(ctx)

    # -- mutation -----------------------------------------------------------

    def _version_bump(self, ctx: ReleaseContext) -> StepResultT:
        request = ctx.request
        old_version = ctx.manifest.version
        resolved = resolve_version(old_version, request.bump, request.preid)
        if isinstance(resolved, Err):
            return resolved
        new_version = resolved.value

        manifest = ctx.manifest.with_version(new_version)
        written = write_manifest(manifest)
        if isinstance(written, Err):
            return Err(ReleaseError(kind="invalid_manifest", message=written.error.message))
        self.console.info(f"Version changed from {old_version} to {new_version}")

        staged = self._git.add(MANIFEST_FILE)
        if isinstance(staged, Err):
            return staged
        return self._next(ctx, manifest=manifest, new_version=new_version)

    def _build(self, ctx: ReleaseContext) -> StepResultT:
        if not ctx.manifest.has_script(BUILD_SCRIPT):
            self.console.warning(
                f'There is no "{BUILD_SCRIPT}" script in {MANIFEST_FILE}. Skipping this step.'
            )
            return self._next(ctx)

        self.console.info("Running: build")
        built = self.executor.run_required(list(BUILD_COMMAND), kind="build_failed")
        if isinstance(built, Err):
            self.console.error("Build failed, reverting version bump")
            self._rollback_version_bump(ctx)
            return built
        self.console.success("Completed: build")
        return self._next(ctx)

    def _rollback_version_bump(self, ctx: ReleaseContext) -> None:
        unstaged = self._git.unstage(MANIFEST_FILE)
        if isinstance(unstaged, Err):
            self.console.warning(f"could not unstage {MANIFEST_FILE}: {unstaged.error.message}")
        restored = restore_manifest(ctx.manifest)
        if isinstance(restored, Err):
            self.console.error(restored.error.message)
            return
        self.console.warning("Version bump reverted")

    def _changelog(self, ctx: ReleaseContext) -> StepResultT:
        if not ctx.changelog_active:
            return self._next(ctx)

        generated = generate_changelog(
            self.executor,
            title=ctx.title,
            path=self.root / CHANGELOG_FILE,
        )
        if isinstance(generated, Err):
            return generated
        staged = self._git.add(CHANGELOG_FILE)
        if isinstance(staged, Err):
            return staged
        self.console.info("Generated Changelog")
        return self._next(ctx)

    def _commit_and_tag(self, ctx: ReleaseContext) -> StepResultT:
        committed = self._git.commit(f"Release {ctx.tag}")
        if isinstance(committed, Err):
            return committed

        self.console.info(f"Tagging: {ctx.tag}")
        if ctx.changelog_active:
            section = render_release_section(self.executor, title=ctx.title)
            if isinstance(section, Err):
                return section
            notes = section.value
        else:
            notes = ctx.title

        tagged = self._git.tag(ctx.tag, notes)
        if isinstance(tagged, Err):
            return tagged
        return self._next(ctx, release_notes=notes)

    def _push(self, ctx: ReleaseContext) -> StepResultT:
        pushed = self._git.push()
        if isinstance(pushed, Err):
            return pushed
        pushed_tags = self._git.push_tags()
        if isinstance(pushed_tags, Err):
            return pushed_tags
        self.console.success(f"Tagged: {ctx.tag}")
        return self._next(ctx)

    # -- publishing ---------------------------------------------------------

    def _hosting_release(self, ctx: ReleaseContext) -> StepResultT:
        if self.token is None or ctx.repo_slug is None:
            return self._next(ctx)

        self.console.info(f"Publishing to GitHub: {ctx.tag}")
        if ctx.request.dry_run:
            self.console.dry_run("publishing to GitHub")
            return self._next(ctx)

        release = HostingRelease(
            tag=ctx.tag,
            name=f"{ctx.repo_slug.name} {ctx.tag}",
            body=ctx.release_notes or ctx.title,
            prerelease=ctx.request.is_prerelease,
        )
        published = publish_release(
            http=self.http,
            slug=ctx.repo_slug,
            token=self.token,
            release=release,
        )
        if isinstance(published, Err):
            self.console.error(published.error.message)
            if published.error.hint:
                self.console.print(f"hint: {published.error.hint}", Style.DIM)
            self.console.warning("Skip GitHub releasing")
        else:
            self.console.success(f"Published at {published.value}")
        return self._next(ctx)

    def _registry_publish(self, ctx: ReleaseContext) -> StepResultT:
        if ctx.manifest.is_private:
            self.console.warning("Package is private, skipping npm release")
            return self._next(ctx)

        self.console.info("Releasing: npm package")
        published = self.executor.run_guarded(list(PUBLISH_COMMAND))
        if isinstance(published, Err):
            return published
        self.console.success("Released: npm package")
        return self._next(ctx)

    def _secondary_mirror(self, ctx: ReleaseContext) -> StepResultT:
        if ctx.manifest.is_private:
            self.console.warning("Package is private, skipping secondary repository release")
            return self._next(ctx)
        if not ctx.settings.has_secondary_repo:
            self.console.warning(
                f'"secondaryRepoUrl" is not set in "{CONFIG_TABLE}". '
                "Not publishing to a secondary repository."
            )
            return self._next(ctx)

        self.console.info("Releasing: secondary repository")
        mirrored = mirror_secondary_repo(
            executor=self.executor,
            settings=ctx.settings,
            tag=ctx.tag,
            console=self.console,
        )
        if isinstance(mirrored, Err):
            return mirrored
        self.console.success("Released: secondary repository")
        return self._next(ctx)

    def _done(self, ctx: ReleaseContext) -> StepResultT:
        self.console.success(f"Version {ctx.tag} released!")
        return Ok(FINISH)
