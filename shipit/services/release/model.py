from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from shipit.core.config import ReleaseConfiguration
from shipit.core.manifest import PackageManifest
from shipit.services.release.repo_identity import RepoSlug

ReleaseBump = Literal["major", "minor", "patch"]
STANDARD_BUMPS: tuple[ReleaseBump, ...] = ("major", "minor", "patch")

ReleaseStep = Literal[
    "preflight",
    "clean_check",
    "freshness_check",
    "test_check",
    "version_bump",
    "build",
    "changelog",
    "commit_and_tag",
    "push",
    "hosting_release",
    "registry_publish",
    "secondary_mirror",
    "done",
]

RELEASE_STEPS: tuple[ReleaseStep, ...] = (
    "preflight",
    "clean_check",
    "freshness_check",
    "test_check",
    "version_bump",
    "build",
    "changelog",
    "commit_and_tag",
    "push",
    "hosting_release",
    "registry_publish",
    "secondary_mirror",
    "done",
)


def next_step(step: ReleaseStep) -> ReleaseStep:
    index = RELEASE_STEPS.index(step)
    return RELEASE_STEPS[min(index + 1, len(RELEASE_STEPS) - 1)]


def version_tag(version: str) -> str:
    return f"v{version}"


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """What the user asked for on the command line.

    bump is "major", "minor", "patch", an explicit version string, or None
    when only a pre-release id was given.
    """

    bump: str | None
    preid: str | None = None
    dry_run: bool = False
    verbose: bool = False
    notes: str | None = None

    @property
    def is_prerelease(self) -> bool:
        return self.preid is not None


@dataclass(frozen=True, slots=True)
class StepResult:
    exit_code: int
    output: str


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """State threaded through the release state machine.

    Each step returns a new context; nothing is mutated in place.
    """

    step: ReleaseStep
    request: ReleaseRequest
    manifest: PackageManifest
    settings: ReleaseConfiguration
    changelog_active: bool = False
    # Set when a GitHub release will be published.
    repo_slug: RepoSlug | None = None
    new_version: str | None = None
    # Body of the annotated tag and the hosting release.
    release_notes: str | None = None

    @property
    def tag(self) -> str:
        if self.new_version is None:
            raise ValueError("release version not resolved yet")
        return version_tag(self.new_version)

    @property
    def title(self) -> str:
        """Tag followed by the user's notes, e.g. "v1.2.0 Faster startup"."""
        if self.request.notes:
            return f"{self.tag} {self.request.notes}"
        return self.tag
