from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_input",
    "invalid_manifest",
    "dirty_working_tree",
    "stale_branch",
    "test_failed",
    "invalid_version",
    "build_failed",
    "unrecognized_url",
    "missing_changelog_tool",
    "command_failed",
    "mirror_failed",
    "hosting_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Error payload for every release step.

    hosting_failed is the only kind the orchestrator recovers from; all
    others stop the release.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
