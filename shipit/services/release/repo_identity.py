"""Owner/name extraction from the manifest's repository field.

npm accepts several spellings for the same GitHub repository:

    git@github.com:<owner>/<repo>.git
    git+https://github.com/<owner>/<repo>.git
    <owner>/<repo>
    https://github.com/<owner>/<repo>[.git]
    github:<owner>/<repo>
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from shipit.core.result import Err, Ok, Result
from shipit.services.release.errors import ReleaseError

_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^git@github\.com:(.*)\.git$"),
    re.compile(r"^git\+https://github\.com/(.*)\.git$"),
    re.compile(r"^([^/:@\s]+/[^/:@\s]+)$"),
    re.compile(r"^https://github\.com/([^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^github:([^/]+/[^/]+)$"),
)


@dataclass(frozen=True, slots=True)
class RepoSlug:
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def split_repository(url: str) -> tuple[str, ...]:
    """Best-effort split of a repository URL into path components.

    The first matching pattern's capture is split; otherwise the raw string
    is. The result may have any number of components.
    """
    url = url.strip()
    for pattern in _PATTERNS:
        m = pattern.match(url)
        if m is not None:
            return tuple(m.group(1).split("/"))
    return tuple(url.split("/"))


def parse_repository(url: str) -> Result[RepoSlug, ReleaseError]:
    parts = split_repository(url)
    if len(parts) != 2 or not all(parts):
        return Err(
            ReleaseError(
                kind="unrecognized_url",
                message=f"cannot determine GitHub owner/repo from repository: {url!r}",
                hint='Use "git@github.com:<owner>/<repo>.git" or "<owner>/<repo>".',
            )
        )
    owner, name = parts
    return Ok(RepoSlug(owner=owner, name=name))
