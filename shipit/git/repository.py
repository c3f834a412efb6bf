"""Parsing of `git status --porcelain=v1 -b`.

The first line carries branch divergence, e.g.
`## main...origin/main [ahead 1, behind 2]`; the remaining lines are
working tree entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = ["GitStatus", "StatusEntry", "parse_status"]


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed `git status --porcelain=v1 -b`.

    Attributes:
        branch: Current branch name
        upstream: Upstream branch (e.g., "origin/main"), None if not set
        ahead: Commits ahead of upstream
        behind: Commits behind upstream
        entries: Working tree entries
    """

    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)


def _parse_branch_line(line: str) -> tuple[str, str | None]:
    s = line.strip()
    if s.startswith("##"):
        s = s[2:].lstrip()

    s = s.split(" [", 1)[0].strip()

    if "..." in s:
        left, right = s.split("...", 1)
        return (left.strip(), right.strip())
    return (s, None)


def _parse_ahead_behind(line: str) -> tuple[int, int]:
    match = re.search(r"\[([^\]]+)\]", line)
    if not match:
        return (0, 0)

    inside = match.group(1)
    ahead_match = re.search(r"ahead\s+(\d+)", inside)
    behind_match = re.search(r"behind\s+(\d+)", inside)
    ahead = int(ahead_match.group(1)) if ahead_match else 0
    behind = int(behind_match.group(1)) if behind_match else 0
    return (ahead, behind)


def parse_status(output: str) -> GitStatus:
    lines = [ln for ln in output.splitlines() if ln.strip()]
    if not lines or not lines[0].startswith("##"):
        return GitStatus(branch="", entries=tuple(_entries(lines)))

    branch, upstream = _parse_branch_line(lines[0])
    ahead, behind = _parse_ahead_behind(lines[0])
    return GitStatus(
        branch=branch,
        upstream=upstream,
        ahead=ahead,
        behind=behind,
        entries=tuple(_entries(lines[1:])),
    )


def _entries(lines: list[str]) -> list[StatusEntry]:
    return [StatusEntry(xy=line[:2], path=line[3:]) for line in lines if len(line) >= 4]
