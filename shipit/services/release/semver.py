from __future__ import annotations

import re
from dataclasses import dataclass
from typing import cast

from shipit.core.result import Err, Ok, Result
from shipit.services.release.errors import ReleaseError
from shipit.services.release.model import STANDARD_BUMPS, ReleaseBump

_NUM = r"0|[1-9]\d*"
_PRE_ID = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_SEMVER_RE = re.compile(
    rf"^[v=]?({_NUM})\.({_NUM})\.({_NUM})"
    rf"(?:-({_PRE_ID}(?:\.{_PRE_ID})*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_PREID_RE = re.compile(r"^[0-9A-Za-z-]+$")

PreIdentifier = int | str


def _parse_identifier(part: str) -> PreIdentifier:
    return int(part) if part.isdigit() else part


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[PreIdentifier, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def _precedence(self) -> tuple[object, ...]:
        # Numeric identifiers sort before alphanumeric ones; a release sorts
        # after all of its pre-releases. Build metadata is ignored.
        pre = tuple((0, p, "") if isinstance(p, int) else (1, 0, p) for p in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() <= other._precedence()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() > other._precedence()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() >= other._precedence()

    def bump(self, kind: ReleaseBump) -> SemVer:
        """Standard increment; a pre-release of the target is promoted."""
        pre = bool(self.prerelease)
        match kind:
            case "major":
                if self.minor or self.patch or not pre:
                    return SemVer(self.major + 1, 0, 0)
                return SemVer(self.major, 0, 0)
            case "minor":
                if self.patch or not pre:
                    return SemVer(self.major, self.minor + 1, 0)
                return SemVer(self.major, self.minor, 0)
            case "patch":
                if not pre:
                    return SemVer(self.major, self.minor, self.patch + 1)
                return SemVer(self.major, self.minor, self.patch)
            case _:
                raise ValueError(f"unexpected bump kind: {kind}")

    def bump_prerelease(self, preid: str) -> SemVer:
        pre: list[PreIdentifier] = list(self.prerelease)
        if not pre:
            pre = [0]
        else:
            for i in range(len(pre) - 1, -1, -1):
                value = pre[i]
                if isinstance(value, int):
                    pre[i] = value + 1
                    break
            else:
                pre.append(0)

        if pre[0] != preid or len(pre) < 2 or not isinstance(pre[1], int):
            pre = [preid, 0]

        return SemVer(self.major, self.minor, self.patch, tuple(pre))


def parse_version(text: str) -> SemVer | None:
    m = _SEMVER_RE.match(text.strip())
    if m is None:
        return None
    prerelease = tuple(_parse_identifier(p) for p in m.group(4).split(".")) if m.group(4) else ()
    build = tuple(m.group(5).split(".")) if m.group(5) else ()
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), prerelease, build)


def resolve_version(
    current: str,
    bump: str | None,
    preid: str | None,
) -> Result[str, ReleaseError]:
    """Compute the version to release.

    Args:
        current: Version currently in the manifest.
        bump: "major", "minor", "patch", an explicit version, or None to keep
            the current version (only valid together with preid).
        preid: Pre-release identifier applied on top, e.g. "beta".
    """
    if bump is None and preid is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="Must provide either a version bump type, preid (or both)",
            )
        )

    base = parse_version(current)
    if base is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"current version is not a valid semantic version: {current!r}",
                hint="Fix the version field in package.json.",
            )
        )

    if bump is None:
        version = base
    elif bump in STANDARD_BUMPS:
        version = base.bump(cast(ReleaseBump, bump))
    else:
        explicit = parse_version(bump)
        if explicit is None:
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"invalid version kind: {bump!r}",
                    hint="Use major, minor, patch or a semantic version like 1.4.0.",
                )
            )
        version = explicit

    if preid is not None:
        if not _PREID_RE.match(preid):
            return Err(
                ReleaseError(
                    kind="invalid_version",
                    message=f"invalid pre-release identifier: {preid!r}",
                    hint="Use letters, digits and hyphens only, e.g. beta.",
                )
            )
        version = version.bump_prerelease(preid)

    return Ok(str(version))
