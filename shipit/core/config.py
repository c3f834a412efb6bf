"""Release configuration read from the manifest.

Projects configure the secondary (mirror) repository in a `release-script`
table of package.json:

    "release-script": {
      "secondaryRepoUrl": "git@github.com:acme/widget-dist.git",
      "secondaryRepoBuildOutputDir": "amd/",
      "secondaryRepoWorkDir": "tmp-bower-repo"
    }

The older `bowerRepo`, `bowerRoot` and `tmpBowerRepo` keys are accepted as
aliases; the new names win when both are present.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .manifest import PackageManifest
from .result import Err, Ok, Result
from .structured import as_str_dict

__all__ = [
    "CONFIG_TABLE",
    "DEFAULT_BUILD_OUTPUT_DIR",
    "DEFAULT_WORK_DIR",
    "ConfigError",
    "ReleaseConfiguration",
    "load_release_configuration",
]

CONFIG_TABLE = "release-script"
DEFAULT_BUILD_OUTPUT_DIR = "amd/"
DEFAULT_WORK_DIR = "tmp-bower-repo"

# canonical key -> legacy alias
_KEYS: dict[str, str] = {
    "secondaryRepoUrl": "bowerRepo",
    "secondaryRepoBuildOutputDir": "bowerRoot",
    "secondaryRepoWorkDir": "tmpBowerRepo",
}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the release-script table is malformed."""

    message: str
    key: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfiguration:
    """Secondary repository settings.

    Attributes:
        secondary_repo_url: Clone URL of the mirror repo, None when unused.
        secondary_repo_build_output_dir: Directory whose contents are mirrored.
        secondary_repo_work_dir: Scratch clone location, removed afterwards.
    """

    secondary_repo_url: str | None
    secondary_repo_build_output_dir: Path
    secondary_repo_work_dir: Path

    @property
    def has_secondary_repo(self) -> bool:
        return self.secondary_repo_url is not None


def _read_key(table: Mapping[str, object], key: str) -> Result[str | None, ConfigError]:
    for name in (key, _KEYS[key]):
        value = table.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            return Err(ConfigError(message=f"{CONFIG_TABLE}.{name} must be a string", key=name))
        stripped = value.strip()
        if stripped:
            return Ok(stripped)
    return Ok(None)


def load_release_configuration(
    manifest: PackageManifest,
    *,
    root: Path,
) -> Result[ReleaseConfiguration, ConfigError]:
    """Build the configuration, resolving paths against the project root."""
    raw = manifest.data.get(CONFIG_TABLE)
    table = as_str_dict(raw) if raw is not None else {}
    if table is None:
        return Err(ConfigError(message=f"{CONFIG_TABLE} must be a JSON object"))

    values: dict[str, str | None] = {}
    for key in _KEYS:
        result = _read_key(table, key)
        if isinstance(result, Err):
            return result
        values[key] = result.value

    return Ok(
        ReleaseConfiguration(
            secondary_repo_url=values["secondaryRepoUrl"],
            secondary_repo_build_output_dir=root
            / (values["secondaryRepoBuildOutputDir"] or DEFAULT_BUILD_OUTPUT_DIR),
            secondary_repo_work_dir=root / (values["secondaryRepoWorkDir"] or DEFAULT_WORK_DIR),
        )
    )
