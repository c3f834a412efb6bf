"""Package manifest (package.json) loading and rewriting.

The manifest is kept as the raw JSON object so that a rewrite only touches
the version field; every other key keeps its value and position.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from shipit.platform.files import atomic_write_text

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "MANIFEST_FILE",
    "ManifestError",
    "PackageManifest",
    "load_manifest",
    "write_manifest",
    "restore_manifest",
]

MANIFEST_FILE = "package.json"


@dataclass(frozen=True, slots=True)
class ManifestError:
    """Error when the manifest cannot be read, parsed or written."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PackageManifest:
    """In-memory package.json.

    Attributes:
        path: Location of the manifest file.
        data: Parsed JSON object. Treated as read-only; use with_version().
        source_text: Exact file contents at load time, used to restore the
            file when a release is rolled back.
    """

    path: Path
    data: StrDict
    source_text: str

    @property
    def version(self) -> str:
        return get_str(self.data, "version") or ""

    @property
    def name(self) -> str | None:
        return get_str(self.data, "name")

    @property
    def is_private(self) -> bool:
        return get_bool(self.data, "private")

    @property
    def repository_url(self) -> str | None:
        """Repository URL from either `"repository": "..."` or `{"url": ...}`."""
        direct = get_str(self.data, "repository")
        if direct is not None:
            return direct
        table = get_table(self.data, "repository")
        if table is None:
            return None
        return get_str(table, "url")

    @property
    def scripts(self) -> StrDict:
        return get_table(self.data, "scripts") or {}

    @property
    def dev_dependencies(self) -> frozenset[str]:
        deps = get_table(self.data, "devDependencies") or {}
        return frozenset(deps)

    def has_script(self, name: str) -> bool:
        return get_str(self.scripts, name) is not None

    def with_version(self, version: str) -> PackageManifest:
        data = dict(self.data)
        data["version"] = version
        return PackageManifest(path=self.path, data=data, source_text=self.source_text)

    def render(self) -> str:
        """Serialize as package managers do: 2-space indent, trailing newline."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"


def load_manifest(path: Path) -> Result[PackageManifest, ManifestError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ManifestError(message=f"manifest not found: {path}", path=path))
    except OSError as e:
        return Err(ManifestError(message=f"failed to read manifest: {e}", path=path))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ManifestError(message=f"invalid JSON in manifest: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(ManifestError(message="manifest must be a JSON object", path=path))
    if get_str(data, "version") is None:
        return Err(ManifestError(message="manifest has no version field", path=path))

    return Ok(PackageManifest(path=path, data=data, source_text=text))


def write_manifest(manifest: PackageManifest) -> Result[None, ManifestError]:
    try:
        atomic_write_text(manifest.path, manifest.render())
    except OSError as e:
        return Err(ManifestError(message=f"failed to write manifest: {e}", path=manifest.path))
    return Ok(None)


def restore_manifest(manifest: PackageManifest) -> Result[None, ManifestError]:
    """Put back the file exactly as it was when loaded."""
    try:
        atomic_write_text(manifest.path, manifest.source_text)
    except OSError as e:
        return Err(ManifestError(message=f"failed to restore manifest: {e}", path=manifest.path))
    return Ok(None)
