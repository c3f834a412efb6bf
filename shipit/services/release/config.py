from __future__ import annotations

from shipit.core.manifest import MANIFEST_FILE as MANIFEST_FILE

CHANGELOG_FILE = "CHANGELOG.md"

TEST_COMMAND: tuple[str, ...] = ("npm", "run", "test")
BUILD_COMMAND: tuple[str, ...] = ("npm", "run", "build")
BUILD_SCRIPT = "build"
PUBLISH_COMMAND: tuple[str, ...] = ("npm", "publish")

# Any of these in devDependencies turns on changelog generation.
CHANGELOG_PACKAGES: tuple[str, ...] = ("rf-changelog", "mt-changelog")
CHANGELOG_EXECUTABLE = "changelog"

TOKEN_ENV_VAR = "GITHUB_TOKEN"
HOSTING_API_URL = "https://api.github.com"

VCS_METADATA_DIR = ".git"
