from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shipit.core.result import Err, Ok, Result
from shipit.platform.http import HttpClient
from shipit.services.release.config import HOSTING_API_URL
from shipit.services.release.errors import ReleaseError
from shipit.services.release.repo_identity import RepoSlug


@dataclass(frozen=True, slots=True)
class HostingRelease:
    """Release object posted to the GitHub releases API."""

    tag: str
    name: str
    body: str
    prerelease: bool
    draft: bool = False

    def payload(self) -> dict[str, Any]:
        return {
            "tag_name": self.tag,
            "name": self.name,
            "body": self.body,
            "draft": self.draft,
            "prerelease": self.prerelease,
        }


def releases_url(slug: RepoSlug) -> str:
    return f"{HOSTING_API_URL}/repos/{slug.owner}/{slug.name}/releases"


def publish_release(
    *,
    http: HttpClient,
    slug: RepoSlug,
    token: str,
    release: HostingRelease,
) -> Result[str, ReleaseError]:
    """Create the release and return its html_url."""
    url = releases_url(slug)
    result = http.post_json(
        url,
        release.payload(),
        headers={
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
        },
    )
    if isinstance(result, Err):
        e = result.error
        if e.is_unauthorized:
            return Err(
                ReleaseError(
                    kind="hosting_failed",
                    message="GitHub token is wrong",
                    hint="Check the GITHUB_TOKEN environment variable.",
                )
            )
        return Err(
            ReleaseError(
                kind="hosting_failed",
                message=f"API request to GitHub failed: {e}",
            )
        )

    html_url = result.value.get("html_url")
    return Ok(html_url if isinstance(html_url, str) else url)
