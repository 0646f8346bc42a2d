"""License URL resolution.

GitHub's repository payload links to a generic license description
(`https://api.github.com/licenses/mit`). The pipeline page would rather link
to the license file in the repository itself, so the usual filenames are
probed in priority order and the first hit wins.
"""
from __future__ import annotations

from .github import RepositoryClient
from .probe import first_match

LICENSE_FILENAMES = (
    "LICENSE",
    "LICENSE.md",
    "LICENSE.txt",
    "LICENCE",
    "LICENCE.md",
    "LICENCE.txt",
    "license",
    "license.md",
    "license.txt",
)


class LicenseResolver:
    """Prefer a repository-hosted license file over the generic license URL."""

    def __init__(self, client: RepositoryClient, filenames=LICENSE_FILENAMES):
        self.client = client
        self.filenames = tuple(filenames)

    async def resolve(self, org: str, repo: str, branch: str, fallback_url: str | None) -> str | None:
        """Return a browsable URL to the license file, or `fallback_url`.

        Args:
            org: Repository owner.
            repo: Repository name.
            branch: Branch the returned URL points at.
            fallback_url: Returned unchanged when no license file exists.

        Only call this for repositories that already report a license.
        """
        async def exists(filename: str) -> bool:
            return await self.client.file_exists(org, repo, filename)

        filename = await first_match(self.filenames, exists)
        if filename is None:
            return fallback_url
        return self.client.blob_url(org, repo, branch, filename)
