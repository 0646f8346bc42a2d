"""GitHub API client used by every fetcher in ghmeta.

`RepositoryClient` is a thin async accessor around one `httpx.AsyncClient`.
It knows the endpoints ghmeta needs and turns non-2xx responses into
`HttpError` (or `NotFound` for 404). Whether a failure matters is left to the
caller: a missing release or a missing license file is a normal answer.

The access token is passed in explicitly; see `ghmeta.core.config` for how it
is resolved from the environment.

Example:
    ```python
    import asyncio
    from ghmeta.core.github import RepositoryClient

    async def main():
        async with RepositoryClient(token="ghp_...") as client:
            repo = await client.fetch_repository("scilus", "tractoflow")
            print(repo["stargazers_count"])

    asyncio.run(main())
    ```
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import base64

import httpx

from .errors import HttpError, NotFound
from .logger import get_logger

GH_API = "https://api.github.com"
GH_RAW = "https://raw.githubusercontent.com"
GH_WEB = "https://github.com"

log = get_logger(__name__)


def _decode_content(data: Dict[str, Any]) -> str:
    """Decode the `content` field of a contents/readme API payload."""
    content = data.get("content") or ""
    if data.get("encoding") == "base64":
        return base64.b64decode(content).decode("utf-8", errors="ignore")
    return content


class RepositoryClient:
    """Authenticated accessor to the GitHub REST API.

    Args:
        token: Optional bearer token. Anonymous requests are allowed but get a
            lower rate limit.
        api_url: API origin.
        raw_url: Origin of raw repository files (no authentication needed).
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = GH_API,
        raw_url: str = GH_RAW,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.raw_url = raw_url.rstrip("/")
        self._client = httpx.AsyncClient(headers=self._headers(token), transport=transport)

    @staticmethod
    def _headers(token: str | None) -> Dict[str, str]:
        h = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            h["Authorization"] = f"Bearer {token}"
        return h

    async def __aenter__(self) -> "RepositoryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_json(
        self,
        endpoint: str,
        method: str = "GET",
        error_message: str | None = None,
    ) -> Any:
        """Send one request to `endpoint` and return the decoded JSON body.

        Args:
            endpoint: Path relative to the API origin, e.g. "/repos/o/r".
            method: "GET" or "HEAD".
            error_message: Prefix for the error message on failure.

        Returns:
            Parsed JSON for GET, None for HEAD.

        Raises:
            NotFound: The API answered 404.
            HttpError: The API answered with any other non-2xx status.
            httpx.TransportError: The request never got a response.
        """
        r = await self._client.request(method, f"{self.api_url}{endpoint}")
        if not r.is_success:
            prefix = error_message or f"GitHub API request failed for {endpoint}"
            message = f"{prefix}: {r.reason_phrase}"
            if r.status_code == 404:
                raise NotFound(r.status_code, endpoint, message)
            raise HttpError(r.status_code, endpoint, message)
        if method == "HEAD":
            return None
        return r.json()

    async def fetch_repository(self, org: str, repo: str) -> Dict[str, Any]:
        return await self.fetch_json(
            f"/repos/{org}/{repo}",
            error_message=f"Failed to fetch repository {org}/{repo}",
        )

    async def fetch_file_content(self, org: str, repo: str, path: str) -> str:
        """Return the UTF-8 text of `path` on the default branch."""
        data = await self.fetch_json(
            f"/repos/{org}/{repo}/contents/{path}",
            error_message=f"Failed to fetch file {path} from {org}/{repo}",
        )
        return _decode_content(data)

    async def fetch_readme(self, org: str, repo: str) -> str:
        """Return the README GitHub itself picks for the repository."""
        data = await self.fetch_json(
            f"/repos/{org}/{repo}/readme",
            error_message=f"Failed to fetch README for {org}/{repo}",
        )
        return _decode_content(data)

    async def file_exists(self, org: str, repo: str, path: str) -> bool:
        """Existence probe: HEAD the contents endpoint for `path`.

        Any HTTP error counts as "missing". Transport errors propagate so the
        caller can tell a miss from a broken connection.
        """
        try:
            await self.fetch_json(
                f"/repos/{org}/{repo}/contents/{path}",
                method="HEAD",
                error_message=f"File {path} not found in {org}/{repo}",
            )
        except NotFound:
            log.debug("probe_miss", repo=f"{org}/{repo}", path=path)
            return False
        except HttpError as exc:
            log.warning("probe_failed", repo=f"{org}/{repo}", path=path, status=exc.status)
            return False
        return True

    async def fetch_contributors(self, org: str, repo: str) -> List[Dict[str, Any]]:
        """Return contributors, ordered by contribution count by the API."""
        return await self.fetch_json(
            f"/repos/{org}/{repo}/contributors",
            error_message=f"Failed to fetch contributors for {org}/{repo}",
        )

    async def fetch_latest_release(self, org: str, repo: str) -> Optional[Dict[str, Any]]:
        """Return the latest release, or None if the repository has none."""
        try:
            return await self.fetch_json(
                f"/repos/{org}/{repo}/releases/latest",
                error_message=f"Failed to fetch latest release for {org}/{repo}",
            )
        except NotFound:
            return None

    def raw_content_url(self, org: str, repo: str, path: str, branch: str = "main") -> str:
        return f"{self.raw_url}/{org}/{repo}/{branch}/{path}"

    @staticmethod
    def blob_url(org: str, repo: str, branch: str, path: str) -> str:
        return f"{GH_WEB}/{org}/{repo}/blob/{branch}/{path}"
