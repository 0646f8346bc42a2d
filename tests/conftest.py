"""Shared fixtures: an in-memory GitHub API served through httpx.MockTransport."""

import asyncio
import base64
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from ghmeta.core.github import RepositoryClient


class FakeGitHub:
    """Routes requests to canned responses and records every request.

    A HEAD request is answered from the GET route of the same path, the way
    the contents endpoint behaves.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.errors: Dict[Tuple[str, str], Exception] = {}
        self.requests: List[httpx.Request] = []
        self.completed: List[str] = []
        self.delays: Dict[str, float] = {}
        self.delay = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def add(self, path: str, json: Any = None, status: int = 200, method: str = "GET") -> None:
        self.routes[(method, path)] = (status, json)

    def add_file(self, org: str, repo: str, path: str, text: str = "") -> None:
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self.add(
            f"/repos/{org}/{repo}/contents/{path}",
            {"encoding": "base64", "content": encoded, "path": path},
        )

    def fail(self, path: str, method: str = "GET") -> None:
        """Make requests to `path` raise a connection error."""
        self.errors[(method, path)] = httpx.ConnectError("connection refused")

    def slow(self, path: str, seconds: float) -> None:
        """Delay responses for `path` by `seconds`."""
        self.delays[path] = seconds

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(request.url.path, self.delay))
            return self._respond(request)
        finally:
            self.in_flight -= 1
            self.completed.append(request.url.path)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        key = (request.method, request.url.path)
        if key in self.errors:
            raise self.errors[key]
        route = self.routes.get(key)
        if route is None and request.method == "HEAD":
            route = self.routes.get(("GET", request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def client(self, token: Optional[str] = None) -> RepositoryClient:
        return RepositoryClient(token=token, transport=httpx.MockTransport(self.handler))

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [r.url.path for r in self.requests if method is None or r.method == method]

    def count(self, fragment: str, method: Optional[str] = None) -> int:
        return sum(1 for p in self.paths(method) if fragment in p)


def repo_payload(org: str = "scilus", name: str = "tractoflow", **overrides) -> Dict[str, Any]:
    payload = {
        "name": name,
        "full_name": f"{org}/{name}",
        "description": "Diffusion MRI tractography pipeline",
        "html_url": f"https://github.com/{org}/{name}",
        "stargazers_count": 42,
        "forks_count": 7,
        "updated_at": "2024-05-01T12:00:00Z",
        "topics": ["nextflow", "diffusion-mri"],
        "default_branch": "main",
        "license": {
            "key": "gpl-3.0",
            "name": "GNU General Public License v3.0",
            "spdx_id": "GPL-3.0",
            "url": "https://api.github.com/licenses/gpl-3.0",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def gh() -> FakeGitHub:
    return FakeGitHub()
