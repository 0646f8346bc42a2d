"""Exception types raised by ghmeta.

Only `RepositoryUnavailable` ever reaches callers of the aggregator. The
HTTP errors are raised by the client and absorbed by the components that
treat a missing resource as a normal outcome.
"""
from __future__ import annotations


class GhMetaError(Exception):
    """Base class for all ghmeta errors."""


class HttpError(GhMetaError):
    """Non-2xx response from the GitHub API.

    Attributes:
        status: HTTP status code of the response.
        endpoint: API path that was requested (relative to the API origin).
        message: Human readable message including the status text.
    """

    def __init__(self, status: int, endpoint: str, message: str):
        super().__init__(message)
        self.status = status
        self.endpoint = endpoint
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, endpoint={self.endpoint!r})"


class NotFound(HttpError):
    """404 from the API. Expected when probing for optional files."""


class AggregationError(GhMetaError):
    """Base class for failures of the metadata aggregator."""


class RepositoryUnavailable(AggregationError):
    """The base repository lookup failed, so no record can be built."""

    def __init__(self, org: str, repo: str, reason: str = ""):
        message = f"Repository {org}/{repo} is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.org = org
        self.repo = repo
