"""Assemble the metadata record shown on a pipeline page.

`PipelineMetadataAggregator.load` always fetches the repository and its README
summary. In detailed mode it also looks up the top contributor, the latest
release and the repository's own license file. Once the repository is known,
these lookups and the README are independent of each other: they run
concurrently and each degrades to an absent or default value on failure. Only
a failed repository lookup is fatal.

Example:
    ```python
    from ghmeta.core import Fidelity, PipelineMetadataAggregator, RepositoryClient

    async with RepositoryClient(token=settings.github_token) as client:
        aggregator = PipelineMetadataAggregator(client)
        meta = await aggregator.load("scilus", "tractoflow", Fidelity.DETAILED)
    ```
"""
from __future__ import annotations
from enum import Enum
from typing import Optional
import asyncio

from .errors import RepositoryUnavailable
from .github import RepositoryClient
from .license import LicenseResolver
from .logger import get_logger
from .models import ContributorRecord, PipelineMetadata, ReleaseRecord, RepositoryRecord
from .readme import ReadmeSummarizer

log = get_logger(__name__)


class Fidelity(str, Enum):
    """How much to fetch for one pipeline."""

    COMPACT = "compact"
    DETAILED = "detailed"


class PipelineMetadataAggregator:
    """Build `PipelineMetadata` records from the GitHub API.

    Args:
        client: Shared API client.
        summarizer: README summarizer; one is built on `client` if omitted.
        license_resolver: License file resolver; built on `client` if omitted.
    """

    def __init__(
        self,
        client: RepositoryClient,
        summarizer: ReadmeSummarizer | None = None,
        license_resolver: LicenseResolver | None = None,
    ):
        self.client = client
        self.summarizer = summarizer or ReadmeSummarizer(client)
        self.license_resolver = license_resolver or LicenseResolver(client)

    async def load(
        self,
        org: str,
        repo: str,
        fidelity: Fidelity | str = Fidelity.COMPACT,
    ) -> PipelineMetadata:
        """Fetch everything the requested fidelity needs.

        Raises:
            RepositoryUnavailable: The repository itself could not be fetched
                or its payload could not be read.
        """
        fidelity = Fidelity(fidelity)
        try:
            payload = await self.client.fetch_repository(org, repo)
            record = RepositoryRecord.from_api(payload)
        except Exception as exc:
            log.error("repository_fetch_failed", repo=f"{org}/{repo}", error=str(exc))
            raise RepositoryUnavailable(org, repo, str(exc)) from exc

        if fidelity is Fidelity.COMPACT:
            summary = await self.summarizer.summarize(org, repo)
            return PipelineMetadata(repository=record, readme_summary=summary)

        summary, contributor, release, license_url = await asyncio.gather(
            self.summarizer.summarize(org, repo),
            self._top_contributor(org, repo),
            self._latest_release(org, repo),
            self._license_url(org, repo, record),
        )
        if record.license is not None and license_url != record.license.url:
            record = record.model_copy(
                update={"license": record.license.model_copy(update={"url": license_url})}
            )

        return PipelineMetadata(
            repository=record,
            readme_summary=summary,
            latest_release=release,
            main_contributor=contributor,
        )

    async def _top_contributor(self, org: str, repo: str) -> Optional[ContributorRecord]:
        try:
            contributors = await self.client.fetch_contributors(org, repo)
            if not contributors:
                return None
            return ContributorRecord.from_api(contributors[0])
        except Exception as exc:
            log.warning("contributors_fetch_failed", repo=f"{org}/{repo}", error=str(exc))
            return None

    async def _latest_release(self, org: str, repo: str) -> Optional[ReleaseRecord]:
        try:
            release = await self.client.fetch_latest_release(org, repo)
            if release is None:
                log.debug("no_release", repo=f"{org}/{repo}")
                return None
            return ReleaseRecord.from_api(release)
        except Exception as exc:
            log.warning("release_fetch_failed", repo=f"{org}/{repo}", error=str(exc))
            return None

    async def _license_url(self, org: str, repo: str, record: RepositoryRecord) -> Optional[str]:
        if record.license is None:
            return None
        generic = record.license.url
        try:
            return await self.license_resolver.resolve(org, repo, record.default_branch, generic)
        except Exception as exc:
            log.warning("license_resolution_failed", repo=f"{org}/{repo}", error=str(exc))
            return generic
