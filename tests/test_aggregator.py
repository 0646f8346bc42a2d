"""Tests for PipelineMetadataAggregator."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from conftest import repo_payload
from ghmeta.core.aggregator import Fidelity, PipelineMetadataAggregator
from ghmeta.core.errors import AggregationError, RepositoryUnavailable

ORG, REPO = "scilus", "tractoflow"
BASE = f"/repos/{ORG}/{REPO}"

CONTRIBUTORS = [
    {"login": "alice", "html_url": "https://github.com/alice",
     "avatar_url": "https://avatars.example/alice", "contributions": 120},
    {"login": "bob", "html_url": "https://github.com/bob",
     "avatar_url": "https://avatars.example/bob", "contributions": 3},
]

RELEASE = {
    "tag_name": "2.4.3",
    "name": "Release 2.4.3",
    "html_url": f"https://github.com/{ORG}/{REPO}/releases/tag/2.4.3",
    "published_at": "2024-04-20T08:30:00Z",
}


@pytest.fixture
def populated(gh):
    gh.add(BASE, repo_payload(ORG, REPO))
    gh.add_file(ORG, REPO, "README.md", "# TractoFlow\n\nA fully automated *pipeline*.\n")
    gh.add(f"{BASE}/contributors", CONTRIBUTORS)
    gh.add(f"{BASE}/releases/latest", RELEASE)
    gh.add_file(ORG, REPO, "LICENSE")
    return gh


async def _load(gh, fidelity):
    async with gh.client() as client:
        return await PipelineMetadataAggregator(client).load(ORG, REPO, fidelity)


class TestCompact:

    @pytest.mark.asyncio
    async def test_only_repository_and_readme(self, populated):
        meta = await _load(populated, Fidelity.COMPACT)
        assert meta.repository.full_name == "scilus/tractoflow"
        assert meta.repository.stars == 42
        assert meta.repository.forks == 7
        assert meta.repository.topics == ["nextflow", "diffusion-mri"]
        assert meta.repository.updated_at == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        assert meta.readme_summary == "A fully automated pipeline."
        assert meta.latest_release is None
        assert meta.main_contributor is None
        assert meta.repository.license.url == "https://api.github.com/licenses/gpl-3.0"

    @pytest.mark.asyncio
    async def test_no_detailed_calls(self, populated):
        await _load(populated, "compact")
        assert populated.count("/contributors") == 0
        assert populated.count("/releases") == 0
        assert populated.paths("HEAD") == []
        assert populated.paths() == [BASE, f"{BASE}/contents/README.md"]


class TestDetailed:

    @pytest.mark.asyncio
    async def test_all_fields(self, populated):
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.main_contributor.login == "alice"
        assert meta.main_contributor.profile_url == "https://github.com/alice"
        assert meta.main_contributor.contribution_count == 120
        assert meta.latest_release.tag_name == "2.4.3"
        assert meta.latest_release.display_name == "Release 2.4.3"
        assert meta.repository.license.url == f"https://github.com/{ORG}/{REPO}/blob/main/LICENSE"
        assert meta.repository.license.spdx_id == "GPL-3.0"
        assert meta.readme_summary == "A fully automated pipeline."

    @pytest.mark.asyncio
    async def test_missing_release_is_not_an_error(self, populated):
        del populated.routes[("GET", f"{BASE}/releases/latest")]
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.latest_release is None
        assert meta.main_contributor is not None
        assert meta.readme_summary
        assert meta.repository.license.url.endswith("/blob/main/LICENSE")

    @pytest.mark.asyncio
    async def test_contributor_failure_does_not_abort_others(self, populated):
        populated.add(f"{BASE}/contributors", {"message": "boom"}, status=500)
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.main_contributor is None
        assert meta.latest_release is not None

    @pytest.mark.asyncio
    async def test_empty_contributor_list(self, populated):
        populated.add(f"{BASE}/contributors", [])
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.main_contributor is None

    @pytest.mark.asyncio
    async def test_no_license_file_keeps_generic_url(self, populated):
        del populated.routes[("GET", f"{BASE}/contents/LICENSE")]
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.repository.license.url == "https://api.github.com/licenses/gpl-3.0"

    @pytest.mark.asyncio
    async def test_license_lookup_fault_keeps_generic_url(self, populated):
        populated.fail(f"{BASE}/contents/LICENSE", method="HEAD")
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.repository.license.url == "https://api.github.com/licenses/gpl-3.0"
        assert meta.latest_release is not None

    @pytest.mark.asyncio
    async def test_unlicensed_repository_skips_license_lookup(self, gh):
        gh.add(BASE, repo_payload(ORG, REPO, license=None))
        meta = await _load(gh, Fidelity.DETAILED)
        assert meta.repository.license is None
        assert gh.paths("HEAD") == []
        assert meta.readme_summary == ""

    @pytest.mark.asyncio
    async def test_release_without_name(self, populated):
        populated.add(f"{BASE}/releases/latest", dict(RELEASE, name=None))
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.latest_release.display_name is None


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_detailed_sub_fetches_overlap(self, populated):
        populated.delay = 0.05
        meta = await _load(populated, Fidelity.DETAILED)
        assert meta.main_contributor is not None
        # README, contributors, release and license file in flight together
        assert populated.max_in_flight == 4
        assert populated.paths()[0] == BASE

    @pytest.mark.asyncio
    async def test_compact_is_sequential(self, populated):
        populated.delay = 0.01
        await _load(populated, Fidelity.COMPACT)
        assert populated.max_in_flight == 1


class TestRepositoryUnavailable:

    @pytest.mark.asyncio
    async def test_fatal_and_nothing_else_requested(self, populated):
        populated.add(BASE, {"message": "boom"}, status=500)
        with pytest.raises(RepositoryUnavailable) as excinfo:
            await _load(populated, Fidelity.DETAILED)
        assert isinstance(excinfo.value, AggregationError)
        assert excinfo.value.org == ORG
        assert excinfo.value.repo == REPO
        assert populated.paths() == [BASE]

    @pytest.mark.asyncio
    async def test_missing_repository(self, gh):
        with pytest.raises(RepositoryUnavailable):
            await _load(gh, Fidelity.COMPACT)
        assert len(gh.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error(self, gh):
        gh.fail(BASE)
        with pytest.raises(RepositoryUnavailable):
            await _load(gh, Fidelity.COMPACT)


class TestOutputShape:

    @pytest.mark.asyncio
    async def test_camel_case_dump(self, populated):
        meta = await _load(populated, Fidelity.DETAILED)
        data = meta.model_dump(mode="json", by_alias=True)
        assert set(data) == {"repository", "readmeSummary", "latestRelease", "mainContributor"}
        assert data["repository"]["fullName"] == "scilus/tractoflow"
        assert data["repository"]["defaultBranch"] == "main"
        assert data["repository"]["license"]["spdxId"] == "GPL-3.0"
        assert data["latestRelease"]["tagName"] == "2.4.3"
        assert data["mainContributor"]["avatarUrl"] == "https://avatars.example/alice"

    @pytest.mark.asyncio
    async def test_records_are_frozen(self, populated):
        meta = await _load(populated, Fidelity.COMPACT)
        with pytest.raises(ValidationError):
            meta.readme_summary = "changed"

    def test_unknown_fidelity(self):
        with pytest.raises(ValueError):
            Fidelity("verbose")
