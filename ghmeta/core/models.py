"""Data shapes handed to the documentation site.

All models are frozen. Attribute names are snake_case in Python and dump to
camelCase with `model_dump(by_alias=True)`, which is what the page templates
read.
"""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class LicenseInfo(Record):
    name: str
    spdx_id: Optional[str] = None
    url: Optional[str] = None


class RepositoryRecord(Record):
    """Repository facts taken from `GET /repos/{org}/{repo}`."""

    name: str
    full_name: str
    description: Optional[str] = None
    stars: int = 0
    forks: int = 0
    updated_at: datetime
    topics: List[str] = Field(default_factory=list)
    default_branch: str = "main"
    html_url: Optional[str] = None
    license: Optional[LicenseInfo] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RepositoryRecord":
        lic = payload.get("license")
        return cls(
            name=payload["name"],
            full_name=payload["full_name"],
            description=payload.get("description"),
            stars=payload.get("stargazers_count") or 0,
            forks=payload.get("forks_count") or 0,
            updated_at=payload["updated_at"],
            topics=payload.get("topics") or [],
            default_branch=payload.get("default_branch") or "main",
            html_url=payload.get("html_url"),
            license=LicenseInfo(
                name=lic.get("name") or "",
                spdx_id=lic.get("spdx_id"),
                url=lic.get("url"),
            ) if lic else None,
        )


class ReleaseRecord(Record):
    tag_name: str
    display_name: Optional[str] = None
    url: str
    published_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ReleaseRecord":
        return cls(
            tag_name=payload["tag_name"],
            display_name=payload.get("name"),
            url=payload["html_url"],
            published_at=payload.get("published_at"),
        )


class ContributorRecord(Record):
    login: str
    profile_url: str
    avatar_url: str
    contribution_count: int

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "ContributorRecord":
        return cls(
            login=payload["login"],
            profile_url=payload["html_url"],
            avatar_url=payload["avatar_url"],
            contribution_count=payload.get("contributions") or 0,
        )


class LightDarkLogo(Record):
    kind: Literal["light-dark"] = "light-dark"
    light_url: str
    dark_url: str


class SingleLogo(Record):
    kind: Literal["single"] = "single"
    url: str


class FallbackLogo(Record):
    """Built-in logo pair shipped with the site."""

    kind: Literal["fallback"] = "fallback"
    light_url: str = "/github-logo.svg"
    dark_url: str = "/github-logo-dark.svg"


LogoDescriptor = Annotated[
    Union[LightDarkLogo, SingleLogo, FallbackLogo],
    Field(discriminator="kind"),
]


class PipelineMetadata(Record):
    """Everything the pipeline page shows about one repository.

    `latest_release` and `main_contributor` are only filled in detailed
    mode, and even then may be absent.
    """

    repository: RepositoryRecord
    readme_summary: str = ""
    latest_release: Optional[ReleaseRecord] = None
    main_contributor: Optional[ContributorRecord] = None
