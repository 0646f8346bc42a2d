"""Core functionality for pipeline metadata aggregation.

This module contains the core business logic for:
- GitHub API interactions
- README first-paragraph extraction
- Logo and license resolution
- Metadata aggregation and the pipeline catalog
- Configuration and logging
"""

from .errors import (
    GhMetaError,
    HttpError,
    NotFound,
    AggregationError,
    RepositoryUnavailable,
)
from .github import RepositoryClient
from .models import (
    LicenseInfo,
    RepositoryRecord,
    ReleaseRecord,
    ContributorRecord,
    LightDarkLogo,
    SingleLogo,
    FallbackLogo,
    LogoDescriptor,
    PipelineMetadata,
)
from .probe import first_match
from .readme import ReadmeSummarizer, extract_first_paragraph
from .logo import LogoResolver
from .license import LicenseResolver
from .aggregator import Fidelity, PipelineMetadataAggregator
from .catalog import CatalogError, PipelineEntry, PipelineCard, load_catalog, build_cards
from .config import load_settings, Settings
from .logger import configure_logging, get_logger

__all__ = [
    "GhMetaError",
    "HttpError",
    "NotFound",
    "AggregationError",
    "RepositoryUnavailable",
    "RepositoryClient",
    "LicenseInfo",
    "RepositoryRecord",
    "ReleaseRecord",
    "ContributorRecord",
    "LightDarkLogo",
    "SingleLogo",
    "FallbackLogo",
    "LogoDescriptor",
    "PipelineMetadata",
    "first_match",
    "ReadmeSummarizer",
    "extract_first_paragraph",
    "LogoResolver",
    "LicenseResolver",
    "Fidelity",
    "PipelineMetadataAggregator",
    "CatalogError",
    "PipelineEntry",
    "PipelineCard",
    "load_catalog",
    "build_cards",
    "load_settings",
    "Settings",
    "configure_logging",
    "get_logger",
]
