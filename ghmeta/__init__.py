"""Pipeline repository metadata for documentation sites.

ghmeta collects what a documentation site needs to list third-party pipelines
hosted on GitHub: repository facts, a plain-text summary taken from the README,
the latest release, the top contributor, a logo and a link to the license
file. It can be used both as a command-line tool and as a Python SDK.

Quick Start:
    ```python
    import asyncio
    import ghmeta

    async def main():
        settings = ghmeta.load_settings()
        async with ghmeta.RepositoryClient(token=settings.github_token) as client:
            aggregator = ghmeta.PipelineMetadataAggregator(client)
            meta = await aggregator.load("scilus", "tractoflow", "detailed")
            logo = await ghmeta.LogoResolver(client).resolve("scilus", "tractoflow")
        print(meta.readme_summary, logo.kind)

    asyncio.run(main())
    ```

CLI Usage:
    ```bash
    ghmeta show scilus/tractoflow --detailed --logo
    ghmeta catalog src/content/pipelines --detailed --out pipelines.json
    ```
"""

__version__ = "0.1.0"

# Re-export main functionality for easy importing
from .core import (
    RepositoryClient,
    ReadmeSummarizer,
    extract_first_paragraph,
    LogoResolver,
    LicenseResolver,
    Fidelity,
    PipelineMetadataAggregator,
    PipelineMetadata,
    LogoDescriptor,
    RepositoryUnavailable,
    load_catalog,
    build_cards,
    load_settings,
    Settings,
)

__all__ = [
    "RepositoryClient",
    "ReadmeSummarizer",
    "extract_first_paragraph",
    "LogoResolver",
    "LicenseResolver",
    "Fidelity",
    "PipelineMetadataAggregator",
    "PipelineMetadata",
    "LogoDescriptor",
    "RepositoryUnavailable",
    "load_catalog",
    "build_cards",
    "load_settings",
    "Settings",
]
