"""The list of third-party pipelines shown on the documentation site.

Each pipeline has one JSON data file in the catalog directory:

    ```json
    {"name": "tractoflow", "organisation": "scilus",
     "documentation": "https://tractoflow-documentation.readthedocs.io"}
    ```

`build_cards` turns those entries into `PipelineCard` objects carrying the
aggregated metadata and the detected logo.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import json

from pydantic import BaseModel, ValidationError

from .aggregator import Fidelity, PipelineMetadataAggregator
from .errors import GhMetaError, RepositoryUnavailable
from .logger import get_logger
from .logo import LogoResolver
from .models import LogoDescriptor, PipelineMetadata, Record

log = get_logger(__name__)


class CatalogError(GhMetaError):
    """A catalog file is missing, unreadable or malformed."""


class PipelineEntry(BaseModel):
    name: str
    organisation: str
    documentation: Optional[str] = None


class PipelineCard(Record):
    entry: PipelineEntry
    metadata: PipelineMetadata
    logo: LogoDescriptor


def load_catalog(directory: str | Path) -> List[PipelineEntry]:
    """Read every `*.json` entry in `directory`, sorted by filename.

    Raises:
        CatalogError: The directory does not exist or a file is invalid.
    """
    root = Path(directory)
    if not root.is_dir():
        raise CatalogError(f"Catalog directory not found: {root}")

    entries: List[PipelineEntry] = []
    for path in sorted(root.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            entries.append(PipelineEntry.model_validate(data))
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise CatalogError(f"Invalid pipeline entry {path.name}: {exc}") from exc
    return entries


async def build_cards(
    entries: List[PipelineEntry],
    aggregator: PipelineMetadataAggregator,
    logo_resolver: LogoResolver,
    fidelity: Fidelity | str = Fidelity.COMPACT,
) -> List[PipelineCard]:
    """Aggregate metadata and logo for each entry, in order.

    Entries whose repository is unavailable are skipped with a warning.
    """
    cards: List[PipelineCard] = []
    for entry in entries:
        try:
            metadata = await aggregator.load(entry.organisation, entry.name, fidelity)
        except RepositoryUnavailable as exc:
            log.warning("pipeline_skipped", pipeline=entry.name, error=str(exc))
            continue
        logo = await logo_resolver.resolve(entry.organisation, entry.name)
        cards.append(PipelineCard(entry=entry, metadata=metadata, logo=logo))
    log.info("catalog_built", cards=len(cards), entries=len(entries))
    return cards
