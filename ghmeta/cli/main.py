"""Command-line interface for ghmeta.

This module parses command-line arguments, aggregates pipeline metadata via
the GitHub API, and outputs it in JSON or Markdown format.

Usage:
    ```bash
    # One repository, compact record
    ghmeta show scilus/tractoflow

    # Detailed record plus logo, as Markdown
    ghmeta show scilus/tractoflow --detailed --logo --format md

    # Every pipeline listed in the catalog directory
    ghmeta catalog src/content/pipelines --detailed --out public/pipelines.json
    ```

Configuration:
    The CLI supports configuration via:
    - Command-line arguments (highest priority)
    - Environment variables
    - config.toml file (lowest priority)
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence
import argparse, asyncio, json, os, sys

from ..core.aggregator import Fidelity, PipelineMetadataAggregator
from ..core.catalog import CatalogError, build_cards, load_catalog
from ..core.config import Settings, load_settings
from ..core.errors import RepositoryUnavailable
from ..core.github import RepositoryClient
from ..core.logger import configure_logging
from ..core.logo import LogoResolver
from ..core.models import FallbackLogo


def _split_slug(slug: str) -> tuple[str, str]:
    """Split "org/repo" into its two parts."""
    org, sep, repo = slug.partition("/")
    if not sep or not org or not repo or "/" in repo:
        raise argparse.ArgumentTypeError(f"expected ORG/REPO, got {slug!r}")
    return org, repo


def _make_client(s: Settings) -> RepositoryClient:
    return RepositoryClient(token=s.github_token, api_url=s.api_url, raw_url=s.raw_url)


def _make_logo_resolver(client: RepositoryClient, s: Settings) -> LogoResolver:
    return LogoResolver(
        client,
        branch=s.logo_branch,
        fallback=FallbackLogo(light_url=s.fallback_light_logo, dark_url=s.fallback_dark_logo),
    )


def _logo_markdown(logo: Dict[str, Any]) -> str:
    if logo["kind"] == "single":
        return f"![logo]({logo['url']})"
    return f"![logo]({logo['lightUrl']})"


def to_markdown(items: List[Dict[str, Any]]) -> str:
    """Convert serialized cards to a Markdown bullet list.

    Each item holds a `metadata` record and optionally a `logo` and an
    `entry`, in their camelCase JSON form.
    """
    lines = []
    for it in items:
        meta = it["metadata"]
        repo = meta["repository"]
        url = repo.get("htmlUrl") or f"https://github.com/{repo['fullName']}"
        parts = [f"- [{repo['fullName']}]({url})", f"{repo['stars']} stars"]
        if repo.get("license"):
            lic = repo["license"]
            label = lic.get("spdxId") or lic["name"]
            parts.append(f"[{label}]({lic['url']})" if lic.get("url") else label)
        release = meta.get("latestRelease")
        if release:
            parts.append(f"[{release['tagName']}]({release['url']})")
        contributor = meta.get("mainContributor")
        if contributor:
            parts.append(f"by [@{contributor['login']}]({contributor['profileUrl']})")
        line = " | ".join(parts)
        summary = meta.get("readmeSummary") or repo.get("description")
        if summary:
            line += f": {summary}"
        if it.get("logo"):
            line += f" {_logo_markdown(it['logo'])}"
        lines.append(line)
    return "\n".join(lines)


def _write(payload: str, out: Optional[str], count: int) -> None:
    if out:
        os.makedirs(os.path.dirname(out) or ".", exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"wrote {out} ({count} pipelines)")
    else:
        print(payload)


def _render(items: List[Dict[str, Any]], fmt: str, single: bool = False) -> str:
    if fmt == "md":
        return to_markdown(items)
    data: Any = items[0] if single else items
    return json.dumps(data, ensure_ascii=False, indent=2)


async def _show(args: argparse.Namespace, s: Settings) -> int:
    org, repo = args.repo
    async with _make_client(s) as client:
        aggregator = PipelineMetadataAggregator(client)
        try:
            meta = await aggregator.load(org, repo, args.fidelity)
        except RepositoryUnavailable as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        item: Dict[str, Any] = {"metadata": meta.model_dump(mode="json", by_alias=True)}
        if args.logo:
            logo = await _make_logo_resolver(client, s).resolve(org, repo)
            item["logo"] = logo.model_dump(mode="json", by_alias=True)
    _write(_render([item], args.format, single=True), args.out, 1)
    return 0


async def _catalog(args: argparse.Namespace, s: Settings) -> int:
    try:
        entries = load_catalog(args.dir or s.catalog_dir)
    except CatalogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    async with _make_client(s) as client:
        cards = await build_cards(
            entries,
            PipelineMetadataAggregator(client),
            _make_logo_resolver(client, s),
            args.fidelity,
        )
    items = [c.model_dump(mode="json", by_alias=True) for c in cards]
    _write(_render(items, args.format), args.out, len(items))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ghmeta", description="Aggregate GitHub metadata for pipeline listings.")
    p.add_argument("--config", help="Path to config.toml (defaults to ./config.toml if present)")
    p.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")

    common = argparse.ArgumentParser(add_help=False)
    mode = common.add_mutually_exclusive_group()
    mode.add_argument("--detailed", action="store_true",
                      help="Also fetch top contributor, latest release and license file")
    mode.add_argument("--compact", action="store_true",
                      help="Force compact mode even if the config says detailed")
    common.add_argument("--format", choices=["json", "md"], default="json", help="Output format")
    common.add_argument("--out", help="Write to file instead of stdout")

    sub = p.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", parents=[common], help="Metadata for one repository")
    show.add_argument("repo", type=_split_slug, metavar="ORG/REPO", help="Repository slug")
    show.add_argument("--logo", action="store_true", help="Also detect the pipeline logo")

    cat = sub.add_parser("catalog", parents=[common], help="Metadata for every catalog entry")
    cat.add_argument("dir", nargs="?", help="Catalog directory (defaults to the configured one)")

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the CLI.

    Returns:
        Process exit status; also raised as SystemExit when run as a script.
    """
    args = build_parser().parse_args(argv)

    try:
        s = load_settings(args.config or "config.toml")
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        status = 2
    else:
        configure_logging(args.log_level or s.log_level)

        # CLI flags > env/config
        if args.detailed:
            args.fidelity = Fidelity.DETAILED
        elif args.compact:
            args.fidelity = Fidelity.COMPACT
        else:
            args.fidelity = Fidelity(s.fidelity)

        runner = _show if args.command == "show" else _catalog
        status = asyncio.run(runner(args, s))
    if argv is None:
        sys.exit(status)
    return status


if __name__ == "__main__":
    main()
