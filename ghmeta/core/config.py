"""Configuration management for ghmeta.

This module handles loading and merging configuration from multiple sources:
1. Environment variables (highest priority)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

A `.env` file in the working directory is loaded into the environment first.

Example config.toml:
    ```toml
    [github]
    api_url = "https://api.github.com"

    [logo]
    branch = "main"
    fallback_light = "/github-logo.svg"
    fallback_dark = "/github-logo-dark.svg"

    [pipelines]
    dir = "src/content/pipelines"
    fidelity = "detailed"

    [logging]
    level = "INFO"
    ```

Environment Variables:
    GITHUB_TOKEN: Access token for the GitHub API.
    PUBLIC_GITHUB_TOKEN: Used when GITHUB_TOKEN is not set.
    GITHUB_API_URL: Override the API origin.
    GITHUB_RAW_URL: Override the raw content origin.
    GHMETA_FIDELITY: Override the default fidelity ("compact" or "detailed").
    GHMETA_LOG_LEVEL: Override the log level.

The access token is only ever taken from the environment, never from the TOML
file, and it is resolved once here rather than by the HTTP client.
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import os
import tomllib  # Python 3.11+

from dotenv import find_dotenv, load_dotenv

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "PUBLIC_GITHUB_TOKEN")


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Attributes:
        github_token: Bearer token for the API, or None for anonymous access.
        api_url: Origin of the GitHub REST API.
        raw_url: Origin serving raw repository files.
        logo_branch: Branch used when building raw logo URLs.
        fallback_light_logo: Built-in light logo used when none is found.
        fallback_dark_logo: Built-in dark logo used when none is found.
        fidelity: Default aggregation fidelity.
        catalog_dir: Directory holding one JSON file per listed pipeline.
        log_level: Log level name.
    """

    github_token: str | None = None
    api_url: str = "https://api.github.com"
    raw_url: str = "https://raw.githubusercontent.com"

    logo_branch: str = "main"
    fallback_light_logo: str = "/github-logo.svg"
    fallback_dark_logo: str = "/github-logo-dark.svg"

    fidelity: str = "compact"
    catalog_dir: str = "pipelines"

    log_level: str = "INFO"


def resolve_token() -> str | None:
    """Return the first non-empty token among `TOKEN_ENV_VARS`."""
    for name in TOKEN_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def load_config(path: str = "config.toml") -> dict:
    """Load a TOML config file into a dictionary.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Dictionary containing configuration data, or empty dict if file missing.
    """
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("rb") as f:
        return tomllib.load(f)


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to "config.toml".

    Returns:
        Settings object with merged configuration from all sources.

    Raises:
        ValueError: If the configured fidelity is not "compact" or "detailed".
    """
    load_dotenv(find_dotenv(usecwd=True))
    cfg = load_config(config_path or "config.toml")

    s = Settings()
    s.github_token = resolve_token()

    gh = cfg.get("github", {})
    s.api_url = os.getenv("GITHUB_API_URL", gh.get("api_url", s.api_url)).rstrip("/")
    s.raw_url = os.getenv("GITHUB_RAW_URL", gh.get("raw_url", s.raw_url)).rstrip("/")

    logo = cfg.get("logo", {})
    s.logo_branch = logo.get("branch", s.logo_branch)
    s.fallback_light_logo = logo.get("fallback_light", s.fallback_light_logo)
    s.fallback_dark_logo = logo.get("fallback_dark", s.fallback_dark_logo)

    pl = cfg.get("pipelines", {})
    s.fidelity = os.getenv("GHMETA_FIDELITY", pl.get("fidelity", s.fidelity)).lower()
    if s.fidelity not in ("compact", "detailed"):
        raise ValueError(f"Unknown fidelity: {s.fidelity}")
    s.catalog_dir = pl.get("dir", s.catalog_dir)

    lg = cfg.get("logging", {})
    s.log_level = os.getenv("GHMETA_LOG_LEVEL", lg.get("level", s.log_level)).upper()

    return s
