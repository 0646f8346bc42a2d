"""Pipeline logo detection.

A pipeline repository may ship its logo under `assets/`:

1. `{name}-light-logo.png` and `{name}-dark-logo.png`, a pair for each theme,
2. `{name}-logo.png`, one image for both themes.

When neither is present the site's built-in GitHub logo pair is used. Logo
detection is decorative, so `LogoResolver.resolve` never raises.
"""
from __future__ import annotations
import asyncio

from .github import RepositoryClient
from .logger import get_logger
from .models import FallbackLogo, LightDarkLogo, LogoDescriptor, SingleLogo
from .probe import first_match

log = get_logger(__name__)


class LogoResolver:
    """Decide which logo variant a pipeline repository exposes.

    Args:
        client: Client used for the existence probes.
        branch: Branch the raw asset URLs point at.
        fallback: Logo returned when nothing is found or a probe fails.
    """

    def __init__(
        self,
        client: RepositoryClient,
        branch: str = "main",
        fallback: FallbackLogo | None = None,
    ):
        self.client = client
        self.branch = branch
        self.fallback = fallback or FallbackLogo()

    async def resolve(self, org: str, name: str) -> LogoDescriptor:
        light = f"assets/{name}-light-logo.png"
        dark = f"assets/{name}-dark-logo.png"
        single = f"assets/{name}-logo.png"

        try:
            results = await asyncio.gather(
                self.client.file_exists(org, name, light),
                self.client.file_exists(org, name, dark),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            has_light, has_dark = results
            if has_light and has_dark:
                return LightDarkLogo(
                    light_url=self._raw(org, name, light),
                    dark_url=self._raw(org, name, dark),
                )

            async def exists(path: str) -> bool:
                return await self.client.file_exists(org, name, path)

            found = await first_match([single], exists)
            if found:
                return SingleLogo(url=self._raw(org, name, found))
        except Exception as exc:
            log.error("logo_detection_failed", repo=f"{org}/{name}", error=str(exc))

        return self.fallback

    def _raw(self, org: str, name: str, path: str) -> str:
        return self.client.raw_content_url(org, name, path, branch=self.branch)
