"""README first-paragraph extraction.

README files rarely open with prose: badges, logos, headings, HTML blocks and
code samples tend to come first. `extract_first_paragraph` walks the document
line by line and keeps the first block of ordinary text, then strips inline
markdown so the result can be shown as plain text.

Rules, in scan order:

* A front-matter block fenced by `---` at the very start is dropped.
* Lines inside ``` fences are ignored, wherever they appear.
* Before the paragraph starts, blank lines, headings, images, badges, raw
  HTML and lines that are nothing but a link are skipped.
* Inside the paragraph, a heading, image, badge or HTML line ends it.
* Two consecutive blank lines end it. A single blank line ends it once more
  than three lines are buffered, or when the buffered text already ends a
  sentence; otherwise the paragraph was only soft-wrapped and continues.

Example:
    ```python
    from ghmeta.core.readme import extract_first_paragraph

    extract_first_paragraph("# Title\\n\\nThis is the description.\\n\\nMore stuff.")
    # Returns: "This is the description."
    ```
"""
from __future__ import annotations
from typing import List
import re

from .errors import HttpError, NotFound
from .github import RepositoryClient
from .logger import get_logger

log = get_logger(__name__)

README_VARIANTS = ("README.md", "readme.md", "README")

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n.*?^---[ \t]*(?:\r?\n|\Z)", re.S | re.M)
_LINK_ONLY = re.compile(r"^\[.*\]\(.*\)$")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_EMPHASIS = re.compile(r"[*_]{1,3}([^*_]+)[*_]{1,3}")
_INLINE_CODE = re.compile(r"`([^`]+)`")

_BLOCK_PREFIXES = ("#", "![", "[!", "<")
_SENTENCE_END = (".", "!", "?")


def _is_block(line: str) -> bool:
    """Heading, image, badge or raw HTML."""
    return line.startswith(_BLOCK_PREFIXES)


def _strip_inline_markdown(text: str) -> str:
    text = _LINK.sub(r"\1", text)
    text = _EMPHASIS.sub(r"\1", text)
    return _INLINE_CODE.sub(r"\1", text)


def extract_first_paragraph(markdown: str) -> str:
    """Return the first prose paragraph of `markdown` as plain text.

    Args:
        markdown: Raw README text. May be empty.

    Returns:
        The paragraph with links, emphasis and inline code unwrapped, or ""
        when the document has no prose paragraph.
    """
    content = _FRONT_MATTER.sub("", markdown or "", count=1)

    buffer: List[str] = []
    in_code = False
    found = False
    blank_run = 0

    for raw in content.splitlines():
        line = raw.strip()

        if line.startswith("```"):
            in_code = not in_code
            continue
        if in_code:
            continue

        if not found:
            if not line or _is_block(line) or _LINK_ONLY.match(line):
                continue
            found = True
            buffer.append(line)
            continue

        if not line:
            blank_run += 1
            if blank_run >= 2 or len(buffer) > 3 or buffer[-1].endswith(_SENTENCE_END):
                break
            continue

        blank_run = 0
        if _is_block(line):
            break
        buffer.append(line)

    return _strip_inline_markdown(" ".join(buffer).strip())


class ReadmeSummarizer:
    """Fetch a repository's README and reduce it to its first paragraph.

    Args:
        client: Client used for the contents and readme endpoints.
        variants: README filenames tried in order through the contents API.
    """

    def __init__(self, client: RepositoryClient, variants=README_VARIANTS):
        self.client = client
        self.variants = tuple(variants)

    async def fetch_readme_content(self, org: str, repo: str) -> str:
        """Return the raw README text.

        Each filename in `variants` is tried in order; when none can be read
        the `/readme` endpoint, which accepts any README name, gets the last
        word. An HTTP error on one variant moves on to the next.

        Raises:
            NotFound: No README could be read at all.
        """
        for filename in self.variants:
            try:
                return await self.client.fetch_file_content(org, repo, filename)
            except HttpError as exc:
                self._log_miss(org, repo, filename, exc)
        try:
            return await self.client.fetch_readme(org, repo)
        except HttpError as exc:
            self._log_miss(org, repo, "readme", exc)
        raise NotFound(404, f"/repos/{org}/{repo}/readme",
                       f"No README file found in {org}/{repo}")

    @staticmethod
    def _log_miss(org: str, repo: str, name: str, exc: HttpError) -> None:
        if isinstance(exc, NotFound):
            log.debug("readme_variant_missing", repo=f"{org}/{repo}", variant=name)
        else:
            log.warning("readme_variant_failed", repo=f"{org}/{repo}", variant=name, status=exc.status)

    async def summarize(self, org: str, repo: str) -> str:
        """Return the README's first paragraph, or "" if that is not possible.

        Failures are logged and never raised.
        """
        try:
            content = await self.fetch_readme_content(org, repo)
        except Exception as exc:
            log.warning("readme_fetch_failed", repo=f"{org}/{repo}", error=str(exc))
            return ""
        return extract_first_paragraph(content)
