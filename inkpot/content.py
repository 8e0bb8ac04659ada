"""Content processing for Inkpot.

This module reads Markdown content files, extracts their frontmatter and turns
them into page records for templates.

Key classes:
- Page: A single post, fully rendered, ready for the post template.
- PostMeta: Lightweight summary of a post for the index listing.
- UrlDeriver: Maps content filenames to output filenames and public URLs.
- PageBuilder: Builds a Page from a content file.
- PostCollector: Gathers PostMeta for every post in a content directory.
"""

from __future__ import annotations

import functools
import re
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from markupsafe import Markup

from .errors import BuildError
from .frontmatter import get_string, parse_frontmatter
from .renderers import MarkdownRenderer, default_renderer
from .utils import is_markdown, strip_markdown_suffix

INDEX_FILENAME = "_index.md"
BLOGS_DIR = "blogs"

DATE_FORMAT = "%Y-%m-%d"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ContentError(BuildError):
    """A content file that the build depends on could not be read."""


@dataclass
class Page:
    """Represents a single post page.

    Attributes:
        title: Title from frontmatter, empty when not given.
        description: Description from frontmatter.
        author: Author from frontmatter.
        date: Date string from frontmatter, ``YYYY-MM-DD`` expected.
        content: Rendered HTML body.
        frontmatter: Full frontmatter mapping for use in templates.
        filename: Name of the source file.
    """

    title: str = ""
    description: str = ""
    author: str = ""
    date: str = ""
    content: Markup = field(default_factory=Markup)
    frontmatter: dict[str, Any] = field(default_factory=dict)
    filename: str = ""


@dataclass
class PostMeta:
    """Summary of a post for listings."""

    title: str
    description: str
    author: str
    date: str
    url: str
    filename: str


class UrlDeriver:
    """Derives output names and URLs for posts.

    Both the page build and the index listing go through this class so
    the generated files and the links to them always agree.
    """

    def __init__(self, prefix: str = BLOGS_DIR):
        self.prefix = prefix.strip("/")

    def output_name(self, filename: str) -> str:
        """Return the output filename, ``post.md`` -> ``post.html``."""
        return f"{strip_markdown_suffix(filename)}.html"

    def derive(self, filename: str) -> str:
        """Return the public URL, ``post.md`` -> ``/blogs/post.html``."""
        return f"/{self.prefix}/{self.output_name(filename)}"


default_url_deriver = UrlDeriver()


def read_content(path: Path) -> tuple[str, str]:
    """Read a content file.

    The bytes are decoded as UTF-8 with invalid sequences replaced, and line
    endings are left as they are on disk.

    Args:
        path: Path to the content file.

    Returns:
        Tuple of (file text, filename).

    Raises:
        ContentError: If the file cannot be read.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ContentError(path, f"cannot read markdown: {exc}", exc) from exc
    return raw.decode("utf-8", errors="replace"), path.name


def iter_post_files(content_dir: Path) -> Iterator[Path]:
    """Yield post files in a content directory, sorted by name.

    Only regular files ending in ``.md`` are included, and the index file
    is skipped. Subdirectories are not descended into.

    Raises:
        OSError: If the directory cannot be listed.
    """
    for path in sorted(content_dir.iterdir(), key=lambda p: p.name):
        if not path.is_file() or not is_markdown(path):
            continue
        if path.name == INDEX_FILENAME:
            continue
        yield path


def parse_date(value: str) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` date, returning None when invalid."""
    if not DATE_RE.match(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def compare_post_dates(a: PostMeta, b: PostMeta) -> int:
    """Order two posts newest first.

    Dates are compared as calendar dates when both parse; otherwise the raw
    date strings are compared. Returns a negative number when ``a`` sorts
    before ``b``.
    """
    left: Any = parse_date(a.date)
    right: Any = parse_date(b.date)
    if left is None or right is None:
        left, right = a.date, b.date
    if left > right:
        return -1
    if left < right:
        return 1
    return 0


def sort_posts(posts: list[PostMeta]) -> list[PostMeta]:
    """Return posts sorted newest first; ties keep their listing order."""
    return sorted(posts, key=functools.cmp_to_key(compare_post_dates))


class PageBuilder:
    """Builds Page objects from content files.

    Attributes:
        renderer: Markdown renderer for the body.
    """

    def __init__(self, renderer: MarkdownRenderer | None = None):
        self.renderer = renderer or default_renderer

    def build(self, path: Path) -> Page:
        """Build a Page from a content file.

        The title is taken from frontmatter only; a post without one gets
        an empty title here. Listings fall back to the filename instead.

        Raises:
            ContentError: If the file cannot be read.
        """
        text, filename = read_content(path)
        frontmatter, body = parse_frontmatter(text, path)
        return Page(
            title=get_string(frontmatter, "title"),
            description=get_string(frontmatter, "description"),
            author=get_string(frontmatter, "author"),
            date=get_string(frontmatter, "date"),
            content=Markup(self.renderer.render(body)),
            frontmatter=frontmatter or {},
            filename=filename,
        )


class PostCollector:
    """Collects post summaries from a content directory.

    Attributes:
        content_dir: Directory containing the Markdown posts.
        url_deriver: Maps filenames to public URLs.
    """

    def __init__(self, content_dir: Path, url_deriver: UrlDeriver | None = None):
        self.content_dir = content_dir
        self.url_deriver = url_deriver or default_url_deriver

    def collect(self) -> list[PostMeta]:
        """Collect metadata for every post, newest first.

        Files that cannot be read are skipped with a warning.

        Raises:
            OSError: If the content directory cannot be listed.
        """
        posts: list[PostMeta] = []
        for path in iter_post_files(self.content_dir):
            try:
                text, filename = read_content(path)
            except ContentError as exc:
                print(
                    f"Warning: skipping unreadable post {path}: {exc.original_error}",
                    file=sys.stderr,
                )
                continue
            posts.append(self._build_meta(text, filename, path))
        return sort_posts(posts)

    def _build_meta(self, text: str, filename: str, path: Path) -> PostMeta:
        frontmatter, _ = parse_frontmatter(text, path)
        return PostMeta(
            title=get_string(frontmatter, "title") or strip_markdown_suffix(filename),
            description=get_string(frontmatter, "description"),
            author=get_string(frontmatter, "author"),
            date=get_string(frontmatter, "date"),
            url=self.url_deriver.derive(filename),
            filename=filename,
        )


def collect_posts(content_dir: Path) -> list[PostMeta]:
    return PostCollector(content_dir).collect()
