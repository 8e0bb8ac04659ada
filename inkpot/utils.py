"""Utility functions for Inkpot.

Key functions:
    is_markdown: Check if a path is a Markdown file.
    strip_markdown_suffix: Drop the final ``.md`` suffix from a filename.
    slugify: Convert a title to a filename-friendly slug.
    write_output: Write a text file, creating parent directories.
"""

from __future__ import annotations

import re
from pathlib import Path

MARKDOWN_SUFFIX = ".md"


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown file.

    The check is case-sensitive: ``notes.MD`` is not picked up.
    """
    return path.name.endswith(MARKDOWN_SUFFIX)


def strip_markdown_suffix(filename: str) -> str:
    """Remove the final ``.md`` suffix from a filename.

    Examples:
        >>> strip_markdown_suffix("a.b.md")
        'a.b'

        >>> strip_markdown_suffix("notes.txt")
        'notes.txt'
    """
    if filename.endswith(MARKDOWN_SUFFIX):
        return filename[: -len(MARKDOWN_SUFFIX)]
    return filename


def slugify(text: str) -> str:
    """Convert a title to a URL and filename friendly slug.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", text)
    return cleaned.strip("-").lower()


def write_output(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` as UTF-8, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
