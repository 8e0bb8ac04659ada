"""Frontmatter parsing for Inkpot.

Content files may start with a YAML block delimited by ``---`` markers:

    ---
    title: Hello
    date: 2024-05-01
    ---
    Body text...

Key functions:
- parse_frontmatter: Split raw content into an optional mapping and a body.
- get_string: Read a well-known field as a string, leaving it empty otherwise.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any

import yaml

DELIMITER = "---"

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_BOOL_TAG = "tag:yaml.org,2002:bool"
_BOOL_RE = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


class FrontmatterLoader(yaml.SafeLoader):
    """Safe YAML loader with YAML 1.2 style scalar resolution.

    ``date: 2024-05-01`` stays the string ``"2024-05-01"`` instead of
    becoming a ``datetime.date``, and only ``true``/``false`` are booleans:
    ``yes``, ``no``, ``on`` and ``off`` stay strings.
    """


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in (_TIMESTAMP_TAG, _BOOL_TAG)
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FrontmatterLoader.add_implicit_resolver(_BOOL_TAG, _BOOL_RE, list("tTfF"))


def parse_frontmatter(
    content: str, source: Path | str | None = None
) -> tuple[dict[str, Any] | None, str]:
    """Extract YAML frontmatter from content.

    A block that is present but cannot be parsed is treated as absent: a
    warning is printed and the original content is returned untouched,
    delimiters included.

    Args:
        content: Raw file content.
        source: Optional path of the file, used in warnings.

    Returns:
        Tuple of (frontmatter dict or None, body).
    """
    if not content.startswith(DELIMITER):
        return None, content

    block, marker, rest = content[len(DELIMITER) :].partition(DELIMITER)
    if not marker:
        return None, content

    try:
        data = yaml.load(block, Loader=FrontmatterLoader)
    except yaml.YAMLError as exc:
        _warn(source, exc)
        return None, content
    if data is None:
        data = {}
    if not isinstance(data, dict):
        _warn(source, f"expected a mapping, got {type(data).__name__}")
        return None, content

    frontmatter = {str(key): value for key, value in data.items()}
    return frontmatter, rest.strip()


def get_string(frontmatter: dict[str, Any] | None, key: str) -> str:
    """Return ``frontmatter[key]`` when it is a string, else an empty string."""
    if not frontmatter:
        return ""
    value = frontmatter.get(key)
    return value if isinstance(value, str) else ""


def _warn(source: Path | str | None, error: object) -> None:
    location = f" in {source}" if source else ""
    message = " ".join(str(error).split())
    print(f"Warning: failed to parse frontmatter{location}: {message}", file=sys.stderr)
