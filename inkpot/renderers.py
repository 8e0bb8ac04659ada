"""Markdown rendering for Inkpot.

Markdown bodies are converted to HTML with mistune. Raw HTML embedded in the
Markdown source is passed through untouched; malformed Markdown renders
best-effort HTML and never raises.

Key objects:
- MarkdownRenderer: Stateless Markdown to HTML converter.
- markdown_to_html: Convenience wrapper around the default renderer.
"""

from __future__ import annotations

import mistune

PLUGINS = ["strikethrough", "table", "url"]


class MarkdownRenderer:
    """Renders Markdown content to HTML."""

    def __init__(self, plugins: list[str] | None = None):
        self._markdown = mistune.create_markdown(
            escape=False,
            plugins=PLUGINS if plugins is None else plugins,
        )

    def render(self, content: str) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source without frontmatter.

        Returns:
            Rendered HTML.
        """
        if not content:
            return ""
        return self._markdown(content)


default_renderer = MarkdownRenderer()


def markdown_to_html(content: str) -> str:
    return default_renderer.render(content)
