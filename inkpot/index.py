"""Index page assembly for Inkpot.

The index page is built from the special ``_index.md`` content file plus a
listing of every post. Site title, author and bio default to the configured
values and are overridden by the index file's own frontmatter.

Key objects:
- IndexPage: Record bound to the index template.
- IndexAssembler: Reads ``_index.md``, collects posts and builds the IndexPage.
- generate_index_page: Build, render and write ``index.html`` in one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from markupsafe import Markup

from .content import INDEX_FILENAME, PostCollector, PostMeta, read_content
from .errors import BuildError
from .frontmatter import get_string, parse_frontmatter
from .renderers import MarkdownRenderer, default_renderer
from .templates import TemplateEngine


@dataclass
class IndexPage:
    """Represents the site's landing page.

    Attributes:
        site_title: Site title, frontmatter ``title`` wins over configuration.
        site_author: Site author, frontmatter ``author`` wins over configuration.
        site_author_bio: Author bio, frontmatter ``bio`` wins over configuration.
        content: Rendered HTML body of ``_index.md``.
        posts: All posts, newest first.
    """

    site_title: str = ""
    site_author: str = ""
    site_author_bio: str = ""
    content: Markup = field(default_factory=Markup)
    posts: list[PostMeta] = field(default_factory=list)


class IndexAssembler:
    """Builds the IndexPage for a content directory.

    Attributes:
        content_dir: Directory containing ``_index.md`` and the posts.
        site_title: Default site title from configuration.
        site_author: Default site author from configuration.
        site_author_bio: Default author bio from configuration.
    """

    def __init__(
        self,
        content_dir: Path,
        site_title: str = "",
        site_author: str = "",
        site_author_bio: str = "",
        renderer: MarkdownRenderer | None = None,
        collector: PostCollector | None = None,
    ):
        self.content_dir = content_dir
        self.site_title = site_title
        self.site_author = site_author
        self.site_author_bio = site_author_bio
        self.renderer = renderer or default_renderer
        self.collector = collector or PostCollector(content_dir)

    def build(self) -> IndexPage:
        """Build the IndexPage.

        Raises:
            ContentError: If ``_index.md`` cannot be read.
            BuildError: If the posts cannot be collected.
        """
        index_path = self.content_dir / INDEX_FILENAME
        text, _ = read_content(index_path)
        frontmatter, body = parse_frontmatter(text, index_path)

        try:
            posts = self.collector.collect()
        except OSError as exc:
            raise BuildError(
                self.content_dir, f"failed to collect posts: {exc}", exc
            ) from exc

        return IndexPage(
            site_title=_override(frontmatter, "title", self.site_title),
            site_author=_override(frontmatter, "author", self.site_author),
            site_author_bio=_override(frontmatter, "bio", self.site_author_bio),
            content=Markup(self.renderer.render(body)),
            posts=posts,
        )


def _override(frontmatter: dict | None, key: str, default: str) -> str:
    # A string in frontmatter wins even when empty.
    if frontmatter and isinstance(frontmatter.get(key), str):
        return get_string(frontmatter, key)
    return default


def generate_index_page(
    content_dir: Path,
    template_path: Path,
    output_path: Path,
    site_title: str = "",
    site_author: str = "",
    site_author_bio: str = "",
    engine: TemplateEngine | None = None,
) -> IndexPage:
    """Build the index page and write it to ``output_path``.

    Args:
        content_dir: Directory containing ``_index.md`` and the posts.
        template_path: Path to the index template.
        output_path: Where to write the rendered HTML.
        site_title: Default site title.
        site_author: Default site author.
        site_author_bio: Default author bio.
        engine: Optional template engine to reuse.

    Returns:
        The IndexPage that was rendered.

    Raises:
        BuildError: If reading, collecting or rendering fails.
        OSError: If the output cannot be written.
    """
    index_page = IndexAssembler(
        content_dir,
        site_title=site_title,
        site_author=site_author,
        site_author_bio=site_author_bio,
    ).build()
    (engine or TemplateEngine()).render_to_file(index_page, template_path, output_path)
    return index_page
