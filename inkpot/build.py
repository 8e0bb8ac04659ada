"""Site building functionality for Inkpot.

This module drives a full build: every post in the content directory is
rendered to ``<output>/blogs/<name>.html`` and the index page to
``<output>/index.html``.

Failures are handled at three levels:
- Fatal: broken configuration, unreadable content directory, missing post
  template, or an unreadable post file. The build stops.
- Per post: a post that fails to render or write is reported and skipped.
- Index: a missing index template or a failing index build is reported and
  the rest of the build stands.

Key functions:
- build_site: Main function to build the entire site.
- generate_page: Build, render and write a single post.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

from .config import SiteConfig, load_config
from .content import BLOGS_DIR, Page, PageBuilder, default_url_deriver, iter_post_files
from .errors import BuildError
from .index import IndexPage, generate_index_page
from .templates import RenderError, TemplateEngine

__all__ = ["BuildError", "BuildResult", "build_site", "generate_page"]


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        output_dir: Directory where the site was built.
        written: Output files written, in build order.
        failed: Content files whose page could not be generated.
        index: The rendered index page, or None when skipped or failed.
    """

    output_dir: Path
    written: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)
    index: IndexPage | None = None


def generate_page(
    content_path: Path,
    template_path: Path,
    output_path: Path,
    engine: TemplateEngine | None = None,
    builder: PageBuilder | None = None,
) -> Page:
    """Build a post page and write it to ``output_path``.

    Raises:
        ContentError: If the content file cannot be read.
        RenderError: If the template cannot be loaded or executed.
        OSError: If the output cannot be written.
    """
    page = (builder or PageBuilder()).build(content_path)
    (engine or TemplateEngine()).render_to_file(page, template_path, output_path)
    return page


def build_site(project_root: Path, config: SiteConfig | None = None) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        config: Optional preloaded configuration.

    Returns:
        BuildResult describing what was written.

    Raises:
        ConfigError: If the configuration cannot be loaded.
        BuildError: On fatal build failures.
    """
    config = config or load_config(project_root)
    result = BuildResult(output_dir=config.output_dir)

    blogs_dir = config.output_dir / BLOGS_DIR
    try:
        blogs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BuildError(blogs_dir, f"failed to create blogs directory: {exc}", exc) from exc

    try:
        post_files = list(iter_post_files(config.content_dir))
    except OSError as exc:
        raise BuildError(
            config.content_dir, f"failed to read content directory: {exc}", exc
        ) from exc

    post_template = config.post_template
    if not post_template.is_file():
        raise BuildError(post_template, "template not found")

    engine = TemplateEngine()
    builder = PageBuilder()
    for content_path in post_files:
        output_name = default_url_deriver.output_name(content_path.name)
        output_path = blogs_dir / output_name
        print(f"Building {content_path.name} -> {BLOGS_DIR}/{output_name}")
        try:
            generate_page(content_path, post_template, output_path, engine, builder)
        except (RenderError, OSError) as exc:
            print(f"Failed to generate {content_path.name}: {exc}", file=sys.stderr)
            result.failed.append(content_path)
            continue
        result.written.append(output_path)

    result.index = _build_index(config, engine, result)
    return result


def _build_index(
    config: SiteConfig, engine: TemplateEngine, result: BuildResult
) -> IndexPage | None:
    """Render index.html, reporting instead of raising on failure."""
    index_template = config.index_template
    if not index_template.is_file():
        print(
            f"Warning: {index_template.name} not found, skipping index generation",
            file=sys.stderr,
        )
        return None

    output_path = config.output_dir / "index.html"
    print("Building index.html")
    try:
        index_page = generate_index_page(
            config.content_dir,
            index_template,
            output_path,
            site_title=config.title,
            site_author=config.author,
            site_author_bio=config.bio,
            engine=engine,
        )
    except (BuildError, OSError) as exc:
        print(f"Failed to generate index: {exc}", file=sys.stderr)
        return None
    result.written.append(output_path)
    return index_page
