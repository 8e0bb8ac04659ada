"""Template rendering engine for Inkpot.

This module uses Jinja2 to bind page records to template files. Autoescaping
is always on, so text pulled from frontmatter is HTML-escaped; only the
pre-rendered Markdown body (a ``Markup`` value) is inserted as-is. Undefined
variables are errors rather than silently empty, except for keys missing from
the ``frontmatter`` mapping, which render empty.

Key classes:
- TemplateEngine: Loads templates by path and renders records against them.
- RenderError: Raised when a template is missing, invalid, or fails to render.
- FrontmatterView: Frontmatter mapping that tolerates missing keys.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)

from .errors import BuildError
from .utils import write_output

__all__ = ["FrontmatterView", "RenderError", "TemplateEngine", "build_context"]


class RenderError(BuildError):
    """A template could not be loaded or rendered."""


class FrontmatterView(dict):
    """Frontmatter mapping whose missing keys render empty.

    Templates may test optional keys such as ``{% if frontmatter.image %}``
    without failing on posts that do not set them.
    """

    def __missing__(self, key):
        return Undefined(name=key)


def build_context(record: Any) -> dict[str, Any]:
    """Expose the fields of a record as template variables.

    Dataclass fields and mapping keys become top-level names, and the record
    itself is available as ``page``. A ``frontmatter`` mapping is wrapped in
    FrontmatterView; any other undefined name still fails the render.

    Args:
        record: Dataclass instance or mapping.

    Returns:
        Template context dictionary.
    """
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        context = {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
    elif isinstance(record, Mapping):
        context = dict(record)
    else:
        raise TypeError(f"Cannot render {type(record).__name__} as a template context")
    if isinstance(context.get("frontmatter"), Mapping):
        context["frontmatter"] = FrontmatterView(context["frontmatter"])
    context.setdefault("page", record)
    return context


class TemplateEngine:
    """Template rendering engine using Jinja2.

    One environment is kept per template directory, so a template used for
    many pages is parsed once per build.
    """

    def __init__(self):
        self._environments: dict[Path, Environment] = {}

    def _environment(self, directory: Path) -> Environment:
        env = self._environments.get(directory)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(str(directory)),
                autoescape=True,
                undefined=StrictUndefined,
                keep_trailing_newline=True,
            )
            self._environments[directory] = env
        return env

    def load(self, template_path: Path) -> Template:
        """Load and parse a template file.

        Raises:
            RenderError: If the file is missing or has invalid syntax.
        """
        env = self._environment(template_path.parent.resolve())
        try:
            return env.get_template(template_path.name)
        except TemplateNotFound as exc:
            raise RenderError(template_path, "template not found", exc) from exc
        except TemplateSyntaxError as exc:
            raise RenderError(
                template_path,
                f"failed to parse template on line {exc.lineno}: {exc.message}",
                exc,
            ) from exc

    def render(self, record: Any, template_path: Path) -> str:
        """Render a record against a template file.

        Args:
            record: Page-like record (dataclass or mapping).
            template_path: Path to the template file.

        Returns:
            Rendered HTML string.

        Raises:
            RenderError: If the template cannot be loaded or executed.
        """
        template = self.load(template_path)
        try:
            return template.render(**build_context(record))
        except UndefinedError as exc:
            raise RenderError(
                template_path, f"failed to execute template: undefined variable: {exc}", exc
            ) from exc
        except (TemplateError, TypeError, AttributeError) as exc:
            raise RenderError(
                template_path,
                f"failed to execute template: {type(exc).__name__}: {exc}",
                exc,
            ) from exc

    def render_to_file(self, record: Any, template_path: Path, output_path: Path) -> str:
        """Render a record and write the result, creating parent directories.

        Raises:
            RenderError: If rendering fails; nothing is written in that case.
            OSError: If the output cannot be written.
        """
        html = self.render(record, template_path)
        write_output(output_path, html)
        return html
