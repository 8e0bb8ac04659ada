"""Command-line interface for Inkpot.

This module defines the CLI commands using Click framework.
It provides commands for creating new projects, building sites, writing posts and
previewing the output.

Commands:
- init: Scaffold a new Inkpot project.
- build: Build the site into the output directory.
- serve: Build, then serve the output directory locally.
- md: Create a new post interactively.
"""

from __future__ import annotations

import shutil
from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import CONFIG_FILENAME, ConfigError, load_config, render_default_config
from .errors import BuildError
from .utils import slugify

# Starter content and templates copied into new projects
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"


@click.group()
@click.version_option(version=__version__, prog_name="inkpot")
def cli():
    """Inkpot static site generator."""


@cli.command()
@click.argument("directory", default=".", type=click.Path(file_okay=False, path_type=Path))
def init(directory: Path):
    """Scaffold a new Inkpot project."""
    target = directory.resolve()
    if (target / CONFIG_FILENAME).exists():
        raise click.ClickException(f"{CONFIG_FILENAME} already exists in {target}")
    click.echo("Initializing inkpot project...")
    for created in _scaffold(target):
        click.echo(f"Created {created}")
    click.echo(f"New Inkpot site created at {target}")


@cli.command()
def build():
    """Build the site into the output directory."""
    project_root = Path.cwd()
    from .build import build_site

    click.echo("Building site...")
    try:
        result = build_site(project_root)
    except (ConfigError, BuildError) as exc:
        _report_failure(project_root, exc)
        raise SystemExit(1) from None
    summary = f"Built {len(result.written)} pages into {result.output_dir}"
    if result.failed:
        summary += f" ({len(result.failed)} failed)"
    click.echo(summary)


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help=f"Port to serve on (overrides {CONFIG_FILENAME})",
)
def serve(port: int | None):
    """Build the site and serve it locally."""
    project_root = Path.cwd()
    from .server import PreviewServer

    try:
        server = PreviewServer(project_root, port=port)
        server.start()
    except (ConfigError, BuildError) as exc:
        _report_failure(project_root, exc)
        raise SystemExit(1) from None
    except OSError as exc:
        click.echo(
            click.style(f"Failed to start server: {exc.strerror or exc}", fg="red", bold=True),
            err=True,
        )
        raise SystemExit(1) from None


@cli.command()
def md():
    """Create a new post interactively."""
    project_root = Path.cwd()
    try:
        config = load_config(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    name = questionary.text(
        "Filename (without .md extension):",
        default=slugify(title) or "post",
        validate=lambda x: len(x.strip()) > 0 or "Filename cannot be empty",
        style=_questionary_style(),
    ).ask()
    if name is None:
        raise click.Abort()

    description = questionary.text("Description (optional):", style=_questionary_style()).ask()
    if description is None:
        raise click.Abort()

    target_path = config.content_dir / f"{name.strip()}.md"
    if target_path.exists():
        raise click.ClickException(f"File already exists: {_display_path(project_root, target_path)}")

    frontmatter = {
        "title": title,
        "description": description.strip(),
        "author": config.author,
        "date": date.today().isoformat(),
    }
    target_path.parent.mkdir(parents=True, exist_ok=True)
    target_path.write_text(_render_post(frontmatter), encoding="utf-8")
    click.echo(f"Created {_display_path(project_root, target_path)}")


def _render_post(frontmatter: dict[str, str]) -> str:
    """Render a new post with the given frontmatter and an empty body."""
    block = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    return f"---\n{block}---\n\n"


def _report_failure(project_root: Path, exc: ConfigError | BuildError) -> None:
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    click.echo(
        click.style(f"  File: {_display_path(project_root, exc.source_path)}", fg="yellow"),
        err=True,
    )
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


def _display_path(project_root: Path, path: Path) -> Path:
    try:
        return path.relative_to(project_root)
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> list[Path]:
    """Create the directory structure and files for a new Inkpot project.

    Existing content and template files are left untouched.

    Args:
        root: Root directory for the new project.

    Returns:
        Paths created, relative to ``root``.
    """
    created: list[Path] = []
    for name in ("content", "templates", "public"):
        (root / name).mkdir(parents=True, exist_ok=True)

    for src_path in sorted(_SCAFFOLD_DIR.rglob("*")):
        if src_path.is_dir():
            continue
        rel_path = src_path.relative_to(_SCAFFOLD_DIR)
        dest_path = root / rel_path
        if dest_path.exists():
            continue
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
        created.append(rel_path)

    (root / CONFIG_FILENAME).write_text(render_default_config(), encoding="utf-8")
    created.append(Path(CONFIG_FILENAME))
    return created
