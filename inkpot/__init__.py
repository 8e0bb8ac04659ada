"""Inkpot static site generator.

This package provides a minimal static site generator that turns a flat directory
of Markdown files with YAML frontmatter into static HTML using Jinja2 templates.
Every post gets its own page under ``blogs/`` and an index page lists all posts,
newest first. A small HTTP server previews the output locally.

The main entry point is the CLI module, which provides commands for scaffolding new
projects, building sites, creating posts and serving the built output.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
