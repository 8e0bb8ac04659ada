"""Site configuration for Inkpot.

Configuration lives in ``inkpot.yaml`` at the project root:

    site:
      title: "My Inkpot Site"
      author: "Your Name"
      bio: ""
    paths:
      content: "content"
      templates: "templates"
      output: "public"
    server:
      port: 8080

Missing sections and keys fall back to DEFAULT_CONFIG. A missing or broken
file is an error: the build cannot run without it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "inkpot.yaml"
POST_TEMPLATE = "default.html.jinja"
INDEX_TEMPLATE = "index.html.jinja"

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "site": {
        "title": "My Inkpot Site",
        "author": "Your Name",
        "bio": "",
    },
    "paths": {
        "content": "content",
        "templates": "templates",
        "output": "public",
    },
    "server": {
        "port": 8080,
    },
}


class ConfigError(Exception):
    """Configuration could not be loaded.

    Attributes:
        source_path: Path to the configuration file.
        message: Human-readable error message.
    """

    def __init__(self, source_path: Path, message: str):
        self.source_path = source_path
        self.message = message
        super().__init__(f"{source_path}: {message}")


@dataclass
class SiteConfig:
    """Resolved site configuration.

    Attributes:
        title: Default site title.
        author: Default site author.
        bio: Default author bio.
        content_dir: Directory containing Markdown content.
        templates_dir: Directory containing the templates.
        output_dir: Directory the site is written to.
        port: Port for the preview server.
    """

    title: str
    author: str
    bio: str
    content_dir: Path
    templates_dir: Path
    output_dir: Path
    port: int = 8080

    @property
    def post_template(self) -> Path:
        return self.templates_dir / POST_TEMPLATE

    @property
    def index_template(self) -> Path:
        return self.templates_dir / INDEX_TEMPLATE


def load_config(project_root: Path) -> SiteConfig:
    """Load site configuration from inkpot.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        SiteConfig with defaults applied and paths resolved against the root.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    config_path = project_root / CONFIG_FILENAME
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(config_path, f"cannot read config: {exc.strerror or exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(config_path, f"invalid YAML: {exc}") from exc

    config = merge_config(config_path, loaded or {})
    site, paths, server = config["site"], config["paths"], config["server"]
    try:
        port = int(server["port"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(config_path, f"invalid server port: {server['port']!r}") from exc

    return SiteConfig(
        title=_as_text(site["title"]),
        author=_as_text(site["author"]),
        bio=_as_text(site["bio"]),
        content_dir=project_root / str(paths["content"]),
        templates_dir=project_root / str(paths["templates"]),
        output_dir=project_root / str(paths["output"]),
        port=port,
    )


def merge_config(config_path: Path, loaded: Any) -> dict[str, dict[str, Any]]:
    """Merge a loaded document over DEFAULT_CONFIG, section by section.

    Raises:
        ConfigError: If the document or one of its sections is not a mapping.
    """
    if not isinstance(loaded, dict):
        raise ConfigError(config_path, "config must be a mapping")
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, defaults in config.items():
        values = loaded.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(config_path, f"'{section}' must be a mapping")
        defaults.update({k: v for k, v in values.items() if v is not None})
    return config


def render_default_config() -> str:
    """Return DEFAULT_CONFIG as YAML text for new projects."""
    return yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False, allow_unicode=True)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)
