"""Preview server for Inkpot.

Builds the site once and serves the output directory over HTTP with sane
defaults for local authoring:
- Directory requests serve their ``index.html``.
- Directory listings and missing paths get a 404 (serving 404.html when present).
- Responses are never cached by the browser.

Key classes:
- PreviewServer: Builds the site and runs the HTTP server.
- _PreviewHandler: HTTP request handler that enforces 404s.
"""

from __future__ import annotations

import functools
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from .build import BuildResult, build_site
from .config import SiteConfig, load_config


class _PreviewHandler(SimpleHTTPRequestHandler):
    """HTTP request handler for the built site."""

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def list_directory(self, path):  # pragma: no cover - exercised via send_head
        # Never expose directory listings; treat as missing content.
        return self._serve_404()

    def _serve_404(self):
        """Serve 404.html (when present) with a 404 status."""
        error_page = Path(self.directory) / "404.html"
        if error_page.is_file():
            encoded = error_page.read_bytes()
            self.send_response(404)
            self.send_header("Content-type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(encoded)))
            self.end_headers()
            self.wfile.write(encoded)
            return None
        self.send_error(404, "File not found")
        return None

    def send_head(self):
        path_obj = Path(self.translate_path(self.path))
        if path_obj.is_dir():
            if not (path_obj / "index.html").is_file():
                return self._serve_404()
        elif not path_obj.exists():
            return self._serve_404()
        return super().send_head()


class PreviewServer:
    """Serves the built site locally.

    Attributes:
        project_root: Root directory of the project.
        config: Site configuration.
        output_dir: Directory being served.
        port: Port for the HTTP server.
    """

    def __init__(
        self,
        project_root: Path,
        port: int | None = None,
        config: SiteConfig | None = None,
    ):
        """Initialize the preview server.

        Args:
            project_root: Root directory of the project.
            port: Optional override for the configured port.
            config: Optional preloaded configuration.

        Raises:
            ConfigError: If the configuration cannot be loaded.
        """
        self.project_root = project_root
        self.config = config or load_config(project_root)
        self.output_dir = self.config.output_dir
        self.port = int(port or self.config.port)
        self._httpd: ThreadingHTTPServer | None = None

    def build(self) -> BuildResult:
        return build_site(self.project_root, self.config)

    def make_server(self, host: str = "") -> ThreadingHTTPServer:
        handler = functools.partial(_PreviewHandler, directory=str(self.output_dir))
        self._httpd = ThreadingHTTPServer((host, self.port), handler)
        return self._httpd

    def start(self) -> None:  # pragma: no cover - integration path
        self.build()
        httpd = self.make_server()
        print(f"Serving {self.output_dir} at http://localhost:{self.port}")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._httpd:
            self._httpd.server_close()
            self._httpd = None
