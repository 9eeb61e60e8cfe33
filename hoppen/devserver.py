"""Local static dev server.

Serves the workspace directory with the standard library's threaded HTTP
server so generated pages can load their sibling files (GLSL sources, the
entry script, the internal folder) over HTTP.  Responses are never cached,
which lets the shader hot-reload runtime pick up edits by polling.
"""

from __future__ import annotations

import asyncio
import functools
import threading
import webbrowser
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import quote

from rich.markup import escape

from hoppen.config import Config
from hoppen.utils import console, print_success, print_warning, wait_for_health


class HoppenRequestHandler(SimpleHTTPRequestHandler):
    """Static file handler with no-store caching and the extra MIME types."""

    extensions_map = {
        **SimpleHTTPRequestHandler.extensions_map,
        ".glsl": "text/plain",
        ".jsx": "text/babel",
        ".js": "text/javascript",
    }

    def end_headers(self) -> None:
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def log_message(self, format: str, *args) -> None:
        console.print(f"[dim]{escape(self.address_string())} {escape(format % args)}[/dim]")


class DevServer:
    """Threaded static server rooted at a directory.

    ``start`` binds immediately, so a port already in use raises ``OSError``
    to the caller.  Requests are handled on daemon threads.
    """

    def __init__(self, root: str | Path, host: str = "127.0.0.1", port: int = 2187) -> None:
        self.root = Path(root)
        self.host = host
        self.port = port
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._httpd is not None

    @property
    def address(self) -> tuple[str, int]:
        """Bound ``(host, port)``; the real port when 0 was requested."""
        if self._httpd is None:
            return (self.host, self.port)
        return (self.host, self._httpd.server_address[1])

    @property
    def base_url(self) -> str:
        host, port = self.address
        return f"http://{host}:{port}"

    def url_for(self, project_dir: str | Path) -> str:
        """URL of ``index.html`` of a project directory under the root."""
        return f"{self.base_url}/{quote(Path(project_dir).name)}/index.html"

    def start(self) -> None:
        if self.running:
            return
        handler = functools.partial(HoppenRequestHandler, directory=str(self.root))
        self._httpd = ThreadingHTTPServer((self.host, self.port), handler)
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="hoppen-devserver", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        if not self.running:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._httpd = None
        self._thread = None

    def wait(self) -> None:
        """Block until the serving thread exits (or Ctrl+C)."""
        while self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=0.5)


def serve_project(
    project_dir: str | Path,
    config: Config,
    open_browser: bool | None = None,
    *,
    block: bool = True,
) -> DevServer:
    """Serve the workspace and open *project_dir* in the browser.

    With ``block=True`` (the CLI case) this returns only after Ctrl+C, with
    the server already stopped.  With ``block=False`` the running server is
    returned and the caller must ``stop`` it.
    """
    project_dir = Path(project_dir)
    if open_browser is None:
        open_browser = config.server.open_browser

    server = DevServer(project_dir.parent, config.server.host, config.server.port)
    server.start()
    url = server.url_for(project_dir)

    try:
        healthy = asyncio.run(wait_for_health(url, timeout=config.server.startup_timeout))
        if not healthy:
            print_warning(f"Dev server did not answer within {config.server.startup_timeout}s")
        elif open_browser:
            webbrowser.open(url)
        print_success(f"Serving {project_dir.name} at {url}")

        if not block:
            return server
        console.print("[dim]Press Ctrl+C to stop.[/dim]")
        server.wait()
    except KeyboardInterrupt:
        console.print()
        server.stop()
    finally:
        if block:
            server.stop()
    return server
