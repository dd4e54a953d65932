import socket
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import urlparse

from benchforge.logging import logger

from .browser import start_browser
from .stream import ResultStream
from .template import DashboardTemplate


class ServerError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class DashboardServer(ThreadingHTTPServer):
    # A second listener on the same port must fail, not share it
    allow_reuse_port = False
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        template: DashboardTemplate,
        stream: ResultStream[Any],
    ):
        if ":" in address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(address, DashboardHandler)
        self.template = template
        self.stream = stream
        self.results: list[Any] = []
        self._results_lock = threading.Lock()

    def snapshot(self) -> list[Any]:
        """Move newly streamed results into the page state and return a copy."""
        with self._results_lock:
            self.results.extend(self.stream.drain())
            return list(self.results)

    @property
    def url(self) -> str:
        host = self.server_address[0]
        if host in ("", "0.0.0.0", "::"):
            host = "localhost"
        elif ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.server_address[1]}"


class DashboardHandler(BaseHTTPRequestHandler):
    server: DashboardServer

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        if parsed.path != "/":
            self.send_error(HTTPStatus.NOT_FOUND, "Not found")
            return

        # Nothing is written until the page has rendered
        try:
            html = self.server.template.render(results=self.server.snapshot())
        except Exception:
            logger.exception("Rendering dashboard template failed")
            self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR)
            return

        body = html.encode("utf-8")
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


def parse_bind(bind: str) -> tuple[str, int]:
    host, sep, port = bind.rpartition(":")
    if not sep:
        raise ServerError(f"Bind address must be 'host:port', got {bind!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        return host, int(port)
    except ValueError:
        raise ServerError(f"Invalid port in bind address {bind!r}") from None


def make_server(
    bind: str, stream: ResultStream[Any], template: DashboardTemplate
) -> DashboardServer:
    address = parse_bind(bind)
    try:
        return DashboardServer(address, template, stream)
    except OSError as exc:
        raise ServerError(f"Cannot listen on {bind}: {exc}") from exc


def start_server(
    bind: str,
    stream: ResultStream[Any],
    template: DashboardTemplate,
    *,
    open_browser: Callable[[str], bool] | None = start_browser,
) -> None:
    """Serve the dashboard on `bind` until interrupted.

    The listener is bound before anything else, so an unusable address raises
    ServerError without a browser ever being started. The browser is opened
    from a daemon thread and never waited on.
    """
    serve(make_server(bind, stream, template), open_browser=open_browser)


def serve(
    server: DashboardServer,
    *,
    open_browser: Callable[[str], bool] | None = start_browser,
) -> None:
    """Serve an already bound dashboard until interrupted, then close it."""
    logger.info("Dashboard listening on %s", server.url)

    if open_browser is not None:

        def launch() -> None:
            started = open_browser(server.url)
            logger.debug("Browser launch started: %s", started)

        threading.Thread(target=launch, name="browser-launch", daemon=True).start()

    try:
        server.serve_forever()
    finally:
        server.server_close()
