"""HTTP API server for on-demand URL health checks."""

import json
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from .checker import aggregate
from .config import AppSettings, ServerConfig
from ._dashboard import HTML_DASHBOARD

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when an API operation fails."""
    pass


class StatusHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the dashboard and its JSON endpoints."""

    # Class-level reference set by factory
    settings: Optional[AppSettings] = None

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use Python logging instead of stderr."""
        logger.debug("API %s - %s", self.address_string(), format % args)

    def _send_body(self, code: int, content_type: str, body: bytes) -> None:
        self.send_response(code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, code: int, data: Any) -> None:
        """Send a JSON response with the given status code."""
        body = json.dumps(data).encode("utf-8")
        self._send_body(code, "application/json", body)

    def _send_error_json(self, code: int, message: str) -> None:
        """Send a JSON error response."""
        self._send_json(code, {"error": message})

    def _send_text(self, code: int, text: str) -> None:
        """Send a plain-text response, newline-terminated."""
        body = (text + "\n").encode("utf-8")
        self._send_body(code, "text/plain; charset=utf-8", body)

    def _send_html(self, code: int, html: str) -> None:
        """Send an HTML response with the given status code."""
        self._send_body(code, "text/html; charset=utf-8", html.encode("utf-8"))

    def do_GET(self) -> None:
        """Handle GET requests."""
        try:
            parsed = urlparse(self.path)
            if parsed.path == "/":
                self._handle_dashboard()
            elif parsed.path == "/health":
                self._handle_health()
            elif parsed.path == "/config":
                self._handle_config()
            elif parsed.path == "/status":
                self._handle_status(parsed.query)
            else:
                self._send_error_json(404, "Not found")
        except Exception as e:
            logger.exception("Error handling request: %s", e)
            self._send_error_json(500, "Internal server error")

    def _handle_dashboard(self) -> None:
        """Handle GET / endpoint - serve HTML dashboard."""
        self._send_html(200, HTML_DASHBOARD)

    def _handle_health(self) -> None:
        """Handle GET /health endpoint."""
        self._send_json(200, {"status": "ok"})

    def _handle_config(self) -> None:
        """Handle GET /config endpoint."""
        self._send_json(200, self.settings.to_dict())

    def _handle_status(self, query: str) -> None:
        """Handle GET /status?domain=<domain> endpoint.

        Always answers 200 once a domain is given; per-URL failures are
        reported inline in each entry's status string.
        """
        domain = parse_qs(query).get("domain", [""])[0]
        if not domain:
            self._send_text(400, "Missing domain parameter")
            return

        statuses = aggregate(domain, self.settings)
        self._send_json(200, [s.to_dict() for s in statuses])


def _create_handler_class(settings: AppSettings) -> type:
    """Create a handler class with the settings bound."""

    class BoundStatusHandler(StatusHandler):
        pass

    BoundStatusHandler.settings = settings
    return BoundStatusHandler


class ApiServer:
    """Threaded HTTP server: each request is handled on its own thread."""

    def __init__(
        self,
        settings: AppSettings,
        config: Optional[ServerConfig] = None,
    ) -> None:
        """Initialize the API server.

        Args:
            settings: Loaded settings served by /config and used by /status.
            config: Listener configuration (defaults to port 8080 on all interfaces).
        """
        self.settings = settings
        self.config = config or ServerConfig()
        self._server: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Bind the listener and serve in a background thread.

        Raises:
            ApiError: If the server fails to start.
        """
        if self._thread is not None and self._thread.is_alive():
            logger.warning("API server is already running")
            return

        try:
            handler_class = _create_handler_class(self.settings)
            self._server = ThreadingHTTPServer((self.config.host, self.config.port), handler_class)
        except OSError as e:
            if e.errno == 98 or e.errno == 48:  # EADDRINUSE (Linux=98, macOS=48)
                raise ApiError(
                    f"Port {self.config.port} is already in use. "
                    f"Another process may be using this port, or urlhealth is already running."
                )
            elif e.errno == 13:  # EACCES - Permission denied
                raise ApiError(
                    f"Permission denied for port {self.config.port}. "
                    f"Ports below 1024 require root privileges."
                )
            else:
                raise ApiError(f"Failed to start server on port {self.config.port}: {e}")

        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.5},
            name="api-server",
            daemon=True,
        )
        self._thread.start()
        logger.info("API server started on port %d", self.config.port)

    def stop(self) -> None:
        """Stop the API server gracefully."""
        if self._thread is None:
            return

        logger.info("Stopping API server...")

        if self._server:
            self._server.shutdown()
            self._server.server_close()

        if self._thread.is_alive():
            self._thread.join(timeout=5.0)

        self._server = None
        self._thread = None
        logger.info("API server stopped")

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._thread is not None and self._thread.is_alive()
