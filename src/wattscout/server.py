"""HTTP endpoint exposing the store in Prometheus text format."""

from __future__ import annotations

import html
import logging
import threading
from collections.abc import Callable, Iterable
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.platform_collector import PlatformCollector
from prometheus_client.process_collector import ProcessCollector

from wattscout.config import format_duration
from wattscout.core import Exporter

logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"

StartResponse = Callable[[str, list[tuple[str, str]]], Any]
WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True
    allow_reuse_address = True


class QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


def build_registry(exporter: Exporter) -> CollectorRegistry:
    registry = CollectorRegistry()
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    registry.register(exporter.store)
    registry.register(exporter.stats)
    return registry


def render_index(exporter: Exporter) -> str:
    settings = exporter.settings
    network = html.escape(settings.scanning.network)
    return f"""
<html>
<head><title>wattscout</title></head>
<body>
<h1>wattscout</h1>
<p><a href="{METRICS_PATH}">Metrics</a></p>
<p>Network range: {network}</p>
<p>Device discovery interval: {format_duration(settings.scanning.interval)}</p>
<p>Metrics collection interval: {format_duration(settings.metrics.interval)}</p>
<p>Known devices: {len(exporter.registry)}</p>
</body>
</html>"""


def make_app(exporter: Exporter, registry: CollectorRegistry | None = None) -> WSGIApp:
    registry = registry or build_registry(exporter)

    def app(environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        path = environ.get("PATH_INFO", "")
        if path == METRICS_PATH:
            output = generate_latest(registry)
            start_response("200 OK", [("Content-Type", CONTENT_TYPE_LATEST)])
            return [output]
        if path == "/":
            body = render_index(exporter).encode("utf-8")
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [body]
        if path == "/healthz":
            start_response("200 OK", [("Content-Type", "text/plain")])
            return [b"ok"]
        start_response("404 Not Found", [("Content-Type", "text/plain")])
        return [b"not found"]

    return app


class MetricsServer:
    """Serves the WSGI app from a background thread."""

    def __init__(self, app: WSGIApp, host: str = "", port: int = 8080) -> None:
        self._httpd = make_server(
            host,
            port,
            app,
            server_class=ThreadingWSGIServer,
            handler_class=QuietHandler,
        )
        self._thread = threading.Thread(
            target=self._httpd.serve_forever, name="metrics-server", daemon=True
        )

    @property
    def port(self) -> int:
        return self._httpd.server_port

    def start(self) -> None:
        self._thread.start()
        logger.info("Metrics endpoint: http://localhost:%d%s", self.port, METRICS_PATH)

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join()
        logger.info("Metrics endpoint stopped")
