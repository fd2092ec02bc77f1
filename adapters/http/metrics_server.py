from __future__ import annotations

import html
from typing import Callable, Iterable, Tuple
from wsgiref.simple_server import WSGIRequestHandler, make_server

import structlog
from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer

from config.settings import VERSION

logger = structlog.get_logger(__name__)

_LANDING_PAGE = """<html>
<head><title>Mailgun Exporter</title></head>
<body>
<h1>Mailgun Exporter</h1>
<p>Prometheus Mailgun Exporter {version}</p>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    ":9616" -> ("0.0.0.0", 9616), "127.0.0.1:9616" -> ("127.0.0.1", 9616).
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"invalid listen address {address!r}, expected [host]:port")
    return host.strip("[]") or "0.0.0.0", int(port)


def make_app(registry: CollectorRegistry, metrics_path: str) -> Callable:
    """App WSGI que serve `metrics_path` e uma página inicial em `/`."""
    metrics_app = make_wsgi_app(registry)
    landing = _LANDING_PAGE.format(
        version=html.escape(VERSION), path=html.escape(metrics_path, quote=True)
    ).encode("utf-8")

    def app(environ, start_response) -> Iterable[bytes]:
        path = environ.get("PATH_INFO") or "/"
        if path == metrics_path:
            return metrics_app(environ, start_response)
        if path == "/" and metrics_path not in ("/", ""):
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [landing]
        start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
        return [b"Not Found\n"]

    return app


class _SilentHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        logger.debug("http.request", client=self.client_address[0], line=format % args)


class MetricsServer:
    def __init__(self, listen_address: str, metrics_path: str, registry: CollectorRegistry) -> None:
        self.host, self.port = parse_listen_address(listen_address)
        self.metrics_path = metrics_path
        self.registry = registry

    def serve_forever(self) -> None:
        # OSError no bind sobe para quem chamou
        httpd = make_server(
            self.host,
            self.port,
            make_app(self.registry, self.metrics_path),
            server_class=ThreadingWSGIServer,
            handler_class=_SilentHandler,
        )
        logger.info(
            "http.server.start", host=self.host, port=self.port, metrics_path=self.metrics_path
        )
        try:
            httpd.serve_forever()
        finally:
            httpd.server_close()
