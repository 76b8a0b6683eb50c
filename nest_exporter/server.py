# nest_exporter - Metrics HTTP Server
# -*- coding: utf-8 -*-
"""
 Metrics HTTP Server

    GET /metrics  -> Prometheus text exposition of the current snapshot
    GET /         -> 302 redirect to /metrics

 The server holds the NestMetrics instance it serves (server.metrics);
 each request is handled in its own thread.
"""
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from socketserver import ThreadingMixIn
from typing import Tuple
from urllib.parse import urlparse

from nest_exporter.exceptions import NestExporterConfigError

log = logging.getLogger(__name__)

METRICS_PATH = "/metrics"


def parse_listen_address(address: str) -> Tuple[str, int]:
    """
    Split a listen address into (host, port).

        ":9264"          -> ("", 9264)   all interfaces
        "127.0.0.1:8000" -> ("127.0.0.1", 8000)
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise NestExporterConfigError(f"Invalid listen address {address!r} - expected [host]:port")
    try:
        port_num = int(port)
    except ValueError:
        raise NestExporterConfigError(f"Invalid port in listen address {address!r}") from None
    if not 0 <= port_num <= 65535:
        raise NestExporterConfigError(f"Invalid port in listen address {address!r}")
    return host.strip("[]"), port_num


class ExporterHTTPServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True

    def __init__(self, server_address, metrics, handler_class=None):
        self.metrics = metrics
        super().__init__(server_address, handler_class or Handler)


# noinspection PyPep8Naming
class Handler(BaseHTTPRequestHandler):
    def log_message(self, log_format, *args):
        log.debug("%s %s" % (self.address_string(), log_format % args))

    def address_string(self):
        # replace function to avoid lookup delays
        hostaddr, hostport = self.client_address[:2]
        return hostaddr

    def do_GET(self):
        path = urlparse(self.path).path
        if path == METRICS_PATH:
            body, contenttype = self.server.metrics.render()
            self.send_response(HTTPStatus.OK)
            self.send_header('Content-type', contenttype)
            self.send_header('Content-Length', str(len(body)))
        elif path == "/":
            body = b""
            self.send_response(HTTPStatus.FOUND)
            self.send_header('Location', METRICS_PATH)
            self.send_header('Content-Length', "0")
        else:
            body = b"Not Found"
            self.send_response(HTTPStatus.NOT_FOUND)
            self.send_header('Content-type', 'text/plain; charset=utf-8')
            self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        try:
            self.wfile.write(body)
        except Exception as exc:
            log.debug(f"Socket broken sending response to client [doGET]: {exc}")


def serve(address: str, metrics):
    """Serve metrics on address (e.g. ":9264") until interrupted"""
    host, port = parse_listen_address(address)
    try:
        server = ExporterHTTPServer((host, port), metrics)
    except OSError as exc:
        raise NestExporterConfigError(f"Unable to listen on {address}: {exc}") from exc
    with server:
        log.info(f"Listening on {address}")
        try:
            server.serve_forever()
        except (KeyboardInterrupt, SystemExit):
            log.info("Shutting down metrics server")
