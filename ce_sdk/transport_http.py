"""HTTP transport bindings: stdlib client, emitter, receiver and server."""

from __future__ import annotations

import enum
import json
import logging
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Mapping

from .constants import DEFAULT_LIMITS
from .emitters import HTTPMessage, emit_binary, emit_structured
from .event import CloudEvent
from .schema import EnvelopeError
from .unmarshaller import Unmarshaller

logger = logging.getLogger(__name__)


class Protocol(str, enum.Enum):
    """Content mode used when sending an event over HTTP."""

    HTTP_BINARY = "http-binary"
    HTTP_STRUCTURED = "http-structured"


@dataclass(frozen=True, slots=True)
class TransportOptions:
    url: str | None = None
    protocol: Protocol = Protocol.HTTP_BINARY
    timeout: float = 10.0
    method: str = "POST"
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    status: int
    headers: dict[str, str]
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8")) if self.body else None


HTTPTransport = Callable[..., TransportResponse]
EventHandler = Callable[[CloudEvent], Any]


def send_http(
    url: str,
    body: bytes,
    headers: Mapping[str, str],
    *,
    method: str = "POST",
    timeout: float = 10.0,
) -> TransportResponse:
    """Issue one HTTP request.

    Error statuses come back as a response; network failures (refused
    connections, timeouts, resets) propagate to the caller.
    """
    request = urllib.request.Request(url, data=body, headers=dict(headers), method=method)
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return TransportResponse(
                status=response.status,
                headers={key.lower(): value for key, value in response.headers.items()},
                body=response.read(),
            )
    except urllib.error.HTTPError as exc:
        return TransportResponse(
            status=exc.code,
            headers={key.lower(): value for key, value in exc.headers.items()} if exc.headers else {},
            body=exc.read(),
        )


class HTTPEmitter:
    """Send events to a remote endpoint, binary mode unless structured is requested."""

    def __init__(self, url: str | None = None, *, transport: HTTPTransport | None = None) -> None:
        self.url = url
        self.transport = transport or send_http

    def send(self, event: CloudEvent, options: TransportOptions | None = None) -> TransportResponse:
        opts = options or TransportOptions()
        url = opts.url or self.url
        if not url:
            raise ValueError("no target url: pass TransportOptions.url or construct the emitter with one")

        message = self.build_message(event, opts)
        headers = dict(opts.headers)
        headers.update(message.headers)
        logger.debug("sending event id=%s to %s (%s)", event.id, url, Protocol(opts.protocol).value)
        return self.transport(url, message.body, headers, method=opts.method, timeout=opts.timeout)

    @staticmethod
    def build_message(event: CloudEvent, options: TransportOptions | None = None) -> HTTPMessage:
        protocol = Protocol((options or TransportOptions()).protocol)
        if protocol is Protocol.HTTP_STRUCTURED:
            return emit_structured(event)
        return emit_binary(event)


class HTTPReceiver:
    """Accept an inbound HTTP request (headers + body) as an event."""

    def __init__(self, unmarshaller: Unmarshaller | None = None) -> None:
        self.unmarshaller = unmarshaller or Unmarshaller()

    def accept(self, headers: Mapping[str, Any], body: Any) -> CloudEvent:
        return self.unmarshaller.unmarshall(body, headers)


class CloudEventHTTPServer:
    """Threaded stdlib HTTP server handing every POSTed event to ``handler``."""

    def __init__(
        self,
        host: str,
        port: int,
        handler: EventHandler,
        *,
        path: str = "/",
        receiver: HTTPReceiver | None = None,
        max_bytes: int = DEFAULT_LIMITS["max_bytes"],
    ) -> None:
        self.host = host
        self.port = port
        self.handler = handler
        self.path = path
        self.receiver = receiver or HTTPReceiver()
        self.max_bytes = max_bytes
        self._server = self._build_server()

    @property
    def server_address(self) -> tuple[str, int]:
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    def _build_server(self) -> ThreadingHTTPServer:
        handler_fn = self.handler
        receiver = self.receiver
        expected_path = self.path
        max_bytes = self.max_bytes

        class RequestHandler(BaseHTTPRequestHandler):
            _READ_TIMEOUT_S = 15.0

            def do_POST(self) -> None:  # noqa: N802
                if self.path.split("?", 1)[0] != expected_path:
                    self._send_json(404, {"message": "not found", "errors": [self.path]})
                    return

                try:
                    length = int(self.headers.get("Content-Length", "0"))
                except ValueError:
                    self._send_json(400, {"message": "invalid Content-Length", "errors": []})
                    return
                if length < 0:
                    self._send_json(400, {"message": "negative Content-Length", "errors": []})
                    return
                if length > max_bytes:
                    self._send_json(413, {"message": f"content-length exceeds max_bytes ({max_bytes})", "errors": []})
                    return

                try:
                    self.connection.settimeout(self._READ_TIMEOUT_S)
                    body = self.rfile.read(length)
                except (TimeoutError, socket.timeout):
                    self._send_json(400, {"message": "request read timeout", "errors": []})
                    return

                try:
                    event = receiver.accept(dict(self.headers.items()), body)
                except EnvelopeError as exc:
                    logger.warning("rejected inbound event: %s", exc)
                    self._send_json(400, exc.to_dict())
                    return

                try:
                    handler_fn(event)
                except Exception as exc:
                    logger.exception("event handler failed for id=%s", event.id)
                    self._send_json(500, {"message": "handler failed", "errors": [str(exc)]})
                    return

                self.send_response(202)
                self.send_header("Content-Length", "0")
                self.end_headers()

            def _send_json(self, status: int, payload: dict[str, Any]) -> None:
                raw = json.dumps(payload).encode("utf-8")
                try:
                    self.send_response(status)
                    self.send_header("Content-Type", "application/json")
                    self.send_header("Content-Length", str(len(raw)))
                    self.end_headers()
                    self.wfile.write(raw)
                except (BrokenPipeError, ConnectionResetError):
                    return

            def log_message(self, format: str, *args: object) -> None:
                logger.debug("%s - %s", self.address_string(), format % args)

        class ReusableServer(ThreadingHTTPServer):
            allow_reuse_address = True

        return ReusableServer((self.host, self.port), RequestHandler)

    def serve_forever(self) -> None:
        self._server.serve_forever()

    def shutdown(self) -> None:
        self._server.shutdown()
        self._server.server_close()

