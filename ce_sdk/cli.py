"""CLI entrypoint for ce-sdk."""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Any

from .constants import MIME_CE_JSON, MIME_JSON
from .event import CloudEvent
from .schema import EnvelopeError
from .transport_http import CloudEventHTTPServer, HTTPEmitter, Protocol, TransportOptions
from .unmarshaller import Unmarshaller
from .utils import json_dumps_pretty, new_event_id, now_iso_utc
from .versioning import supported_versions

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ce", description="Event envelope HTTP tooling")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Send an event over HTTP")
    send.add_argument("--url", required=True)
    send.add_argument("--type", required=True, help="Event type, e.g. com.example.order.created")
    send.add_argument("--source", required=True, help="Event source URI-reference")
    send.add_argument("--id", help="Event id (default: random UUID)")
    send.add_argument("--spec-version", choices=supported_versions(), default=supported_versions()[-1])
    send.add_argument("--subject")
    send.add_argument("--time", help="RFC 3339 timestamp (default: now)")
    send.add_argument("--datacontenttype", default=MIME_JSON)
    data_group = send.add_mutually_exclusive_group()
    data_group.add_argument("--data-json", help="Inline JSON data")
    data_group.add_argument("--data-file", help="Path to a JSON data file")
    send.add_argument(
        "--extension",
        action="append",
        default=[],
        help="Extension attribute NAME=VALUE (repeatable)",
    )
    send.add_argument(
        "--header",
        action="append",
        default=[],
        help="Extra HTTP header NAME=VALUE (repeatable)",
    )
    send.add_argument("--mode", choices=["binary", "structured"], default="binary")
    send.add_argument("--timeout", type=float, default=10.0, help="HTTP request timeout in seconds")
    send.set_defaults(func=_cmd_send)

    validate_cmd = subparsers.add_parser("validate", help="Validate a structured-mode event file")
    validate_cmd.add_argument("--in-file", required=True, help="JSON document holding the whole envelope")
    validate_cmd.set_defaults(func=_cmd_validate)

    serve = subparsers.add_parser("serve", help="Receive events over HTTP and print them")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    serve.add_argument("--path", default="/")
    serve.set_defaults(func=_cmd_serve)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    return args.func(args)


def _cmd_send(args: argparse.Namespace) -> int:
    try:
        extensions = _parse_pairs(args.extension, "--extension")
        extra_headers = _parse_pairs(args.header, "--header")
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    event = CloudEvent(
        specversion=args.spec_version,
        id=args.id or new_event_id(),
        source=args.source,
        type=args.type,
        time=args.time or now_iso_utc(),
        datacontenttype=args.datacontenttype,
    )
    if args.subject:
        event.subject = args.subject
    try:
        data = _load_data(args.data_file, args.data_json)
    except (OSError, ValueError) as exc:
        print(f"cannot load event data: {exc}", file=sys.stderr)
        return 2
    if data is not None:
        event.data = data

    try:
        for name, value in extensions.items():
            event.add_extension(name, value)
        event.format()
    except EnvelopeError as exc:
        print(json_dumps_pretty(exc.to_dict()), file=sys.stderr)
        return 1

    protocol = Protocol.HTTP_STRUCTURED if args.mode == "structured" else Protocol.HTTP_BINARY
    options = TransportOptions(url=args.url, protocol=protocol, timeout=args.timeout, headers=extra_headers)
    response = HTTPEmitter().send(event, options)
    print(json_dumps_pretty({"id": event.id, "status": response.status, "body": response.body.decode("utf-8", "replace")}))
    return 0 if response.ok else 1


def _cmd_validate(args: argparse.Namespace) -> int:
    raw = pathlib.Path(args.in_file).read_bytes()
    try:
        event = Unmarshaller().unmarshall(raw, {"content-type": MIME_CE_JSON})
    except EnvelopeError as exc:
        print(json_dumps_pretty(exc.to_dict()), file=sys.stderr)
        return 1
    print(f"valid ({event.specversion})")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    def _print_event(event: CloudEvent) -> None:
        print(json.dumps(event.format(), ensure_ascii=False, sort_keys=True), flush=True)

    server = CloudEventHTTPServer(args.host, args.port, _print_event, path=args.path)
    host, port = server.server_address
    logger.info("listening on http://%s:%s%s", host, port, args.path)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("shutting down")
    finally:
        server.shutdown()
    return 0


def _load_data(data_file: str | None, data_json: str | None) -> Any:
    if data_file:
        text = pathlib.Path(data_file).read_text(encoding="utf-8")
    elif data_json:
        text = data_json
    else:
        return None
    value = json.loads(text)
    # A JSON string is stored as its JSON text, as JSON-typed events expect.
    return text.strip() if isinstance(value, str) else value


def _parse_pairs(items: list[str], flag: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"{flag} expects NAME=VALUE, got {item!r}")
        pairs[name.strip()] = value
    return pairs


if __name__ == "__main__":
    raise SystemExit(main())
