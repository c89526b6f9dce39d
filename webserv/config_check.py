"""Command that parses a configuration file and prints what it holds."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence

from webserv.config_parser import ConfigParser, parse_config
from webserv.location_config import LocationConfig
from webserv.server_config import ServerConfig
from webserv.utils import ConfigError

_RULE = "-" * 40 + "\n"


def _describe_location(location: LocationConfig, resolved_body: str) -> Iterator[str]:
    yield f"  Location: {location.path}\n"
    yield f"    root       : {location.root}\n"
    yield f"    autoindex  : {'on' if location.autoindex else 'off'}\n"
    for method in location.allowed_methods:
        yield f"    method     : {method}\n"
    if location.client_max_body:
        yield f"    client_max : {location.client_max_body} (location)\n"
    else:
        yield f"    client_max : {resolved_body} (fallback)\n"


def _describe_server(server: ServerConfig, http_body: str) -> Iterator[str]:
    yield _RULE
    yield "Server\n"
    yield f"  listen       : {server.port()}\n"
    yield f"  server_name  : {server.server_name()}\n"
    yield f"  root         : {server.root}\n"
    if server.client_max_body:
        yield f"  client_max   : {server.client_max_body} (server)\n"
    else:
        yield f"  client_max   : {http_body} (http fallback)\n"
    for location in server.locations:
        resolved = location.client_max_body or server.client_max_body or http_body
        yield from _describe_location(location, resolved)


def describe_config(parser: ConfigParser) -> str:
    """Render a report of a parsed configuration; raises ConfigError without servers."""
    if not parser.servers:
        raise ConfigError("No server block found")
    parts = [_RULE, "HTTP\n", f"  client_max_body_size : {parser.http_client_max_body}\n"]
    for server in parser.servers:
        parts.extend(_describe_server(server, parser.http_client_max_body))
    parts.extend([_RULE, "✅ CONFIG OK\n"])
    return "".join(parts)


def main(argv: Sequence[str] | None = None) -> int:
    """Check the configuration file named by the single argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: webserv-config <config_file>", file=sys.stderr)
        return 1
    try:
        report = describe_config(parse_config(args[0]))
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())