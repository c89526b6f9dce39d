"""Parser for the server configuration language."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

from webserv.location_config import LocationConfig
from webserv.server_config import ServerConfig
from webserv.utils import (
    ConfigError,
    config_text_to_lines,
    parse_key_value,
    read_config_lines,
    trim_spaces_comments,
)

_SERVER_DIRECTIVES: dict[str, Callable[[ServerConfig, list[str]], None]] = {
    "listen": ServerConfig.set_listen,
    "server_name": ServerConfig.set_server_name,
    "root": ServerConfig.set_root,
    "index": ServerConfig.set_indexes,
    "client_max_body_size": ServerConfig.set_client_max_body,
    "error_page": ServerConfig.set_error_page,
}

_LOCATION_DIRECTIVES: dict[str, Callable[[LocationConfig, list[str]], None]] = {
    "root": LocationConfig.set_root,
    "autoindex": LocationConfig.set_autoindex,
    "index": LocationConfig.set_indexes,
    "client_max_body_size": LocationConfig.set_client_max_body,
    "methods": LocationConfig.set_allowed_methods,
    "return": LocationConfig.set_redirect,
    "cgi_path": LocationConfig.set_cgi_path,
    "cgi_extension": LocationConfig.set_cgi_extension,
    "upload_path": LocationConfig.set_upload_path,
}


class ConfigParser:
    """Turns tokenised configuration statements into server configurations."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        self.servers: list[ServerConfig] = []
        self.http_client_max_body = ""
        self._cursor: Iterator[str] = iter(())

    @classmethod
    def from_file(cls, path: str | Path) -> ConfigParser:
        return cls(read_config_lines(path))

    @classmethod
    def from_text(cls, text: str) -> ConfigParser:
        return cls(config_text_to_lines(text))

    def parse(self) -> list[ServerConfig]:
        """Parse all statements and return the servers; raises ConfigError."""
        self.servers = []
        self.http_client_max_body = ""
        self._cursor = iter(self.lines)
        http_seen = False
        for line in self._cursor:
            if line == "http {":
                if http_seen:
                    raise ConfigError("only one http block allowed")
                http_seen = True
                self._parse_http()
            elif line == "server {":
                self._parse_server()
            else:
                raise ConfigError(f"Invalid directive: {line}")
        self._validate()
        return self.servers

    def _parse_http(self) -> None:
        closed = False
        for line in self._cursor:
            text = trim_spaces_comments(line)
            if not text:
                continue
            if text == "}":
                closed = True
                break
            if text == "server {":
                self._parse_server()
                continue
            try:
                key, values = parse_key_value(text)
            except ValueError:
                raise ConfigError(f"invalid http directive: {text}") from None
            if key != "client_max_body_size":
                raise ConfigError(f"Unknown http directive: {key}")
            if self.http_client_max_body:
                raise ConfigError("duplicate client_max_body_size")
            self.http_client_max_body = values[0]
        if not self.servers:
            raise ConfigError("No server defined")
        if not closed:
            raise ConfigError("Unexpected end of file, missing '}' in http block")

    def _parse_server(self) -> None:
        server = ServerConfig()
        closed = False
        for line in self._cursor:
            text = trim_spaces_comments(line)
            if not text:
                continue
            if text == "}":
                closed = True
                break
            if text.startswith("location "):
                self._parse_location(server, text)
            else:
                self._apply_server_directive(server, text)
        required = (
            (server.listen_addresses, "listen directive"),
            (server.root, "root directive"),
            (server.indexes, "index directive"),
            (server.client_max_body, "client_max_body_size directive"),
            (server.error_pages, "error_page directive"),
        )
        for value, what in required:
            if not value:
                raise ConfigError(f"server missing {what}")
        if not server.locations:
            raise ConfigError("at least one location is required")
        self.servers.append(server)
        if not closed:
            raise ConfigError("Unexpected end of file, missing '}' in server block")

    @staticmethod
    def _apply_server_directive(server: ServerConfig, text: str) -> None:
        try:
            key, values = parse_key_value(text)
        except ValueError:
            raise ConfigError(f"invalid server directive: {text}") from None
        setter = _SERVER_DIRECTIVES.get(key)
        if setter is None:
            raise ConfigError(f"Unknown server directive: {key}")
        setter(server, values)

    def _parse_location(self, server: ServerConfig, header: str) -> None:
        try:
            _, values = parse_key_value(header)
        except ValueError:
            raise ConfigError("invalid location syntax") from None
        if len(values) != 2 or values[1] != "{":
            raise ConfigError("Invalid location syntax")
        path = values[0]
        if not path.startswith("/"):
            raise ConfigError("Location path required")
        if any(existing.path == path for existing in server.locations):
            raise ConfigError(f"duplicate location path: {path}")

        location = LocationConfig(path=path)
        closed = False
        for line in self._cursor:
            if line == "}":
                closed = True
                break
            self._apply_location_directive(location, line)
        server.add_location(location)
        if not closed:
            raise ConfigError("Unexpected end of file, missing '}' in location block")

    @staticmethod
    def _apply_location_directive(location: LocationConfig, text: str) -> None:
        try:
            key, values = parse_key_value(text)
        except ValueError:
            raise ConfigError(f"invalid location directive: {text}") from None
        setter = _LOCATION_DIRECTIVES.get(key)
        if setter is None:
            raise ConfigError(f"Unknown location directive: {key}")
        setter(location, values)

    def _validate(self) -> None:
        if not self.servers:
            raise ConfigError("No server defined")
        for server in self.servers:
            for location in server.locations:
                if not location.root:
                    location.root = server.root
                if not location.allowed_methods:
                    location.add_allowed_method("GET")
                if not location.client_max_body:
                    location.client_max_body = server.client_max_body
                if not location.indexes:
                    location.indexes = list(server.indexes)


def parse_config(path: str | Path) -> ConfigParser:
    """Read and parse a configuration file; raises ConfigError."""
    parser = ConfigParser.from_file(path)
    parser.parse()
    return parser