"""Selection of the server and location that answer a request."""

from __future__ import annotations

from collections.abc import Sequence

from webserv.http_request import HttpRequest
from webserv.location_config import LocationConfig
from webserv.server_config import ServerConfig
from webserv.utils import convert_max_body_size, normalize_path, path_starts_with


class Router:
    """Matches a parsed request against the configured servers and locations.

    After :meth:`process_request` the outcome is available in
    ``status_code``, ``server``, ``location``, ``matched_path``,
    ``remaining_path``, ``path_root_uri``, ``is_redirect``,
    ``redirect_url``, ``is_path_found`` and ``error_message``.
    """

    def __init__(self, servers: Sequence[ServerConfig], request: HttpRequest) -> None:
        self.servers = list(servers)
        self.request = request
        self.is_path_found = False
        self.path_root_uri = ""
        self.matched_path = ""
        self.remaining_path = ""
        self.location: LocationConfig | None = None
        self.server: ServerConfig | None = None
        self.redirect_url = ""
        self.is_redirect = False
        self.status_code = 0
        self.error_message = ""

    def process_request(self) -> int:
        """Route the request and return the resulting status code."""
        self.server = self.find_server()
        if self.server is None:
            self.is_path_found = False
            self.status_code = 500
            self.error_message = "No server configured for this port"
            return self.status_code

        self.location = self.best_match_location(self.server.locations)
        if self.location is None:
            self.is_path_found = False
            self.status_code = 404
            self.error_message = "No location matches the requested URI"
            return self.status_code

        location = self.location
        self.is_path_found = True
        self.matched_path = location.path
        if location.redirect:
            self.is_redirect = True
            self.redirect_url = location.redirect
            self.status_code = 301
            return self.status_code

        if self.request.method not in location.allowed_methods:
            self.status_code = 405
            self.error_message = "Method Not Allowed"
            return self.status_code

        if self.request.content_length > 0 and not self.check_body_size(location):
            self.status_code = 413
            self.error_message = "Request Entity Too Large"
            return self.status_code

        self.path_root_uri = self.resolve_filesystem_path()
        uri = self.request.uri
        if len(uri) > len(location.path):
            self.remaining_path = uri[len(location.path):]
        self.status_code = 200
        return self.status_code

    def find_server(self) -> ServerConfig | None:
        """Server listening on the request's port whose name matches its host."""
        port = self.request.port
        host = self.request.host
        for server in self.servers:
            if server.has_port(port) and server.has_server_name(host):
                return server
        return self.default_server(port)

    def default_server(self, port: int) -> ServerConfig | None:
        """First server listening on ``port``, or None."""
        return next((server for server in self.servers if server.has_port(port)), None)

    def best_match_location(
        self, locations: Sequence[LocationConfig]
    ) -> LocationConfig | None:
        """Location with the longest path that prefixes the normalised URI."""
        uri = normalize_path(self.request.uri)
        best: LocationConfig | None = None
        best_length = 0
        for location in locations:
            if path_starts_with(uri, location.path) and len(location.path) > best_length:
                best = location
                best_length = len(location.path)
        return best

    def resolve_filesystem_path(self) -> str:
        """Join the matched location's root with the rest of the URI."""
        if self.location is None:
            raise RuntimeError("no location has been matched")
        root = self.location.root
        location_path = self.location.path
        uri = normalize_path(self.request.uri)
        if location_path == "/":
            return root + uri
        rest = uri[len(location_path):]
        if rest and not rest.startswith("/"):
            rest = "/" + rest
        return root + rest

    def check_body_size(self, location: LocationConfig) -> bool:
        """Tell whether the request body fits the location's size limit."""
        if not location.client_max_body:
            return True
        return self.request.content_length <= convert_max_body_size(location.client_max_body)

    def is_cgi_request(self, path: str, location: LocationConfig) -> bool:
        """Tell whether ``path`` is handled by the location's CGI."""
        if not location.cgi_enabled or not location.cgi_extension:
            return False
        return path.endswith(location.cgi_extension)

    def is_upload_request(self, method: str, location: LocationConfig) -> bool:
        return location.upload_enabled and method == "POST"