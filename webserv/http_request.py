"""Parsing of raw HTTP/1.x requests."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from webserv.utils import (
    HTTP_BAD_REQUEST,
    HTTP_LENGTH_REQUIRED,
    HTTP_NOT_IMPLEMENTED,
    HTTP_URI_TOO_LONG,
    HTTP_VERSION_NOT_SUPPORTED,
    MAX_URI_LENGTH,
    check_allowed_method,
    parse_key_value,
    split_by_char,
    split_by_string,
    to_lower_words,
    to_upper_words,
    trim_spaces,
    trim_spaces_comments,
)

_SUPPORTED_VERSIONS = ("HTTP/1.1", "HTTP/1.0")
_BODY_METHODS = ("POST", "PUT", "PATCH")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_MAX_CONTENT_LENGTH = 2**64 - 1


class RequestError(ValueError):
    """Raised when a request cannot be parsed; ``code`` is the HTTP status to answer with."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class HttpRequest:
    """A parsed HTTP request: request line, headers, cookies and body."""

    method: str = ""
    uri: str = ""
    http_version: str = ""
    query_string: str = ""
    fragment: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    content_type: str = ""
    content_length: int = 0
    host: str = ""
    port: int = 80
    cookies: dict[str, str] = field(default_factory=dict)
    error_code: int = 0

    def parse(self, raw: str | bytes) -> HttpRequest:
        """Parse a complete raw request; raises RequestError and records its code."""
        if isinstance(raw, bytes):
            raw = raw.decode("latin-1")
        self.__init__()  # start from a clean state
        try:
            header_section, sep, body_section = raw.partition("\r\n\r\n")
            if not sep:
                raise RequestError(HTTP_BAD_REQUEST, "Missing end of headers")
            self._parse_headers(header_section)
            self._parse_body(body_section)
        except RequestError as exc:
            self.error_code = exc.code
            raise
        return self

    def _parse_headers(self, header_section: str) -> None:
        request_line, sep, rest = header_section.partition("\r\n")
        if not sep:
            raise RequestError(HTTP_BAD_REQUEST, "Failed to find end of request line")
        try:
            method, values = parse_key_value(request_line)
        except ValueError:
            raise RequestError(HTTP_BAD_REQUEST, "Failed to parse request line") from None
        if len(values) != 2:
            raise RequestError(HTTP_BAD_REQUEST, "Invalid request line format")
        uri, version = values
        if not method or not uri or not version:
            raise RequestError(HTTP_BAD_REQUEST, "Empty method, URI, or HTTP version")
        if version not in _SUPPORTED_VERSIONS:
            raise RequestError(HTTP_VERSION_NOT_SUPPORTED, "Unsupported HTTP version")
        if len(uri) > MAX_URI_LENGTH:
            raise RequestError(HTTP_URI_TOO_LONG, "URI too long")
        method = to_upper_words(method)
        if not check_allowed_method(method):
            raise RequestError(HTTP_NOT_IMPLEMENTED, "Method not implemented")

        self.method = method
        self.http_version = version
        parts = split_by_char(uri, "#")
        if parts:
            uri, self.fragment = parts
        parts = split_by_char(uri, "?")
        if parts:
            uri, self.query_string = parts
        self.uri = uri

        for line in rest.split("\r\n"):
            if not line:
                break
            parts = split_by_char(line, ":")
            if parts is None:
                raise RequestError(HTTP_BAD_REQUEST, "Failed to parse header line")
            key = to_lower_words(trim_spaces(parts[0]))
            value = trim_spaces(parts[1])
            existing = self.headers.get(key, "")
            self.headers[key] = f"{existing},{value}" if existing else value

        if self.http_version == "HTTP/1.1" and not self.headers.get("host"):
            raise RequestError(HTTP_BAD_REQUEST, "Missing or invalid Host header")
        if "cookie" in self.headers:
            self._parse_cookies(self.headers["cookie"])
        if self.headers.get("content-type"):
            self.content_type = self.headers["content-type"]
        self.content_length = self._validated_content_length()

        host_header = self.headers.get("host", "")
        parts = split_by_char(host_header, ":")
        if parts is None:
            self.host = host_header
        else:
            self.host, port_text = parts
            self.port = _leading_int(port_text)

    def _validated_content_length(self) -> int:
        value = self.headers.get("content-length", "")
        if not value:
            return 0
        if not all("0" <= ch <= "9" for ch in value):
            raise RequestError(HTTP_BAD_REQUEST, "Invalid Content-Length header")
        length = int(value)
        if length > _MAX_CONTENT_LENGTH:
            raise RequestError(HTTP_BAD_REQUEST, "Invalid Content-Length header")
        return length

    def _parse_body(self, body_section: str) -> None:
        self.body = body_section
        if self.headers.get("content-length"):
            if len(self.body) != self.content_length:
                raise RequestError(
                    HTTP_BAD_REQUEST, "Body length does not match Content-Length"
                )
        elif self.body:
            if self.method in _BODY_METHODS:
                raise RequestError(
                    HTTP_LENGTH_REQUIRED, "Content-Length required for request with body"
                )
            raise RequestError(HTTP_BAD_REQUEST, "Body present without Content-Length header")

    def _parse_cookies(self, cookie_header: str) -> None:
        for pair in split_by_string(cookie_header, ";"):
            parts = split_by_char(trim_spaces_comments(pair), "=")
            if parts:
                key, value = parts
                self.cookies[to_lower_words(trim_spaces_comments(key))] = (
                    trim_spaces_comments(value)
                )

    def header(self, key: str) -> str:
        """Value of a header, looked up case-insensitively, or an empty string."""
        return self.headers.get(to_lower_words(key), "")

    def cookie(self, key: str) -> str:
        """Value of a cookie, looked up case-insensitively, or an empty string."""
        return self.cookies.get(to_lower_words(key), "")

    def is_complete(self) -> bool:
        return bool(self.method and self.uri and self.http_version)

    def has_body(self) -> bool:
        return bool(self.body)