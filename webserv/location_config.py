"""Settings of one ``location`` block."""

from __future__ import annotations

from dataclasses import dataclass, field

from webserv.utils import ConfigError, check_allowed_method, to_upper_words

_REDIRECT_CODES = frozenset({"301", "302", "303", "307", "308"})


def _single(name: str, values: list[str]) -> str:
    if len(values) != 1:
        raise ConfigError(f"{name} takes exactly one value")
    return values[0]


@dataclass
class LocationConfig:
    """A location block; the ``set_*`` methods apply directive values."""

    path: str = ""
    root: str = ""
    autoindex: bool = False
    indexes: list[str] = field(default_factory=list)
    upload_enabled: bool = False
    upload_path: str = ""
    cgi_enabled: bool = False
    cgi_path: str = ""
    cgi_extension: str = ""
    redirect: str = ""
    client_max_body: str = ""
    allowed_methods: list[str] = field(default_factory=list)

    def set_root(self, values: list[str]) -> None:
        if self.root:
            raise ConfigError("duplicate root")
        root = _single("root", values)
        self.root = root[:-1] if root.endswith("/") else root

    def set_autoindex(self, values: list[str]) -> None:
        if self.autoindex:
            raise ConfigError("duplicate autoindex")
        value = _single("autoindex", values)
        if value not in ("on", "off"):
            raise ConfigError("invalid autoindex value")
        self.autoindex = value == "on"

    def set_indexes(self, values: list[str]) -> None:
        if self.indexes:
            raise ConfigError("duplicate index")
        if not values:
            raise ConfigError("index takes at least one value")
        self.indexes = list(values)

    def set_upload_path(self, values: list[str]) -> None:
        if self.upload_path:
            raise ConfigError("duplicate upload_path")
        value = _single("upload_path", values)
        if not value.startswith("/"):
            raise ConfigError("upload_path must be an absolute path")
        self.upload_path = value

    def set_cgi_path(self, values: list[str]) -> None:
        if self.cgi_path:
            raise ConfigError("duplicate cgi_path")
        value = _single("cgi_path", values)
        if not value.startswith("/"):
            raise ConfigError("cgi_path must be an absolute path")
        self.cgi_path = value

    def set_cgi_extension(self, values: list[str]) -> None:
        if self.cgi_extension:
            raise ConfigError("duplicate cgi_extension")
        value = _single("cgi_extension", values)
        if not value.startswith("."):
            raise ConfigError("cgi_extension must start with '.'")
        self.cgi_extension = value

    def set_redirect(self, values: list[str]) -> None:
        """Store ``return [code] url`` as "code url"; the code defaults to 301."""
        if self.redirect:
            raise ConfigError("duplicate return")
        if not values or len(values) > 2:
            raise ConfigError("return takes 1 or 2 values: [status_code] url")
        if len(values) == 2:
            code, url = values
            if code not in _REDIRECT_CODES:
                raise ConfigError(f"invalid redirect status code: {code}")
        else:
            code, url = "301", values[0]
        if not url.startswith("/"):
            raise ConfigError("redirect url must start with /")
        self.redirect = f"{code} {url}"

    def set_client_max_body(self, values: list[str]) -> None:
        if self.client_max_body:
            raise ConfigError("duplicate client_max_body_size")
        self.client_max_body = _single("client_max_body_size", values)

    def set_allowed_methods(self, values: list[str]) -> None:
        for value in values:
            method = to_upper_words(value)
            if not check_allowed_method(method):
                raise ConfigError(f"invalid method: {method}")
            if method in self.allowed_methods:
                raise ConfigError(f"duplicate method: {method}")
            self.allowed_methods.append(method)

    def add_allowed_method(self, method: str) -> None:
        self.allowed_methods.append(method)