"""Settings of one ``server`` block."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from webserv.location_config import LocationConfig
from webserv.utils import ConfigError

_DECIMAL = re.compile(r"\s*[+-]?\d+")


def _parse_decimal(text: str) -> int | None:
    """Parse a whole decimal integer, or return None if ``text`` is not one."""
    return int(text) if _DECIMAL.fullmatch(text) else None


@dataclass(frozen=True)
class ListenAddress:
    """An interface and port a server listens on."""

    interface: str = ""
    port: int = -1


@dataclass
class ServerConfig:
    """A server block; the ``set_*`` methods apply directive values."""

    listen_addresses: list[ListenAddress] = field(default_factory=list)
    locations: list[LocationConfig] = field(default_factory=list)
    server_names: list[str] = field(default_factory=list)
    root: str = ""
    indexes: list[str] = field(default_factory=list)
    client_max_body: str = ""
    error_pages: dict[int, str] = field(default_factory=dict)

    def set_listen(self, values: list[str]) -> None:
        """Add an ``interface:port`` listen address."""
        if len(values) != 1:
            raise ConfigError("listen takes exactly one value")
        value = values[0]
        interface, sep, port_text = value.partition(":")
        if not sep:
            raise ConfigError("invalid listen format")
        port = _parse_decimal(port_text)
        if port is None or not 1 <= port <= 65535:
            raise ConfigError("invalid port")
        address = ListenAddress(interface, port)
        if address in self.listen_addresses:
            raise ConfigError(f"duplicate listen address: {value}")
        self.listen_addresses.append(address)

    def set_server_name(self, values: list[str]) -> None:
        if self.server_names:
            raise ConfigError("duplicate server_name directive")
        if not values:
            raise ConfigError("server_name requires at least one value")
        self.server_names = list(values)

    def set_root(self, values: list[str]) -> None:
        if self.root:
            raise ConfigError("duplicate root")
        if len(values) != 1:
            raise ConfigError("root takes exactly one value")
        root = values[0]
        self.root = root[:-1] if root.endswith("/") else root

    def set_indexes(self, values: list[str]) -> None:
        if self.indexes:
            raise ConfigError("duplicate index directive")
        if not values:
            raise ConfigError("index requires at least one value")
        self.indexes = list(values)

    def set_client_max_body(self, values: list[str]) -> None:
        if self.client_max_body:
            raise ConfigError("duplicate client_max_body_size")
        if len(values) != 1:
            raise ConfigError("client_max_body_size takes exactly one value")
        self.client_max_body = values[0]

    def set_error_page(self, values: list[str]) -> None:
        """Map every given status code to the page path given last."""
        if len(values) < 2:
            raise ConfigError("error_page requires at least error code and page path")
        *codes, page = values
        for code_text in codes:
            code = _parse_decimal(code_text)
            if code is None:
                raise ConfigError(f"invalid error code: {code_text}")
            if not 100 <= code <= 599:
                raise ConfigError(f"error code must be between 100 and 599: {code_text}")
            self.error_pages[code] = page

    def add_location(self, location: LocationConfig) -> None:
        """Append a location, giving it this server's root and indexes if it has none."""
        self.locations.append(location)
        if not location.root:
            location.root = self.root
        if not location.indexes and self.indexes:
            location.indexes = list(self.indexes)

    def port(self, index: int = 0) -> int:
        """Port of the listen address at ``index``, or -1."""
        if 0 <= index < len(self.listen_addresses):
            return self.listen_addresses[index].port
        return -1

    def interface(self, index: int = 0) -> str:
        """Interface of the listen address at ``index``, or an empty string."""
        if 0 <= index < len(self.listen_addresses):
            return self.listen_addresses[index].interface
        return ""

    def has_port(self, port: int) -> bool:
        return any(address.port == port for address in self.listen_addresses)

    def server_name(self, index: int = 0) -> str:
        """Server name at ``index``, or an empty string."""
        if 0 <= index < len(self.server_names):
            return self.server_names[index]
        return ""

    def has_server_name(self, name: str) -> bool:
        return name in self.server_names

    def error_page(self, code: int) -> str:
        """Page path configured for ``code``, or an empty string."""
        return self.error_pages.get(code, "")

    def has_error_page(self, code: int) -> bool:
        return code in self.error_pages