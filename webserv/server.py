"""A listening socket bound to one of a server block's listen addresses."""

from __future__ import annotations

import socket

from webserv.server_config import ServerConfig
from webserv.utils import log_error, log_info

_BACKLOG = 10


class Server:
    """Listens on the listen address ``listen_index`` of a server configuration."""

    def __init__(self, config: ServerConfig, listen_index: int = 0) -> None:
        self.config = config
        self.listen_index = listen_index
        self.running = False
        self._sock: socket.socket | None = None

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def port(self) -> int:
        """Configured port of this listen address, or -1."""
        return self.config.port(self.listen_index)

    @property
    def interface(self) -> str:
        """Configured interface of this listen address."""
        return self.config.interface(self.listen_index)

    @property
    def address(self) -> tuple[str, int] | None:
        """Address the socket is actually bound to, or None when not started."""
        if self._sock is None:
            return None
        host, port = self._sock.getsockname()[:2]
        return host, port

    def init(self) -> None:
        """Create, bind and listen on a non-blocking socket; raises OSError."""
        self.stop()
        interface = self.interface
        port = self.port
        host = "127.0.0.1" if interface == "localhost" else (interface or None)
        sock: socket.socket | None = None
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            infos = socket.getaddrinfo(
                host, str(port), socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
            )
            sock.bind(infos[0][4])
            log_info(f"Socket bound to {interface}:{port}")
            sock.listen(_BACKLOG)
            log_info("Server is listening on socket")
            sock.setblocking(False)
        except OSError as exc:
            if sock is not None:
                sock.close()
            log_error(f"Server initialization failed on {interface}:{port}: {exc}")
            raise
        self._sock = sock
        self.running = True
        log_info(f"Server initialized on port {port}")

    def stop(self) -> None:
        """Close the listening socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        self.running = False

    def accept_connection(self) -> socket.socket:
        """Accept one pending connection as a non-blocking socket; raises OSError."""
        if not self.running or self._sock is None:
            raise OSError("Cannot accept connection: server not running")
        conn, _ = self._sock.accept()
        try:
            conn.setblocking(False)
        except OSError:
            conn.close()
            raise
        return conn

    def fileno(self) -> int:
        return self._sock.fileno() if self._sock is not None else -1