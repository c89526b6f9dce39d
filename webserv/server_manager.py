"""Event loop driving every listening server and its clients."""

from __future__ import annotations

import select
from collections.abc import Sequence

from webserv.client import Client
from webserv.http_request import HttpRequest, RequestError
from webserv.http_response import HttpResponse
from webserv.poll_manager import PollManager
from webserv.router import Router
from webserv.server import Server
from webserv.server_config import ServerConfig
from webserv.utils import log_error, log_info

CLIENT_TIMEOUT = 30
_POLL_TIMEOUT_MS = 100


def _bad_request() -> HttpResponse:
    response = HttpResponse()
    response.set_status(400, "Bad Request")
    response.add_header("Content-Type", "text/plain")
    response.add_header("Connection", "close")
    response.set_body("Bad Request")
    return response


class ServerManager:
    """Owns the listening servers, the connected clients and the poll loop."""

    def __init__(self, configs: Sequence[ServerConfig]) -> None:
        self.configs = list(configs)
        self._poll = PollManager()
        self._servers: list[Server] = []
        self._server_fds: dict[int, Server] = {}
        self._clients: dict[int, Client] = {}
        self._client_server: dict[int, Server] = {}
        self._running = False
        self._in_loop = False
        self._active = False

    @property
    def servers(self) -> list[Server]:
        return list(self._servers)

    @property
    def server_count(self) -> int:
        return len(self._servers)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def running(self) -> bool:
        return self._running

    def initialize(self) -> None:
        """Start a server for every listen address; raises RuntimeError if none starts."""
        if not self.configs:
            raise RuntimeError("No server configurations provided")
        for config in self.configs:
            name = config.server_name() or "default"
            for index, address in enumerate(config.listen_addresses):
                server = Server(config, index)
                try:
                    server.init()
                except OSError:
                    log_error(f"Failed to start server on {address.interface}:{address.port}")
                    continue
                fd = server.fileno()
                self._poll.add_fd(fd, select.POLLIN)
                self._servers.append(server)
                self._server_fds[fd] = server
                log_info(
                    f"Server '{name}' listening on {address.interface}:{address.port}"
                )
        if not self._servers:
            raise RuntimeError("Failed to initialize servers")
        log_info("All servers initialized successfully")
        self._active = True
        self._running = True
        log_info("ServerManager initialized")

    def run(self) -> None:
        """Serve until :meth:`shutdown` is called; raises RuntimeError if not initialized."""
        if not self._running:
            raise RuntimeError("Cannot run server manager")
        self._in_loop = True
        try:
            while self._running:
                events = self._poll.poll(_POLL_TIMEOUT_MS)
                self._check_timeouts(CLIENT_TIMEOUT)
                for fd, mask in events:
                    if not self._running:
                        break
                    if mask & select.POLLIN:
                        server = self._server_fds.get(fd)
                        if server is not None:
                            self._accept(server)
                        elif fd in self._clients:
                            self._read(fd)
                    if mask & select.POLLOUT and fd in self._clients:
                        self._write(fd)
        finally:
            self._in_loop = False
            self._close_all()

    def shutdown(self) -> None:
        """Stop serving; the running loop finishes and releases every socket."""
        if not self._running:
            return
        self._running = False
        if not self._in_loop:
            self._close_all()

    def handle_request(self, raw: str | bytes, server: Server) -> str | None:
        """Build the reply to a buffered request, or None while headers are incomplete."""
        marker = "\r\n\r\n" if isinstance(raw, str) else b"\r\n\r\n"
        if marker not in raw:
            log_info("Incomplete HTTP request, waiting for more data")
            return None
        request = HttpRequest()
        try:
            request.parse(raw)
        except RequestError as exc:
            log_error(f"Failed to parse HTTP request: {exc}")
            return _bad_request().serialize()
        log_info(f"Request: {request.uri} on port {server.port}")
        Router(self.configs, request).process_request()
        return HttpResponse().serialize()

    def _accept(self, server: Server) -> None:
        try:
            conn = server.accept_connection()
        except OSError as exc:
            log_error(f"Failed to accept new connection: {exc}")
            return
        fd = conn.fileno()
        self._clients[fd] = Client(conn)
        self._client_server[fd] = server
        self._poll.add_fd(fd, select.POLLIN | select.POLLOUT)
        log_info(f"Connection accepted on port {server.port}")

    def _read(self, fd: int) -> None:
        client = self._clients[fd]
        try:
            received = client.receive_data()
        except OSError:
            received = 0
        if received <= 0:
            self._close_client(fd)
            return
        server = self._client_server.get(fd)
        if server is None:
            return
        response = self.handle_request(client.received, server)
        if response is not None:
            client.queue_response(response)
            client.clear_received()

    def _write(self, fd: int) -> None:
        client = self._clients[fd]
        if not client.pending:
            return
        try:
            client.send_data()
        except OSError:
            self._close_client(fd)
            return
        if not client.pending:
            self._close_client(fd)

    def _check_timeouts(self, timeout: float) -> None:
        expired = [fd for fd, client in self._clients.items() if client.is_timed_out(timeout)]
        for fd in expired:
            log_info("Client timeout, closing connection")
            self._close_client(fd)

    def _close_client(self, fd: int) -> None:
        self._poll.remove_fd(fd)
        self._client_server.pop(fd, None)
        client = self._clients.pop(fd, None)
        if client is not None:
            client.close()

    def _close_all(self) -> None:
        if not self._active:
            return
        self._active = False
        self._running = False
        log_info("Shutting down...")
        for fd in list(self._clients):
            self._close_client(fd)
        self._poll.close()
        for server in self._servers:
            server.stop()
        self._servers.clear()
        self._server_fds.clear()
        log_info("Shutdown complete")