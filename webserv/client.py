"""A connected client with its receive and send buffers."""

from __future__ import annotations

import socket
import time

_CHUNK_SIZE = 1024


class Client:
    """Wraps a non-blocking client socket and buffers traffic both ways."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock: socket.socket | None = sock
        self._received = bytearray()
        self._pending = bytearray()
        self.last_activity = time.monotonic()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def received(self) -> bytes:
        """Everything received and not yet cleared."""
        return bytes(self._received)

    @property
    def pending(self) -> bytes:
        """Queued response bytes that have not been sent yet."""
        return bytes(self._pending)

    def receive_data(self) -> int:
        """Read all currently available data; return the byte count.

        Zero means nothing was read: the peer closed or no data was ready.
        """
        if self.sock is None:
            return 0
        total = 0
        while True:
            try:
                chunk = self.sock.recv(_CHUNK_SIZE)
            except BlockingIOError:
                break
            except OSError:
                if total:
                    break
                raise
            if not chunk:
                break
            self._received += chunk
            total += len(chunk)
        if total:
            self.last_activity = time.monotonic()
        return total

    def send_data(self) -> int:
        """Send as much of the queued response as the socket takes."""
        if not self._pending or self.sock is None:
            return 0
        sent = self.sock.send(self._pending)
        if sent > 0:
            del self._pending[:sent]
            self.last_activity = time.monotonic()
        return sent

    def queue_response(self, data: str | bytes) -> None:
        """Replace the queued response with ``data``."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._pending = bytearray(data)

    def clear_received(self) -> None:
        self._received.clear()

    def is_timed_out(self, timeout: float) -> bool:
        """Tell whether more than ``timeout`` seconds passed since the last activity."""
        return time.monotonic() - self.last_activity > timeout

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def fileno(self) -> int:
        return self.sock.fileno() if self.sock is not None else -1