"""Registry of file descriptors watched with ``poll``."""

from __future__ import annotations

import select


class PollManager:
    """Keeps a set of file descriptors and the events each is watched for."""

    def __init__(self) -> None:
        self._events: dict[int, int] = {}
        self._poller = select.poll()

    def add_fd(self, fd: int, events: int) -> None:
        """Watch ``fd`` for ``events``; an already watched fd gets the new mask."""
        if fd < 0:
            return
        if fd in self._events:
            self._poller.modify(fd, events)
        else:
            self._poller.register(fd, events)
        self._events[fd] = events

    def remove_fd(self, fd: int) -> None:
        """Stop watching ``fd``; unknown descriptors are ignored."""
        if self._events.pop(fd, None) is not None:
            self._poller.unregister(fd)

    def poll(self, timeout: int) -> list[tuple[int, int]]:
        """Wait up to ``timeout`` milliseconds; return (fd, events) pairs that fired."""
        if not self._events:
            return []
        return self._poller.poll(timeout)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, fd: object) -> bool:
        return fd in self._events

    def close(self) -> None:
        """Stop watching every descriptor."""
        for fd in list(self._events):
            self.remove_fd(fd)