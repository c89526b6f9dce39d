"""Building HTTP/1.1 responses."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HttpResponse:
    """An HTTP response with status, headers and body."""

    status_code: int = 200
    status_message: str = "OK"
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def set_status(self, code: int, message: str) -> None:
        self.status_code = code
        self.status_message = message

    def add_header(self, key: str, value: str) -> None:
        """Set a header, replacing any earlier value under the same key."""
        self.headers[key] = value

    def set_body(self, content: str) -> None:
        """Set the body and its Content-Length, counted in UTF-8 bytes."""
        self.body = content
        self.add_header("Content-Length", str(len(content.encode("utf-8"))))

    def serialize(self) -> str:
        """Render the status line, headers in key order, a blank line and the body."""
        lines = [f"HTTP/1.1 {self.status_code} {self.status_message}\r\n"]
        lines.extend(f"{key}: {self.headers[key]}\r\n" for key in sorted(self.headers))
        lines.append("\r\n")
        lines.append(self.body)
        return "".join(lines)