"""Shared helpers: logging, string handling, config tokenising and paths."""

from __future__ import annotations

import re
import string
import sys
from pathlib import Path

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_LENGTH_REQUIRED = 411
HTTP_PAYLOAD_TOO_LARGE = 413
HTTP_URI_TOO_LONG = 414
HTTP_NOT_IMPLEMENTED = 501
HTTP_VERSION_NOT_SUPPORTED = 505

MAX_URI_LENGTH = 8192
MAX_HEADER_SIZE = 8192

ALLOWED_METHODS = frozenset({"GET", "POST", "DELETE", "PUT", "PATCH", "HEAD", "OPTIONS"})

_WHITESPACE = " \t\r\n"
_BLOCK_CHARS = "{;}"
_TO_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_SIZE_UNITS = {"K": 1024, "M": 1024**2, "G": 1024**3}
_LEADING_NUMBER = re.compile(r"\s*\+?(\d+)")
_REPEATED_SLASHES = re.compile(r"/{2,}")


class ConfigError(ValueError):
    """Raised when configuration text or a directive is invalid."""


def log_info(message: str) -> None:
    """Print an informational message in blue on standard output."""
    print(f"\033[34m[INFO]: {message}\033[0m", flush=True)


def log_error(message: str) -> None:
    """Print an error message in red on standard error."""
    print(f"\033[31m[ERROR]: {message}\033[0m", file=sys.stderr, flush=True)


def to_upper_words(text: str) -> str:
    """Upper-case ASCII letters only."""
    return text.translate(_TO_UPPER)


def to_lower_words(text: str) -> str:
    """Lower-case ASCII letters only."""
    return text.translate(_TO_LOWER)


def trim_spaces(text: str) -> str:
    """Strip spaces, tabs, carriage returns and newlines from both ends."""
    return text.strip(_WHITESPACE)


def trim_spaces_comments(text: str) -> str:
    """Strip leading whitespace and cut a trailing '#' comment.

    A line that starts with '#' yields an empty string. Text before a
    comment keeps its trailing whitespace.
    """
    stripped = text.lstrip(_WHITESPACE)
    if not stripped or stripped[0] == "#":
        return ""
    head, sep, _ = stripped.partition("#")
    return head if sep else stripped.rstrip(_WHITESPACE)


def clean_char_end(value: str, char: str) -> str:
    """Drop one trailing ``char`` from ``value`` if present."""
    return value[:-1] if value.endswith(char) else value


def split_by_char(line: str, separator: str) -> tuple[str, str] | None:
    """Split at the first ``separator``; None when it does not occur."""
    key, sep, value = line.partition(separator)
    return (key, value) if sep else None


def split_by_string(line: str, delimiter: str) -> list[str]:
    """Split ``line`` on every occurrence of ``delimiter``."""
    return line.split(delimiter)


def config_text_to_lines(text: str) -> list[str]:
    """Break configuration text into one statement per entry.

    Statements end at '{', ';' or '}'. A block opener keeps a trailing
    " {", a directive keeps its ';', and each '}' becomes its own entry.
    """
    lines: list[str] = []
    for raw_line in text.split("\n"):
        current: list[str] = []
        for ch in raw_line:
            if ch not in _BLOCK_CHARS:
                current.append(ch)
                continue
            token = trim_spaces_comments("".join(current))
            if token:
                suffix = " {" if ch == "{" else ";" if ch == ";" else ""
                lines.append(token + suffix)
            elif ch == "{":
                if not lines:
                    raise ConfigError("'{' without a block name")
                lines[-1] += " {"
            if ch == "}":
                lines.append("}")
            current = []
        token = trim_spaces_comments("".join(current))
        if token:
            lines.append(token)
    return lines


def read_config_lines(path: str | Path) -> list[str]:
    """Read a configuration file and tokenise it into statements."""
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {path}") from exc
    return config_text_to_lines(text)


def check_allowed_method(method: str) -> bool:
    """Tell whether ``method`` is one of the recognised HTTP methods."""
    return method in ALLOWED_METHODS


def parse_key_value(line: str) -> tuple[str, list[str]]:
    """Split a statement into its first word and the remaining words.

    A trailing ';' is removed from every value. Raises ValueError when the
    line has no key or no value.
    """
    tokens = line.split()
    if not tokens:
        raise ValueError("empty statement")
    key, *rest = tokens
    if not rest:
        raise ValueError(f"'{key}' has no value")
    return key, [clean_char_end(token, ";") for token in rest]


def convert_max_body_size(max_body: str) -> int:
    """Convert a size such as ``10``, ``8K``, ``1M`` or ``2G`` to bytes."""
    if not max_body:
        return 0
    unit = max_body[-1]
    number = max_body if unit in string.digits else max_body[:-1]
    match = _LEADING_NUMBER.match(number)
    size = int(match.group(1)) if match else 0
    return size * _SIZE_UNITS.get(unit.upper(), 1)


def normalize_path(path: str) -> str:
    """Ensure a leading '/' and collapse runs of slashes."""
    if not path:
        return "/"
    collapsed = _REPEATED_SLASHES.sub("/", path)
    return collapsed if collapsed.startswith("/") else "/" + collapsed


def path_starts_with(path: str, prefix: str) -> bool:
    """Tell whether ``path`` begins with ``prefix``."""
    return path.startswith(prefix)