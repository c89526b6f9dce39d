"""A small poll-based HTTP/1.1 server with nginx-style configuration, request parsing and routing."""

__version__ = "1.0.0"