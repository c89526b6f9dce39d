"""Command that loads a configuration and runs the HTTP server."""

from __future__ import annotations

import signal
import sys
from collections.abc import Sequence

from webserv.config_parser import parse_config
from webserv.server_manager import ServerManager
from webserv.utils import ConfigError, log_error, log_info

DEFAULT_CONFIG = "webserv.conf"
_RULE = "=" * 40


def _install_signal_handlers(manager: ServerManager) -> dict[int, object]:
    def handle(signum: int, frame: object) -> None:
        print("\nShutdown signal received...", flush=True)
        manager.shutdown()

    previous: dict[int, object] = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        previous[signum] = signal.signal(signum, handle)
    if hasattr(signal, "SIGPIPE"):
        previous[signal.SIGPIPE] = signal.signal(signal.SIGPIPE, signal.SIG_IGN)
    return previous


def _restore_signal_handlers(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        if handler is not None:
            signal.signal(signum, handler)


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the configuration file named by the first argument until interrupted."""
    args = list(sys.argv[1:] if argv is None else argv)
    config_file = args[0] if args else DEFAULT_CONFIG

    print(_RULE)
    print("       Webserv HTTP Server v1.0        ")
    print(_RULE + "\n", flush=True)

    try:
        parser = parse_config(config_file)
    except ConfigError as exc:
        log_error(str(exc))
        return 1
    if not parser.servers:
        log_error("No server configurations found")
        return 1

    manager = ServerManager(parser.servers)
    try:
        manager.initialize()
    except RuntimeError as exc:
        log_error(f"Failed to initialize server manager: {exc}")
        return 1

    print("\n" + _RULE, flush=True)
    log_info(f"  Servers: {manager.server_count}")
    log_info("Server Manager is running...")
    print(_RULE + "\n", flush=True)

    previous = _install_signal_handlers(manager)
    try:
        manager.run()
    finally:
        _restore_signal_handlers(previous)

    print("\n" + _RULE)
    print("       Server Stopped Successfully      ")
    print(_RULE, flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())