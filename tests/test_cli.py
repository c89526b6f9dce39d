import os
import signal
import socket
import threading
import time

from webserv.cli import main

CONFIG_TEMPLATE = """
server {
    listen 127.0.0.1:PORT;
    server_name localhost;
    root /var/www;
    index index.html;
    client_max_body_size 1M;
    error_page 404 /404.html;
    location / {
        methods GET;
    }
}
"""


def _write_config(tmp_path, port):
    path = tmp_path / "webserv.conf"
    path.write_text(CONFIG_TEMPLATE.replace("PORT", str(port)))
    return path


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_missing_config_file_fails(tmp_path, capsys):
    assert main([str(tmp_path / "absent.conf")]) == 1
    assert "Failed to read configuration file" in capsys.readouterr().err


def test_invalid_config_fails(tmp_path, capsys):
    path = tmp_path / "bad.conf"
    path.write_text("bogus directive;\n")
    assert main([str(path)]) == 1
    assert "Invalid directive" in capsys.readouterr().err


def test_unavailable_port_fails(tmp_path):
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    holder.bind(("127.0.0.1", 0))
    holder.listen(1)
    try:
        path = _write_config(tmp_path, holder.getsockname()[1])
        assert main([str(path)]) == 1
    finally:
        holder.close()


def test_serves_until_interrupted(tmp_path, capsys):
    port = _free_port()
    path = _write_config(tmp_path, port)
    replies = []

    def client_then_interrupt():
        deadline = time.monotonic() + 5
        while time.monotonic() < deadline:
            try:
                with socket.create_connection(("127.0.0.1", port), timeout=2) as sock:
                    sock.sendall(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
                    data = b""
                    while chunk := sock.recv(4096):
                        data += chunk
                    replies.append(data)
                    break
            except OSError:
                time.sleep(0.05)
        os.kill(os.getpid(), signal.SIGINT)

    thread = threading.Thread(target=client_then_interrupt, daemon=True)
    thread.start()
    assert main([str(path)]) == 0
    thread.join(5)
    assert replies == [b"HTTP/1.1 200 OK\r\n\r\n"]
    out = capsys.readouterr().out
    assert "Server Stopped Successfully" in out
    assert "Shutdown signal received..." in out