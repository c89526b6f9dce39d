import socket
import time

import pytest

from webserv.client import Client


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    left.setblocking(False)
    yield left, right
    left.close()
    right.close()


def test_receive_data_buffers_everything(pair):
    left, right = pair
    client = Client(left)
    right.sendall(b"GET / HTTP/1.1\r\n")
    right.sendall(b"Host: example.com\r\n\r\n")
    time.sleep(0.05)
    payload = b"GET / HTTP/1.1\r\nHost: example.com\r\n\r\n"
    assert client.receive_data() == len(payload)
    assert client.received == payload


def test_receive_large_payload_in_chunks(pair):
    left, right = pair
    client = Client(left)
    payload = b"x" * 5000
    right.sendall(payload)
    time.sleep(0.05)
    count = client.receive_data()
    assert count == len(client.received)
    assert payload.startswith(client.received)


def test_receive_without_data_returns_zero(pair):
    left, _ = pair
    client = Client(left)
    assert client.receive_data() == 0
    assert client.received == b""


def test_receive_after_peer_closed_returns_zero(pair):
    left, right = pair
    client = Client(left)
    right.close()
    assert client.receive_data() == 0


def test_clear_received(pair):
    left, right = pair
    client = Client(left)
    right.sendall(b"data")
    time.sleep(0.05)
    client.receive_data()
    client.clear_received()
    assert client.received == b""


def test_send_queued_response(pair):
    left, right = pair
    client = Client(left)
    response = "HTTP/1.1 200 OK\r\n\r\n"
    client.queue_response(response)
    assert client.pending == response.encode()
    sent = client.send_data()
    assert sent == len(response)
    assert client.pending == b""
    assert right.recv(len(response)) == response.encode()


def test_queue_response_replaces_previous(pair):
    left, _ = pair
    client = Client(left)
    client.queue_response(b"first")
    client.queue_response(b"second")
    assert client.pending == b"second"


def test_send_with_nothing_queued(pair):
    left, _ = pair
    client = Client(left)
    assert client.send_data() == 0


def test_timeout(pair):
    left, _ = pair
    client = Client(left)
    assert client.is_timed_out(30) is False
    client.last_activity = time.monotonic() - 100
    assert client.is_timed_out(30) is True


def test_close_is_idempotent(pair):
    left, _ = pair
    client = Client(left)
    assert client.fileno() == left.fileno()
    client.close()
    client.close()
    assert client.fileno() == -1
    assert client.receive_data() == 0


def test_context_manager_closes(pair):
    left, _ = pair
    with Client(left) as client:
        assert client.fileno() == left.fileno()
    assert client.sock is None