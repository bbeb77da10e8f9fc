import socket
import time

import pytest

from mmoclient.framing import Connection, PacketBuffer
from mmoclient.protocol import Leave, MoveNotice, ProtocolError, split_packets


def _packets():
    return Leave(1).encode() + MoveNotice(2, 3, 4).encode()


def test_feed_whole_packets():
    buffer = PacketBuffer()
    data = _packets()
    assert buffer.feed(data) == data
    assert buffer.pending == b""


def test_feed_byte_by_byte():
    buffer = PacketBuffer()
    data = _packets()
    out = b"".join(buffer.feed(data[i:i + 1]) for i in range(len(data)))
    assert out == data
    assert buffer.pending == b""


def test_feed_keeps_partial_tail():
    buffer = PacketBuffer()
    first = Leave(1).encode()
    second = MoveNotice(2, 3, 4).encode()
    assert buffer.feed(first + second[:5]) == first
    assert buffer.pending == second[:5]
    assert buffer.feed(second[5:]) == second


def test_feed_output_splits_cleanly():
    buffer = PacketBuffer()
    data = _packets()
    out = buffer.feed(data[:-1])
    assert list(split_packets(out)) == [Leave(1).encode()]


def test_feed_rejects_zero_size():
    with pytest.raises(ProtocolError):
        PacketBuffer().feed(b"\x00\x01")


def test_send_without_connect():
    with pytest.raises(ConnectionError):
        Connection().send(b"\x02\x18")


def test_connect_refused():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(ConnectionError):
        Connection().connect("127.0.0.1", port, 1.0)


@pytest.fixture
def linked():
    server = socket.create_server(("127.0.0.1", 0))
    conn = Connection()
    conn.connect("127.0.0.1", server.getsockname()[1], 2.0)
    peer, _ = server.accept()
    yield conn, peer
    conn.close()
    peer.close()
    server.close()


def _recv_until(conn, deadline=2.0):
    end = time.monotonic() + deadline
    collected = b""
    while time.monotonic() < end:
        collected += conn.recv()
        if collected:
            return collected
        time.sleep(0.01)
    return collected


def test_send_reaches_peer(linked):
    conn, peer = linked
    payload = Leave(5).encode()
    conn.send(payload)
    peer.settimeout(2.0)
    assert peer.recv(1024) == payload


def test_recv_returns_whole_packets(linked):
    conn, peer = linked
    assert conn.recv() == b""
    data = _packets()
    peer.sendall(data)
    received = b""
    end = time.monotonic() + 2.0
    while received != data and time.monotonic() < end:
        received += _recv_until(conn, 0.2)
    assert received == data


def test_recv_after_peer_closes(linked):
    conn, peer = linked
    peer.close()
    with pytest.raises(ConnectionError):
        end = time.monotonic() + 2.0
        while time.monotonic() < end:
            conn.recv()
            time.sleep(0.01)