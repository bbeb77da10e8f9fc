"""Stream framing and the non-blocking connection to the game server."""

from __future__ import annotations

import select
import socket

from .defines import BUF_SIZE, PORT_NUM
from .protocol import HEADER_SIZE, ProtocolError


class PacketBuffer:
    """Collects stream bytes and releases them in whole packets."""

    def __init__(self) -> None:
        self._pending = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes of an incomplete packet still waiting for the rest."""
        return bytes(self._pending)

    def feed(self, data: bytes) -> bytes:
        """Add received bytes; return every complete packet now available."""
        self._pending += data
        end = 0
        while len(self._pending) - end >= HEADER_SIZE:
            size = self._pending[end]
            if size < HEADER_SIZE:
                raise ProtocolError(f"packet size {size} is smaller than a header")
            if len(self._pending) - end < size:
                break
            end += size
        complete = bytes(self._pending[:end])
        del self._pending[:end]
        return complete


class Connection:
    """A non-blocking TCP connection that hands back whole packets."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._buffer = PacketBuffer()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def _require(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("not connected to the server")
        return self._sock

    def connect(self, host: str, port: int = PORT_NUM, timeout: float = 5.0) -> None:
        """Connect, waiting at most ``timeout`` seconds, then switch to non-blocking."""
        if self._sock is not None:
            raise ConnectionError("already connected")
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as exc:
            raise ConnectionError(f"cannot connect to {host}:{port}: {exc}") from exc
        sock.setblocking(False)
        self._sock = sock
        self._buffer = PacketBuffer()

    def send(self, data: bytes) -> None:
        """Send all of ``data``."""
        sock = self._require()
        view = memoryview(bytes(data))
        while view:
            try:
                sent = sock.send(view)
            except BlockingIOError:
                select.select([], [sock], [])
                continue
            except OSError as exc:
                raise ConnectionError(f"send failed: {exc}") from exc
            view = view[sent:]

    def recv(self) -> bytes:
        """Read what has arrived; return the complete packets, or b"" if none."""
        sock = self._require()
        try:
            chunk = sock.recv(BUF_SIZE)
        except BlockingIOError:
            return b""
        except OSError as exc:
            raise ConnectionError(f"receive failed: {exc}") from exc
        if not chunk:
            raise ConnectionError("the server closed the connection")
        return self._buffer.feed(chunk)

    def close(self) -> None:
        """Close the socket; safe to call more than once."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()