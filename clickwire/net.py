"""Buffered TCP connection used as the transport for the wire format."""

from __future__ import annotations

import contextlib
import socket
import sys
from typing import Optional

_LOCAL_NAMES = frozenset(
    {
        "localhost",
        "localhost.localdomain",
        "localhost6",
        "localhost6.localdomain6",
        "::1",
        "127.0.0.1",
    }
)

BUFFER_SIZE = 8192


def is_local_name(host: str) -> bool:
    """Whether ``host`` names the local machine."""
    return host in _LOCAL_NAMES


def _connect(host: str, port: int, timeout: float) -> socket.socket:
    flags = 0 if is_local_name(host) else getattr(socket, "AI_ADDRCONFIG", 0)
    infos = socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM, 0, flags)
    last_error: Optional[OSError] = None
    for family, socktype, proto, _, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.settimeout(timeout)
            sock.connect(address)
            sock.settimeout(None)
            return sock
        except OSError as exc:
            sock.close()
            last_error = exc
    raise ConnectionError(f"fail to connect to {host}:{port}") from last_error


class SocketConnection:
    """A connected TCP socket with buffered reads and writes.

    Writes are collected until ``flush``; reads are served from an
    internal buffer refilled from the socket.
    """

    def __init__(self, host: str, port: int, timeout: float = 5.0) -> None:
        self._sock: Optional[socket.socket] = _connect(host, port, timeout)
        self._rbuf = bytearray()
        self._wbuf = bytearray()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("socket is closed")
        return self._sock

    def _recv(self, size: int) -> bytes:
        data = self._socket().recv(size)
        if not data:
            raise ConnectionError("closed")
        return data

    def read(self, size: int) -> bytes:
        """Return between one and ``size`` bytes; raises ConnectionError when the peer closed."""
        if size <= 0:
            return b""
        if not self._rbuf:
            if size > BUFFER_SIZE // 2:
                return self._recv(size)
            self._rbuf += self._recv(BUFFER_SIZE)
        chunk = bytes(self._rbuf[:size])
        del self._rbuf[:size]
        return chunk

    def write(self, data: bytes) -> None:
        """Queue ``data``; large amounts are sent right away."""
        self._socket()
        self._wbuf += data
        if len(self._wbuf) >= BUFFER_SIZE:
            self.flush()

    def flush(self) -> None:
        """Send all queued bytes."""
        if self._wbuf:
            self._socket().sendall(bytes(self._wbuf))
            self._wbuf.clear()

    def set_tcp_keepalive(self, idle: int, interval: int, count: int) -> None:
        """Enable TCP keep-alive probes; options the platform lacks are skipped."""
        sock = self._socket()
        options = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]
        idle_option = "TCP_KEEPALIVE" if sys.platform == "darwin" else "TCP_KEEPIDLE"
        for name, value in (
            (idle_option, idle),
            ("TCP_KEEPINTVL", interval),
            ("TCP_KEEPCNT", count),
        ):
            option = getattr(socket, name, None)
            if option is not None:
                options.append((socket.IPPROTO_TCP, option, value))
        for level, option, value in options:
            with contextlib.suppress(OSError):
                sock.setsockopt(level, option, value)

    def close(self) -> None:
        """Send what is queued, if possible, and close the socket."""
        if self._sock is None:
            return
        with contextlib.suppress(OSError):
            self.flush()
        self._sock.close()
        self._sock = None
        self._rbuf.clear()
        self._wbuf.clear()

    @property
    def closed(self) -> bool:
        return self._sock is None

    def __enter__(self) -> SocketConnection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()