from __future__ import annotations

import logging
import socket
from typing import Optional

from abx_core.errors import ChannelError

log = logging.getLogger(__name__)


class SocketChannel:
    """Blocking TCP implementation of the core ``Channel`` protocol.

    Owns the socket: use as a context manager so it is closed on every exit
    path, including a fatal ChannelError mid-session.
    """

    def __init__(self, sock: socket.socket, recv_chunk: int = 4096):
        self._sock: Optional[socket.socket] = sock
        self.recv_chunk = max(1, int(recv_chunk))

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        connect_timeout_s: float = 10.0,
        read_timeout_s: float = 30.0,
        recv_chunk: int = 4096,
    ) -> "SocketChannel":
        try:
            sock = socket.create_connection((host, port), timeout=connect_timeout_s)
        except OSError as exc:
            raise ChannelError(f"connect to {host}:{port} failed: {exc}") from exc
        sock.settimeout(read_timeout_s if read_timeout_s > 0 else None)
        log.info("Connected to %s:%d", host, port)
        return cls(sock, recv_chunk=recv_chunk)

    def _require_open(self) -> socket.socket:
        if self._sock is None:
            raise ChannelError("channel is closed")
        return self._sock

    def recv(self, max_bytes: int) -> bytes:
        sock = self._require_open()
        try:
            return sock.recv(min(max_bytes, self.recv_chunk))
        except OSError as exc:
            raise ChannelError(f"recv failed: {exc}") from exc

    def send_all(self, data: bytes) -> None:
        sock = self._require_open()
        try:
            sock.sendall(data)
        except OSError as exc:
            raise ChannelError(f"send failed: {exc}") from exc

    @property
    def closed(self) -> bool:
        return self._sock is None

    def close(self) -> None:
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError:
            log.exception("Socket close failed")

    def __enter__(self) -> "SocketChannel":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
