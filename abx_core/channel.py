from __future__ import annotations

from typing import Optional, Protocol

from .errors import TruncatedRecord


class Channel(Protocol):
    """Connected duplex byte stream.

    ``recv`` returns 1..max_bytes bytes, or ``b""`` once the peer has closed the
    stream. Both methods raise ``ChannelError`` on any other failure.
    """

    def recv(self, max_bytes: int) -> bytes:
        ...

    def send_all(self, data: bytes) -> None:
        ...


def read_exact(channel: Channel, n: int) -> Optional[bytes]:
    """Read exactly ``n`` bytes, accumulating short reads.

    Returns None on end-of-stream at a frame boundary (nothing read yet).
    Raises TruncatedRecord if the stream ends after a partial frame.
    """
    buf = bytearray()
    while len(buf) < n:
        chunk = channel.recv(n - len(buf))
        if not chunk:
            if not buf:
                return None
            raise TruncatedRecord(expected=n, received=len(buf))
        buf.extend(chunk)
    return bytes(buf)
