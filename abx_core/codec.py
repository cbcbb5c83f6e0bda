"""Wire codec for the ABX feed.

All multi-byte integers are big-endian. Inbound records are 17 bytes:

    symbol   4 bytes ASCII, null-padded
    side     1 byte  'B' | 'S'
    quantity int32
    price    int32
    sequence int32

Outbound frames are the 2-byte stream-all request and the 5-byte resend
request. Nothing here does I/O.
"""

from __future__ import annotations

import struct

from .errors import InvalidArgument, MalformedRecord
from .types import Record, Side

CALL_STREAM_ALL = 1
CALL_RESEND = 2

SYMBOL_WIDTH = 4
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_RECORD = struct.Struct(">4sciii")
_RESEND = struct.Struct(">Bi")

RECORD_SIZE = _RECORD.size  # 17


def _decode_symbol(raw: bytes) -> str:
    cut = raw.split(b"\x00", 1)[0]
    return cut.decode("ascii", errors="replace").rstrip(" ")


def decode_record(data: bytes) -> Record:
    if len(data) != RECORD_SIZE:
        raise MalformedRecord(f"record must be {RECORD_SIZE} bytes, got {len(data)}")
    symbol, side, quantity, price, seq = _RECORD.unpack(data)
    return Record(
        symbol=_decode_symbol(symbol),
        side=Side.from_wire(side),
        quantity=quantity,
        price=price,
        sequence_number=seq,
    )


def encode_record(record: Record) -> bytes:
    raw_symbol = record.symbol.encode("ascii")
    if len(raw_symbol) > SYMBOL_WIDTH:
        raise InvalidArgument(f"symbol {record.symbol!r} longer than {SYMBOL_WIDTH} bytes")
    for name in ("quantity", "price", "sequence_number"):
        value = getattr(record, name)
        if not INT32_MIN <= value <= INT32_MAX:
            raise InvalidArgument(f"{name}={value} does not fit in int32")
    return _RECORD.pack(
        raw_symbol.ljust(SYMBOL_WIDTH, b"\x00"),
        Side(record.side).value.encode("ascii"),
        record.quantity,
        record.price,
        record.sequence_number,
    )


def encode_stream_all_request() -> bytes:
    return bytes((CALL_STREAM_ALL, 0))


def encode_resend_request(seq: int) -> bytes:
    if seq < 1:
        raise InvalidArgument(f"resend sequence must be >= 1 (got {seq})")
    if seq > INT32_MAX:
        raise InvalidArgument(f"resend sequence {seq} does not fit in int32")
    return _RESEND.pack(CALL_RESEND, seq)
