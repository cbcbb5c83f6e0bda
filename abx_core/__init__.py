"""I/O-free protocol core for the ABX feed client."""

from .backfill import BackfillDriver, BackfillReport, ResendFailure
from .channel import Channel, read_exact
from .codec import (
    RECORD_SIZE,
    decode_record,
    encode_record,
    encode_resend_request,
    encode_stream_all_request,
)
from .collector import GapAwareCollector
from .errors import (
    AbxError,
    ChannelError,
    InvalidArgument,
    MalformedRecord,
    SequenceMismatch,
    TruncatedRecord,
    UnrequestedGap,
)
from .exporter import export_ordered
from .session import SessionResult, run_session
from .types import Record, RecordStore, Side

__all__ = [
    "AbxError",
    "BackfillDriver",
    "BackfillReport",
    "Channel",
    "ChannelError",
    "GapAwareCollector",
    "InvalidArgument",
    "MalformedRecord",
    "RECORD_SIZE",
    "Record",
    "RecordStore",
    "ResendFailure",
    "SequenceMismatch",
    "SessionResult",
    "Side",
    "TruncatedRecord",
    "UnrequestedGap",
    "decode_record",
    "encode_record",
    "encode_resend_request",
    "encode_stream_all_request",
    "export_ordered",
    "read_exact",
    "run_session",
]
