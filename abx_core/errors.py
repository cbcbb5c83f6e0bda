from __future__ import annotations


class AbxError(Exception):
    """Base class for feed client errors."""


class MalformedRecord(AbxError, ValueError):
    """Decode was called with bytes that cannot be a wire record."""


class InvalidArgument(AbxError, ValueError):
    """An outbound frame was requested with a value the protocol cannot carry."""


class ChannelError(AbxError):
    """Read or write failure other than a clean end-of-stream."""


class TruncatedRecord(ChannelError):
    """End-of-stream arrived in the middle of a record."""

    def __init__(self, expected: int, received: int):
        super().__init__(f"stream ended mid-record: got {received} of {expected} bytes")
        self.expected = expected
        self.received = received


class SequenceMismatch(AbxError):
    """A resend response carried a different sequence number than requested."""

    def __init__(self, requested: int, received: int):
        super().__init__(f"requested seq={requested} but server sent seq={received}")
        self.requested = requested
        self.received = received


class UnrequestedGap(AbxError):
    """A resend response raised the maximum sequence, exposing a gap never requested."""

    def __init__(self, sequence: int, max_sequence: int):
        super().__init__(f"seq={sequence} missing below new max_seq={max_sequence} and was not requested")
        self.sequence = sequence
        self.max_sequence = max_sequence
