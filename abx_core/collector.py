from __future__ import annotations

import logging
from typing import List, Optional

from .channel import Channel, read_exact
from .codec import RECORD_SIZE, decode_record
from .types import Record, RecordStore

log = logging.getLogger(__name__)


class GapAwareCollector:
    """Drains the initial stream-all pass and reports sequence gaps.

    Gaps are derived from ``[1, max_sequence]`` after the fact, so the order in
    which records arrive does not matter.
    """

    def __init__(self, store: Optional[RecordStore] = None):
        self.store = store if store is not None else RecordStore()
        self.unexpected_sequences: List[int] = []

    @property
    def max_sequence(self) -> int:
        return self.store.max_sequence

    def add(self, record: Record) -> None:
        seq = record.sequence_number
        if seq <= 0:
            log.warning("Unexpected non-positive sequence number %d (symbol=%r)", seq, record.symbol)
            self.unexpected_sequences.append(seq)
        previous = self.store.put(record)
        if previous is not None:
            log.debug("Replaced record for seq=%d", seq)

    def drain_all(self, channel: Channel) -> int:
        """Read records until the server closes the stream.

        Returns the number of records read. ChannelError (and TruncatedRecord)
        propagate; anything stored before the failure stays stored.
        """
        count = 0
        while True:
            frame = read_exact(channel, RECORD_SIZE)
            if frame is None:
                break
            self.add(decode_record(frame))
            count += 1
        log.info("Drain complete: records=%d max_seq=%d", count, self.max_sequence)
        return count

    def missing_sequences(self) -> List[int]:
        return [seq for seq in range(1, self.max_sequence + 1) if seq not in self.store]
