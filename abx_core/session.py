from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .backfill import BackfillDriver, ResendFailure
from .channel import Channel
from .codec import encode_stream_all_request
from .collector import GapAwareCollector
from .exporter import export_ordered
from .types import Record

log = logging.getLogger(__name__)


@dataclass
class SessionResult:
    records: List[Record] = field(default_factory=list)
    failures: List[ResendFailure] = field(default_factory=list)
    missing_before_backfill: List[int] = field(default_factory=list)
    unexpected_sequences: List[int] = field(default_factory=list)

    @property
    def failed_sequences(self) -> List[int]:
        return [f.sequence_number for f in self.failures]

    @property
    def complete(self) -> bool:
        return not self.failures


def run_session(channel: Channel) -> SessionResult:
    """Stream all records, backfill the gaps, return the ordered result.

    Errors while requesting or draining the initial stream propagate; backfill
    failures are reported in the result. The channel is left open.
    """
    collector = GapAwareCollector()

    channel.send_all(encode_stream_all_request())
    collector.drain_all(channel)

    missing = collector.missing_sequences()
    if missing:
        log.info("Gaps detected: %d missing in [1, %d]", len(missing), collector.max_sequence)
    report = BackfillDriver(channel, collector).run(missing)

    result = SessionResult(
        records=export_ordered(collector),
        failures=report.failures,
        missing_before_backfill=missing,
        unexpected_sequences=list(collector.unexpected_sequences),
    )
    if result.failures:
        log.warning("Unrecovered sequences: %s", result.failed_sequences)
    return result
