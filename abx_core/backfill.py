from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .channel import Channel, read_exact
from .codec import RECORD_SIZE, decode_record, encode_resend_request
from .collector import GapAwareCollector
from .errors import AbxError, ChannelError, SequenceMismatch, UnrequestedGap

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResendFailure:
    sequence_number: int
    cause: Exception


@dataclass
class BackfillReport:
    recovered: List[int] = field(default_factory=list)
    failures: List[ResendFailure] = field(default_factory=list)

    @property
    def failed_sequences(self) -> List[int]:
        return [f.sequence_number for f in self.failures]


class BackfillDriver:
    """Re-requests missing records one at a time over the session channel.

    Strict request/response: exactly one resend is outstanding at any moment.
    Each sequence number gets a single attempt; a failure is recorded and the
    pass moves on.
    """

    def __init__(self, channel: Channel, collector: GapAwareCollector):
        self.channel = channel
        self.collector = collector

    def _targets(self, missing: Iterable[int]) -> List[int]:
        store = self.collector.store
        return [seq for seq in sorted(set(missing)) if seq not in store]

    def _fetch_one(self, seq: int) -> None:
        request = encode_resend_request(seq)
        self.channel.send_all(request)
        frame = read_exact(self.channel, RECORD_SIZE)
        if frame is None:
            raise ChannelError("stream closed before resend response")
        record = decode_record(frame)
        self.collector.add(record)
        if record.sequence_number != seq:
            raise SequenceMismatch(requested=seq, received=record.sequence_number)

    def run(self, missing: Iterable[int]) -> BackfillReport:
        targets = self._targets(missing)
        report = BackfillReport()
        if not targets:
            return report

        start_max = self.collector.max_sequence
        log.info("Backfill start: %d missing sequence(s)", len(targets))
        for seq in targets:
            try:
                self._fetch_one(seq)
            except AbxError as exc:
                log.warning("Resend seq=%d failed: %s", seq, exc)
                report.failures.append(ResendFailure(seq, exc))
                continue
            report.recovered.append(seq)

        # A mismatched response to one request may carry a record an earlier
        # request failed to get.
        store = self.collector.store
        late = [f.sequence_number for f in report.failures if f.sequence_number in store]
        if late:
            report.failures = [f for f in report.failures if f.sequence_number not in store]
            report.recovered = sorted(report.recovered + late)

        # A response above the drained maximum opens gaps nobody asked for.
        requested = set(targets)
        for seq in range(start_max + 1, self.collector.max_sequence + 1):
            if seq in store or seq in requested:
                continue
            exc = UnrequestedGap(seq, self.collector.max_sequence)
            log.warning("Resend pass left seq=%d unrecovered: %s", seq, exc)
            report.failures.append(ResendFailure(seq, exc))
        report.failures.sort(key=lambda f: f.sequence_number)

        log.info(
            "Backfill done: recovered=%d failed=%d",
            len(report.recovered),
            len(report.failures),
        )
        return report
