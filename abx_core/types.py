from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

from sortedcontainers import SortedDict

from .errors import MalformedRecord


class Side(str, Enum):
    BUY = "B"
    SELL = "S"

    @property
    def label(self) -> str:
        return "Buy" if self is Side.BUY else "Sell"

    @classmethod
    def from_wire(cls, raw: bytes) -> "Side":
        try:
            return cls(raw.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise MalformedRecord(f"unknown buy/sell indicator {raw!r}") from exc


@dataclass(frozen=True)
class Record:
    """One trade event as decoded off the wire (host byte order)."""

    symbol: str
    side: Side
    quantity: int
    price: int
    sequence_number: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "symbol": self.symbol,
            "side": self.side.label,
            "quantity": self.quantity,
            "price": self.price,
            "sequenceNumber": self.sequence_number,
        }


class RecordStore:
    """Records keyed by sequence number, one per key, kept in ascending order.

    A single instance is shared by the collector, the backfill driver and the
    exporter for the lifetime of a session.
    """

    def __init__(self) -> None:
        self._records: SortedDict = SortedDict()
        self._max_sequence = 0

    def put(self, record: Record) -> Optional[Record]:
        """Store a record (last write wins). Returns the record it replaced."""
        seq = record.sequence_number
        previous = self._records.get(seq)
        self._records[seq] = record
        if seq > self._max_sequence:
            self._max_sequence = seq
        return previous

    def get(self, seq: int) -> Optional[Record]:
        return self._records.get(seq)

    @property
    def max_sequence(self) -> int:
        return self._max_sequence

    def sequences(self) -> List[int]:
        return list(self._records.keys())

    def records(self) -> Iterator[Record]:
        return iter(self._records.values())

    def __contains__(self, seq: object) -> bool:
        return seq in self._records

    def __len__(self) -> int:
        return len(self._records)
