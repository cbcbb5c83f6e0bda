from __future__ import annotations

from typing import List, Union

from .collector import GapAwareCollector
from .types import Record, RecordStore


def export_ordered(source: Union[RecordStore, GapAwareCollector]) -> List[Record]:
    """All stored records, ascending by sequence number. Does not touch the store."""
    store = source.store if isinstance(source, GapAwareCollector) else source
    return list(store.records())
