from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from abx_core.session import SessionResult
from abx_core.types import Record


def _record_row(record: Record) -> dict:
    return {
        "symbol": record.symbol,
        "buySellIndicator": record.side.value,
        "quantity": record.quantity,
        "price": record.price,
        "sequenceNumber": record.sequence_number,
    }


def write_records_json(path: Path, records: Iterable[Record]) -> int:
    """Write records as an indented JSON array. Returns the number written."""
    rows = [_record_row(r) for r in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(rows, indent=4) + "\n", encoding="utf-8")
    return len(rows)


def write_report_json(path: Path, result: SessionResult) -> None:
    payload = {
        "records": len(result.records),
        "missing_before_backfill": result.missing_before_backfill,
        "unrecovered": [
            {"sequenceNumber": f.sequence_number, "cause": str(f.cause)} for f in result.failures
        ],
        "unexpected_sequences": result.unexpected_sequences,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
