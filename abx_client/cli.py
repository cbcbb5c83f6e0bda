from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from abx_client.logging_config import session_dir_name, setup_logging
from abx_client.settings import load_settings
from abx_client.socket_channel import SocketChannel
from abx_client.writer import write_records_json, write_report_json
from abx_core.errors import AbxError
from abx_core.session import run_session

log = logging.getLogger("abx_client")

EXIT_OK = 0
EXIT_UNRECOVERED = 1
EXIT_CHANNEL_ERROR = 2


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream and backfill the ABX trade feed to JSON")
    parser.add_argument("--config", default=None, help="YAML config file (overrides ABX_* env defaults)")
    parser.add_argument("--host", default=None, help="Exchange server host")
    parser.add_argument("--port", type=int, default=None, help="Exchange server port")
    parser.add_argument("--output", default=None, help="Path of the JSON record file")
    parser.add_argument("--report", default=None, help="Optional path for a JSON session summary")
    parser.add_argument("--log-level", default=None, help="DEBUG|INFO|WARNING|ERROR")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit 1 if any missing sequence could not be recovered",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    settings = load_settings(args.config)
    overrides = {
        "host": args.host,
        "port": args.port,
        "output_path": args.output,
        "log_level": args.log_level,
        "strict": args.strict,
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    setup_logging(
        level=settings.log_level,
        session=session_dir_name(settings.host, settings.port),
        base_dir=settings.log_dir,
    )

    try:
        with SocketChannel.connect(
            settings.host,
            settings.port,
            connect_timeout_s=settings.connect_timeout_s,
            read_timeout_s=settings.read_timeout_s,
            recv_chunk=settings.recv_chunk,
        ) as channel:
            result = run_session(channel)
    except AbxError as exc:
        log.error("Session aborted: %s", exc)
        return EXIT_CHANNEL_ERROR

    output_path = Path(settings.output_path)
    n = write_records_json(output_path, result.records)
    log.info("Wrote %d records to %s", n, output_path)
    if args.report:
        write_report_json(Path(args.report), result)

    if not result.complete:
        log.warning("%d sequence(s) unrecovered: %s", len(result.failures), result.failed_sequences)
        if settings.strict:
            return EXIT_UNRECOVERED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
