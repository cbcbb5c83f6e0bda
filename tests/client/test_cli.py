from __future__ import annotations

import json
import socket
import threading

import pytest

import abx_client.cli as cli_mod
import abx_client.settings as settings_mod
from tests._channels import frames


class OneShotServer:
    """Accepts one connection, waits for the stream-all request, sends a payload, closes."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self.request = b""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        conn, _ = self._sock.accept()
        with conn:
            while len(self.request) < 2:
                chunk = conn.recv(2 - len(self.request))
                if not chunk:
                    break
                self.request += chunk
            conn.sendall(self.payload)

    def close(self) -> None:
        self._thread.join(timeout=5)
        self._sock.close()


@pytest.fixture(autouse=True)
def _quiet_cli(monkeypatch, tmp_path):
    monkeypatch.setattr(cli_mod, "setup_logging", lambda **kw: tmp_path / "cli.log")
    monkeypatch.setattr(settings_mod, "ABX_CONNECT_TIMEOUT_S", 2.0)
    monkeypatch.setattr(settings_mod, "ABX_READ_TIMEOUT_S", 2.0)
    monkeypatch.setattr(settings_mod, "ABX_STRICT", False)


def _run(server: OneShotServer, tmp_path, *extra: str) -> int:
    try:
        return cli_mod.main(
            ["--host", "127.0.0.1", "--port", str(server.port), "--output", str(tmp_path / "output.json"), *extra]
        )
    finally:
        server.close()


def test_cli_complete_stream_writes_output(tmp_path):
    server = OneShotServer(frames(1, 2, 3))
    assert _run(server, tmp_path, "--report", str(tmp_path / "report.json")) == cli_mod.EXIT_OK
    assert server.request == b"\x01\x00"
    rows = json.loads((tmp_path / "output.json").read_text(encoding="utf-8"))
    assert [r["sequenceNumber"] for r in rows] == [1, 2, 3]
    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["unrecovered"] == []


def test_cli_unrecovered_gap_after_close_is_reported(tmp_path):
    # The server closes after streaming, so the resend for 3 cannot be answered.
    server = OneShotServer(frames(1, 2, 4, 5))
    assert _run(server, tmp_path, "--report", str(tmp_path / "report.json")) == cli_mod.EXIT_OK
    rows = json.loads((tmp_path / "output.json").read_text(encoding="utf-8"))
    assert [r["sequenceNumber"] for r in rows] == [1, 2, 4, 5]
    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert [u["sequenceNumber"] for u in report["unrecovered"]] == [3]


def test_cli_strict_exits_nonzero_on_unrecovered(tmp_path):
    server = OneShotServer(frames(1, 3))
    assert _run(server, tmp_path, "--strict") == cli_mod.EXIT_UNRECOVERED
    assert (tmp_path / "output.json").exists()


def test_cli_truncated_stream_is_fatal(tmp_path):
    server = OneShotServer(frames(1) + frames(2)[:10])
    assert _run(server, tmp_path) == cli_mod.EXIT_CHANNEL_ERROR
    assert not (tmp_path / "output.json").exists()


def test_cli_connect_refused_is_fatal(tmp_path):
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    rc = cli_mod.main(["--host", "127.0.0.1", "--port", str(port), "--output", str(tmp_path / "o.json")])
    assert rc == cli_mod.EXIT_CHANNEL_ERROR


def test_cli_bad_side_byte_in_stream_is_fatal(tmp_path):
    payload = bytearray(frames(1, 2))
    payload[17 + 4] = ord("X")
    server = OneShotServer(bytes(payload))
    assert _run(server, tmp_path) == cli_mod.EXIT_CHANNEL_ERROR
    assert not (tmp_path / "output.json").exists()


def test_cli_logs_under_endpoint_session(monkeypatch, tmp_path):
    seen = {}

    def fake_setup_logging(**kw):
        seen.update(kw)
        return tmp_path / "cli.log"

    monkeypatch.setattr(cli_mod, "setup_logging", fake_setup_logging)
    server = OneShotServer(frames(1))
    assert _run(server, tmp_path) == cli_mod.EXIT_OK
    assert seen["session"] == f"127.0.0.1_{server.port}"
