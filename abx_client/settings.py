from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(raw) -> bool:
    # YAML hands back real bools and ints; env and quoted YAML values are strings.
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes", "y")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return _parse_bool(raw)


ABX_HOST = os.getenv("ABX_HOST", "127.0.0.1")
ABX_PORT = _env_int("ABX_PORT", 3000)
ABX_CONNECT_TIMEOUT_S = _env_float("ABX_CONNECT_TIMEOUT_S", 10.0)
# 0 disables the socket read timeout (block forever).
ABX_READ_TIMEOUT_S = _env_float("ABX_READ_TIMEOUT_S", 30.0)
ABX_RECV_CHUNK = _env_int("ABX_RECV_CHUNK", 4096)
ABX_OUTPUT_PATH = os.getenv("ABX_OUTPUT_PATH", "output.json")
ABX_LOG_LEVEL = os.getenv("ABX_LOG_LEVEL", "INFO")
ABX_LOG_DIR = os.getenv("ABX_LOG_DIR", "logs")
ABX_STRICT = _env_bool("ABX_STRICT", False)


@dataclass(frozen=True)
class ClientSettings:
    host: str = ABX_HOST
    port: int = ABX_PORT
    connect_timeout_s: float = ABX_CONNECT_TIMEOUT_S
    read_timeout_s: float = ABX_READ_TIMEOUT_S
    recv_chunk: int = ABX_RECV_CHUNK
    output_path: str = ABX_OUTPUT_PATH
    log_level: str = ABX_LOG_LEVEL
    log_dir: str = ABX_LOG_DIR
    strict: bool = ABX_STRICT


def _from_env() -> ClientSettings:
    # Read module globals at call time so tests can monkeypatch them.
    return ClientSettings(
        host=ABX_HOST,
        port=ABX_PORT,
        connect_timeout_s=ABX_CONNECT_TIMEOUT_S,
        read_timeout_s=ABX_READ_TIMEOUT_S,
        recv_chunk=ABX_RECV_CHUNK,
        output_path=ABX_OUTPUT_PATH,
        log_level=ABX_LOG_LEVEL,
        log_dir=ABX_LOG_DIR,
        strict=ABX_STRICT,
    )


def load_config(path: str | Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config {path} must be a mapping")
    return cfg


def load_settings(config_path: Optional[str | Path] = None) -> ClientSettings:
    """Environment defaults, overlaid by an optional YAML config file."""
    settings = _from_env()
    if config_path is None:
        return settings

    cfg = load_config(config_path)
    known = {f.name for f in fields(ClientSettings)}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ValueError(f"unknown config keys in {config_path}: {', '.join(unknown)}")

    casts = {"port": int, "recv_chunk": int, "connect_timeout_s": float, "read_timeout_s": float}
    overrides = {}
    for key, value in cfg.items():
        if key in casts:
            value = casts[key](value)
        elif key == "strict":
            value = _parse_bool(value)
        else:
            value = str(value)
        overrides[key] = value
    return replace(settings, **overrides)
