import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def session_dir_name(host: str, port: int) -> str:
    """Filesystem-safe name for one exchange endpoint (IPv6 colons included)."""
    return f"{host.replace(':', '-').replace('/', '-')}_{int(port)}"


def setup_logging(
    level: str = "INFO",
    component: str = "abx_client",
    session: Optional[str] = None,
    base_dir: str | Path = "logs",
) -> Path:
    """
    Configure logging for one feed session:
      - Console (stderr)
      - Log file in <base_dir>/<component>/<session>/YYYY-MM-DD.log (UTC date),
        appended across runs against the same endpoint on the same day

    Returns:
      Path to the log file.
    """
    log_dir = Path(base_dir) / component
    if session:
        log_dir = log_dir / session
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{datetime.now(timezone.utc):%Y-%m-%d}.log"

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT)
    for handler in (logging.FileHandler(log_path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.getLogger(__name__).debug("Logging to %s (session=%s)", log_path, session or "-")
    return log_path
