"""Centralized logging configuration for mysterymap.

Usage in any module:
    from mysterymap.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.info("Loaded %d venues", count)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED = False

LOG_DIR = Path(__file__).resolve().parents[3] / "logs"
LOG_FILE = LOG_DIR / "mysterymap.log"

LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that survives consoles which cannot encode venue names."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            encoding = getattr(stream, "encoding", None) or "utf-8"
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                stream.write(
                    msg.encode(encoding, errors="backslashreplace").decode(encoding)
                    + self.terminator
                )
            self.flush()
        except Exception:
            self.handleError(record)


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return Path(log_file)
    env_path = os.environ.get("MYSTERYMAP_LOG_FILE")
    return Path(env_path) if env_path else LOG_FILE


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> None:
    """Attach console + file handlers to the ``mysterymap`` logger.

    Only the first call has an effect, so modules can call it freely.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    root = logging.getLogger("mysterymap")
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = SafeStreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    # File logging is best-effort: read-only deployments just skip it.
    target = _resolve_log_file(log_file)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(target, encoding="utf-8", delay=True)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)
    except OSError:
        pass


def get_logger(name: str) -> logging.Logger:
    """Return a logger, making sure the ``mysterymap`` handlers exist first."""
    setup_logging()
    return logging.getLogger(name)
