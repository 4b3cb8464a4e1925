from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "nre-tracker.log"

_configured = False


def setup_logging(level_name: str = "INFO", log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure the root logger once per process.

    Console output always; a rotating file (5MB x 5) under ``log_dir`` when
    given. Returns the log file path, if any.
    """
    global _configured

    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if _configured:
        return (log_dir / LOG_FILE_NAME) if log_dir else None

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(formatter)
    ch.setLevel(level)
    root.addHandler(ch)

    logfile: Optional[Path] = None
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            logfile = log_dir / LOG_FILE_NAME
            fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=5, encoding="utf-8")
            fh.setFormatter(formatter)
            fh.setLevel(level)
            root.addHandler(fh)
        except OSError as exc:
            logging.getLogger(__name__).warning("File logging disabled (%s): %s", log_dir, exc)
            logfile = None

    _configured = True
    logging.getLogger(__name__).info("Logging initialized at %s; file: %s", logging.getLevelName(level), logfile)
    return logfile
