# src/daily_focus/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Longest matching prefix wins; anything else (py.warnings, libraries) needs ERROR.
CONSOLE_THRESHOLDS: dict[str, int] = {
    "daily_focus.": logging.NOTSET,
    "daily_focus.storage.": logging.WARNING,  # every save logs at DEBUG
}


class _ConsoleNoiseFilter(logging.Filter):
    """Keep stderr quiet enough that the y/n prompts stay readable."""

    def filter(self, record: logging.LogRecord) -> bool:
        threshold = logging.ERROR
        matched = ""
        for prefix, level in CONSOLE_THRESHOLDS.items():
            if record.name.startswith(prefix) and len(prefix) > len(matched):
                matched, threshold = prefix, level
        return record.levelno >= threshold


def setup_logging(*, log_dir: str | Path, console_level: int = logging.WARNING) -> Path:
    """Filtered stderr at console_level, everything to <log_dir>/daily_focus.log. Returns that path."""
    log_file = Path(log_dir) / "daily_focus.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    logfile = logging.FileHandler(log_file, encoding="utf-8")

    # force=True drops handlers from an earlier call.
    logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT, handlers=[console, logfile], force=True)
    logging.captureWarnings(True)
    return log_file
