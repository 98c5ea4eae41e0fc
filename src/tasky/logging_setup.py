# src/tasky/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """Pass tasky records; anything else, py.warnings included, only at ERROR and up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tasky" or record.name.startswith("tasky."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasky",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send tasky logs to stderr (WARNING and up, so the prompt stays clean) and
    everything to <log_dir>/tasky.log. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasky.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Handlers are replaced, not stacked.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # warnings.warn() lands under "py.warnings"; the console filter hides it below ERROR.
    logging.captureWarnings(True)
    return log_file
