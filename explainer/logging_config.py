"""
Logging setup shared by the API server and the dashboard.
Diagnostic detail goes here only; users see short generic messages.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone


class StructuredFormatter(logging.Formatter):
    """One line per record: UTC timestamp, level, logger name, message."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).isoformat()
        line = f"[{timestamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure the root logger with a stdout handler (and optionally a file handler).
    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
