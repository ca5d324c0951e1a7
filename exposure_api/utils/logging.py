"""
Structured Logging Configuration

One line per event: UTC timestamp, level, logger name, message, then any
snapshot context passed through ``extra=`` (``test_id``, ``category``,
``compound``) as ``key=value`` pairs.
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Sequence

CONTEXT_FIELDS = ("test_id", "category", "compound")


class StructuredFormatter(logging.Formatter):
    """Console/file formatter; colour only when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(
        self,
        use_color: bool = True,
        context_fields: Sequence[str] = CONTEXT_FIELDS,
    ):
        super().__init__()
        self.use_color = use_color
        self.context_fields = tuple(context_fields)

    def _context(self, record: logging.LogRecord) -> str:
        pairs = [
            f"{name}={getattr(record, name)}"
            for name in self.context_fields
            if getattr(record, name, None) is not None
        ]
        return f" ({', '.join(pairs)})" if pairs else ""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        line = (
            f"[{timestamp}] {record.levelname:8} [{record.name}] "
            f"{record.getMessage()}{self._context(record)}"
        )
        if self.use_color and record.levelname in self.COLORS:
            line = f"{self.COLORS[record.levelname]}{line}{self.RESET}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional path for an additional uncoloured log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter(use_color=False))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
