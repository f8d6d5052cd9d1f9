"""
Logging configuration for praxis.

Library modules only create module-level loggers; handlers are
installed by the CLI through ``configure_logging``.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Optional


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data)


def configure_logging(
    level: str = "WARNING",
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the ``praxis`` logger hierarchy.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit JSON lines instead of plain text
        log_file: Optional file path for log output
    """
    logger = logging.getLogger("praxis")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
