# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Structured logging setup for WGSL import resolution.

Records are written one JSON object per line. Records logged about a
resolution pass carry the entry point and pass facts as top-level fields
(see `entry_context`), so a log can be filtered per entry:

    logger.info("Resolved", extra=entry_context("main.wgsl", modules=3))
    -> {"timestamp": ..., "message": "Resolved", "entry": "main.wgsl", "modules": 3}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

DEFAULT_LOG_DIRNAME = ".wgsl_imports_logs"
LOG_FILE_PREFIX = "wgsl_imports_"

# Fields of a record that callers may not override through entry_context()
RESERVED_FIELDS = ("timestamp", "level", "logger", "message", "exception")


def entry_context(entry: str, **fields: Any) -> Dict[str, Dict[str, Any]]:
    """Build the `extra` argument tagging a record with its entry point.

    Args:
        entry: Entry point of the resolution pass the record is about.
        **fields: Further JSON-compatible facts about the pass.

    Returns:
        Mapping suitable for the `extra` keyword of logging calls.
    """
    extra_fields = {"entry": entry}
    extra_fields.update(fields)
    return {"extra_fields": extra_fields}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            for key, value in extra_fields.items():
                if key not in RESERVED_FIELDS:
                    log_data[key] = value

        # Paths and other non-JSON values are logged by their text
        return json.dumps(log_data, default=str)


def resolve_level(log_level: Union[int, str]) -> int:
    """Turn a level name from the configuration (or a level number) into a number.

    Raises:
        ValueError: If the name is not a logging level.
    """
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: Union[int, str] = logging.INFO,
    console_output: bool = True,
) -> Path:
    """Set up structured logging for the application.

    Args:
        log_dir: Directory for log files. If None, uses .wgsl_imports_logs/
        log_level: Logging level number or name (default: INFO)
        console_output: Whether to also output to stderr (default: True)

    Returns:
        Path of the log file records are written to.
    """
    if log_dir is None:
        log_dir = Path.cwd() / DEFAULT_LOG_DIRNAME
    level = resolve_level(log_level)

    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # One file per UTC day, appended to by every run of that day
    log_file = log_dir / f"{LOG_FILE_PREFIX}{datetime.now(timezone.utc).strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(file_handler)

    # Console output goes to stderr so stdout stays machine-readable
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)

    logging.info(f"Logging initialized. Log file: {log_file}")
    return log_file
