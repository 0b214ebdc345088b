"""
Structured logging configuration for the logo_teaser package.

Provides:
- JSON formatter for machine-readable log output
- Console formatter for human-readable output
- Timing context manager for asset loads and other slow steps
- Centralized logging setup

Extra fields may carry numpy values (camera positions, rig offsets);
both formatters turn them into plain numbers before output.

Usage:
    from logo_teaser.logging_config import setup_logging, get_logger

    setup_logging(level=logging.INFO, json_file="teaser.log.json")

    logger = get_logger(__name__)
    logger.info("Camera fitted", extra={"camera_position": camera.position})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

import numpy as np

PACKAGE_LOGGER = "logo_teaser"

# LogRecord attributes that never count as extra fields
_RESERVED_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_KEYS}


def _plain(value: Any) -> Any:
    """numpy arrays/scalars, enums and paths as built-in types."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    return value


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Output format:
        {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", ...}

    Warnings and errors also carry a "location" object.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                value = _plain(value)
                try:
                    json.dumps(value)
                except (TypeError, ValueError):
                    value = str(value)
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Console output with optional colors.

    Format: [TIME] LEVEL logger: message [extra_key=value ...]

    Floats print with 3 significant digits, short vectors as (x, y, z),
    long sequences as an item count.
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    MAX_INLINE_ITEMS = 4

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def _format_value(self, value: Any) -> str:
        value = _plain(value)
        if isinstance(value, float):
            return f"{value:.3g}"
        if isinstance(value, (list, tuple)):
            if len(value) > self.MAX_INLINE_ITEMS:
                return f"[...{len(value)} items]"
            return "(" + ", ".join(self._format_value(v) for v in value) + ")"
        return str(value)

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level_str = f"{self.COLORS[level]}{level:8}{self.COLORS['RESET']}"
        else:
            level_str = f"{level:8}"

        logger_name = record.name
        prefix = PACKAGE_LOGGER + "."
        if logger_name.startswith(prefix):
            logger_name = logger_name[len(prefix):]

        line = f"[{time_str}] {level_str} {logger_name}: {record.getMessage()}"

        if self.show_extra:
            extras = [f"{k}={self._format_value(v)}" for k, v in _extra_fields(record).items()]
            if extras:
                line += " [" + ", ".join(extras) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the ``logo_teaser`` logger.

    Existing handlers are replaced, so calling this twice does not
    duplicate output. The package logger stops propagating to root.

    Args:
        level: Minimum log level (default INFO)
        json_file: Optional path for JSON log file
        console: Enable stderr output (default True)
        use_colors: Use ANSI colors in console (default True)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (typically ``__name__``)."""
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log start, completion and failure of an operation.

    Durations are reported in milliseconds, the unit of the frame clock.

    Example:
        with log_timing(logger, "Loading model", url=url) as info:
            vertices, faces = read_stl(path)
            info["vertices"] = len(vertices)

    Yields:
        dict the caller may fill with fields for the completion record
    """
    timing_info: Dict[str, Any] = {}
    start = time.perf_counter()

    logger.log(level, "Starting: %s", operation, extra={
        "event": "start",
        "operation": operation,
        **extra_fields
    })

    try:
        yield timing_info
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.error("Failed: %s (%.1f ms) - %s", operation, elapsed_ms, e, extra={
            "event": "error",
            "operation": operation,
            "elapsed_ms": elapsed_ms,
            "error": str(e),
            **extra_fields
        })
        raise

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    timing_info["elapsed_ms"] = elapsed_ms
    logger.log(level, "Completed: %s (%.1f ms)", operation, elapsed_ms, extra={
        "event": "complete",
        "operation": operation,
        **extra_fields,
        **timing_info
    })


def configure_default_logging(verbose: bool = False) -> logging.Logger:
    """DEBUG when verbose, INFO otherwise, colored console output."""
    level = logging.DEBUG if verbose else logging.INFO
    return setup_logging(level=level, console=True, use_colors=True)
