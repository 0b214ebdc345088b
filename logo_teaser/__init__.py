"""
logo_teaser: a framed 3D logo that follows the pointer and idles when left alone.

The application loop lives in logo_teaser.app; main.py is the CLI.
"""

from logo_teaser.logging_config import (
    setup_logging,
    get_logger,
    configure_default_logging,
    log_timing,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_default_logging",
    "log_timing",
]
