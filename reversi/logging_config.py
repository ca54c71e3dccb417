"""Logging configuration for the Reversi engine, agents and scripts."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_JSON_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}'

# Marks handlers installed here so repeated calls replace them instead of stacking.
_HANDLER_TAG = "_reversi_handler"


def setup_logging(
    level: str = "INFO",
    format_json: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure the root logger for a training or play session.

    Args:
        level: The logging level name (DEBUG shows per-move learning feedback)
        format_json: Emit one JSON object per line instead of human-readable text
        log_file: Optional file that receives the same records as stdout
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(
        _JSON_FORMAT if format_json else _TEXT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="a"))

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name (usually __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)


__all__ = ["get_logger", "setup_logging"]
