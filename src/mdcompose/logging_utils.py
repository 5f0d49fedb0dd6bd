"""Logging setup for applications that embed mdcompose."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdcompose/logging_utils.py

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER_NAME = "mdcompose"

# marks handlers installed here so a second call replaces only those
_HANDLER_FLAG = "_mdcompose_handler"


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach handlers to the ``mdcompose`` logger.

    The library itself never installs handlers. Call this from an
    application to see resolver warnings and, at DEBUG level, per-image and
    timing messages. Calling it again replaces the handlers added by the
    previous call and leaves any other handlers alone.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "DEBUG").
    log_file : str, optional
        Also append log records to this file.
    trace_mode : bool, default False
        Include timestamps and logger names in every record.
    stream : TextIO, optional
        Console stream, ``sys.stderr`` when omitted.

    Returns
    -------
    logging.Logger
        The configured ``mdcompose`` logger.

    """
    resolved_level = log_level if isinstance(log_level, int) else getattr(logging, str(log_level).upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    for handler in [h for h in package_logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        package_logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S")
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)

    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    return package_logger
