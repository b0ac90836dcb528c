# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/logging_setup.py

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.logging import RichHandler

from .display import console


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the package logger.

    Console output goes through the rich stderr console so stdout stays clean
    for the credentials.
    With ``log_file`` set, every record is also written there as one JSON
    object per line.
    """
    logger = logging.getLogger("manifest_broker")
    logger.setLevel(logging.DEBUG)

    # Prevent logs from propagating to the root logger
    logger.propagate = False

    console_level = getattr(logging, level.upper(), logging.WARNING)
    rich_handler = next((h for h in logger.handlers if isinstance(h, RichHandler)), None)
    if rich_handler is None:
        rich_handler = RichHandler(console=console, show_time=False, show_path=False)
        logger.addHandler(rich_handler)
    rich_handler.setLevel(console_level)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Add handler only if it hasn't been added before
        if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            handler = RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,  # 5 MB
                backupCount=2,
            )
            handler.setFormatter(JsonFormatter())
            handler.setLevel(logging.DEBUG)
            logger.addHandler(handler)

    return logger
