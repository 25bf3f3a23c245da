"""Logging setup for structured JSON logs and optional rotation.

Provides `setup_logging(AppConfig)` which configures root logging, a JSON
formatter for stdout, and, when a logs directory is configured, a rotating
file handler with size and backup count driven by configuration.
"""

from __future__ import annotations

import logging
import logging.handlers
import os

from pythonjsonlogger import jsonlogger

from .config import AppConfig


def setup_logging(config: AppConfig) -> None:
    """Configure global logging with JSON formatter and rotation.

    Args:
        config: Application configuration to source levels and rotation limits.
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers (avoid duplicates on reload)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    stdout_handler = logging.StreamHandler()
    json_formatter = jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level"},
    )
    stdout_handler.setFormatter(json_formatter)
    root_logger.addHandler(stdout_handler)

    if config.logs_dir:
        os.makedirs(config.logs_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(config.logs_dir, "tagstash.log"),
            maxBytes=config.log_rotate_max_bytes,
            backupCount=config.log_rotate_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    # PTB logs every getUpdates round-trip at INFO through httpx
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    logging.getLogger("tagstash").info(
        "logging configured",
        extra={
            "log_level": config.log_level,
            "logs_dir": config.logs_dir,
            "rotate_max_bytes": config.log_rotate_max_bytes,
            "rotate_backup_count": config.log_rotate_backup_count,
        },
    )
