"""
Utility helpers: logging setup.

Вспомогательные функции: настройка логирования.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from .config import LoggingConfig


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging(logging_cfg: LoggingConfig | None = None) -> None:
    """
    Configure application-wide logging.

    Консоль всегда; файл с ротацией только если задан LOGS_DIR.
    """
    if logging_cfg is None:
        logging_cfg = LoggingConfig()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging_cfg.log_level.upper())
    root.handlers.clear()
    root.addHandler(console_handler)

    if logging_cfg.logs_dir is not None:
        logs_dir = logging_cfg.logs_dir
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            logs_dir / "nct_checker.log",
            maxBytes=logging_cfg.max_bytes,
            backupCount=logging_cfg.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


__all__ = ["setup_logging"]
