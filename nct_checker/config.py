"""
Config loading via Pydantic v2 and python-dotenv.

Загрузка конфигурации из окружения и .env-файлов, базовая валидация.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, MutableMapping, Optional, Tuple

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field


BASE_DIR = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent

# Порядок важен: более специфичный файл идёт первым и выигрывает
ENV_FILES: Tuple[Path, ...] = (
    BASE_DIR / ".env.local",
    BASE_DIR / ".env",
    PACKAGE_DIR / ".env",
)

START_URL = "https://www.ncts.ie/"

CENTERS: Tuple[str, ...] = (
    "Greenhills (Exit 11,M50)",
    "Naas",
    "Fonthill",
    "Deansgrange",
    "Navan",
)

_TRUTHY = ("1", "true", "yes")


class ConfigError(ValueError):
    """Raised when a required setting is missing."""


class MonitorConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    window_days: int = Field(default=14, ge=0)
    centers: Tuple[str, ...] = CENTERS


class BrowserConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_url: str = START_URL
    headless: bool = True
    run_timeout: float = Field(default=120.0, gt=0)
    action_timeout_ms: int = Field(default=30000, gt=0)
    consent_timeout_ms: int = Field(default=5000, ge=0)
    consent_delay_ms: int = Field(default=1000, ge=0)
    # networkidle не ловит клиентский рендер дат
    settle_delay_ms: int = Field(default=3000, ge=0)
    reveal_delay_ms: int = Field(default=2000, ge=0)
    reset_delay_ms: int = Field(default=1000, ge=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO")
    logs_dir: Optional[Path] = None
    max_bytes: int = Field(default=5 * 1024 * 1024)  # 5 MB
    backup_count: int = Field(default=5)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    car_registration: str = Field(min_length=1)
    booking_id: str = Field(min_length=1)
    slack_webhook_url: Optional[str] = None
    automated: bool = False
    monitor: MonitorConfig = MonitorConfig()
    browser: BrowserConfig = BrowserConfig()
    logging: LoggingConfig = LoggingConfig()


def load_env_files(
    paths: Iterable[Path] = ENV_FILES,
    environ: Optional[MutableMapping[str, str]] = None,
) -> List[Path]:
    """
    Merge key=value files into ``environ`` without overriding existing keys.

    Значения из процесса всегда важнее файлов; более ранний файл важнее позднего.
    Returns the files that were actually read.
    """
    if environ is None:
        environ = os.environ

    loaded: List[Path] = []
    for path in paths:
        path = Path(path)
        if not path.is_file():
            continue
        for key, value in dotenv_values(path).items():
            if value is None or key in environ:
                continue
            environ[key] = value
        loaded.append(path)
    return loaded


def _flag(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


def load_settings(
    environ: Optional[MutableMapping[str, str]] = None,
    env_files: Optional[Iterable[Path]] = None,
) -> Settings:
    """
    Build immutable settings from the environment.

    Raises ConfigError if CAR_REGISTRATION or BOOKING_ID is missing and
    ValidationError if any other value is invalid.
    """
    if environ is None:
        environ = os.environ
    load_env_files(ENV_FILES if env_files is None else env_files, environ)

    car_registration = (environ.get("CAR_REGISTRATION") or "").strip()
    booking_id = (environ.get("BOOKING_ID") or "").strip()
    missing = [
        name
        for name, value in (("CAR_REGISTRATION", car_registration), ("BOOKING_ID", booking_id))
        if not value
    ]
    if missing:
        raise ConfigError(f"Missing {' or '.join(missing)} in environment variables.")

    logs_dir = (environ.get("LOGS_DIR") or "").strip()

    monitor = MonitorConfig(window_days=environ.get("WINDOW_DAYS") or 14)
    browser = BrowserConfig(
        headless=_flag(environ.get("HEADLESS"), default=True),
        run_timeout=environ.get("RUN_TIMEOUT") or 120,
    )
    logging_cfg = LoggingConfig(
        log_level=environ.get("LOG_LEVEL") or "INFO",
        logs_dir=Path(logs_dir) if logs_dir else None,
    )
    return Settings(
        car_registration=car_registration,
        booking_id=booking_id,
        slack_webhook_url=(environ.get("SLACK_WEBHOOK_URL") or "").strip() or None,
        automated=_flag(environ.get("GITHUB_ACTIONS")),
        monitor=monitor,
        browser=browser,
        logging=logging_cfg,
    )


__all__ = [
    "BASE_DIR",
    "CENTERS",
    "ENV_FILES",
    "BrowserConfig",
    "ConfigError",
    "LoggingConfig",
    "MonitorConfig",
    "Settings",
    "load_env_files",
    "load_settings",
]
