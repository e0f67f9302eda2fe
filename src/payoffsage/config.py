"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

KNOWN_STRATEGIES = ("avalanche", "snowball", "custom")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer setting, rejecting junk values early."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "PayoffSage"
    LOG_FILENAME = "payoffsage.log"
    PAID_OFF_THRESHOLD = 0.01

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("PAYOFFSAGE_DEV_MODE", default=True)
        self.MAX_SIMULATION_MONTHS = _env_int("PAYOFFSAGE_MAX_MONTHS", 1200)
        self.DEFAULT_STRATEGY = os.getenv("PAYOFFSAGE_DEFAULT_STRATEGY", "avalanche").strip().lower()
        self.CURRENCY_SYMBOL = os.getenv("PAYOFFSAGE_CURRENCY_SYMBOL", "£")
        if self.DEFAULT_STRATEGY not in KNOWN_STRATEGIES:
            raise ValueError(
                f"PAYOFFSAGE_DEFAULT_STRATEGY must be one of {', '.join(KNOWN_STRATEGIES)}."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where log files live."""

        data_root = os.getenv("PAYOFFSAGE_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Fall back to user-local storage when the configured location is read-only.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Quiet configuration for the test-suite."""

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
