# barbershop/config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .data import CLOSED_WEEKDAY

DEFAULT_DATABASE_URL = "sqlite:///./barbershop.db"


def _parse_origins(raw: str) -> tuple[str, ...]:
    # CORS_ORIGINS=* or a comma-separated list
    parts = [p.strip() for p in raw.split(",")]
    origins = tuple(p for p in parts if p)
    return origins or ("*",)


def _parse_closed_weekday(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return CLOSED_WEEKDAY
    raw = raw.strip()
    if not raw:
        return None
    try:
        day = int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid CLOSED_WEEKDAY value: {raw!r}. Expected 0-6.") from e
    if not (0 <= day <= 6):
        raise RuntimeError(f"Invalid CLOSED_WEEKDAY value: {raw!r}. Expected 0-6.")
    return day


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected an integer.") from e


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as e:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Expected a number.") from e
    if value < 0:
        raise RuntimeError(f"Invalid {name} value: {raw!r}. Must not be negative.")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    cors_origins: tuple[str, ...] = ("*",)
    closed_weekday: Optional[int] = CLOSED_WEEKDAY
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5000

    # Booking client
    api_base_url: str = "http://localhost:5000"
    success_notice_seconds: float = 3.0


def load_settings(dotenv_path: str | None = None) -> Settings:
    # dotenv_path allows overriding in tests
    load_dotenv(dotenv_path=dotenv_path, override=False)

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise RuntimeError(f"Invalid LOG_LEVEL value: {log_level!r}")

    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "*")),
        closed_weekday=_parse_closed_weekday(os.getenv("CLOSED_WEEKDAY")),
        log_level=log_level,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", "5000"),
        api_base_url=os.getenv("API_BASE_URL", "http://localhost:5000").rstrip("/"),
        success_notice_seconds=_float_env("SUCCESS_NOTICE_SECONDS", "3"),
    )
