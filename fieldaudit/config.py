"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fieldaudit.models.config import (
    APIConfig,
    AuditConfig,
    ChangeLogConfig,
    FieldAuditConfig,
    LogConfig,
)
from fieldaudit.observability.logging import LOG_FORMATS

_BACKENDS = {"memory", "sqlite"}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"FIELDAUDIT_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in _env(key).split(",") if part.strip())


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def _validate_backend(value: str) -> str:
    if value.lower() not in _BACKENDS:
        raise ValueError(f"Invalid change log backend: {value}. Must be one of {_BACKENDS}")
    return value.lower()


def _validate_timezone(value: str) -> str:
    if value:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Invalid timezone: {value}") from exc
    return value


def load_config() -> FieldAuditConfig:
    """Load configuration from FIELDAUDIT_* environment variables."""
    return FieldAuditConfig(
        audit=AuditConfig(
            excluded_fields=_env_list("EXCLUDED_FIELDS"),
            nested_excluded_fields=_env_list("NESTED_EXCLUDED_FIELDS"),
            nested_target_kind=_env("NESTED_TARGET_KIND", "paragraph"),
            timezone=_validate_timezone(_env("TIMEZONE", "")),
        ),
        change_log=ChangeLogConfig(
            backend=_validate_backend(_env("CHANGE_LOG_BACKEND", "memory")),
            sqlite_path=_env("CHANGE_LOG_SQLITE_PATH", "field_change_audit.db"),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
