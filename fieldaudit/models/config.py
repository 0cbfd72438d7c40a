"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AuditConfig:
    """Change detection configuration.

    The exclusion tuples extend the built-in exclusion sets; they never
    replace them.
    """

    excluded_fields: tuple[str, ...] = ()
    nested_excluded_fields: tuple[str, ...] = ()
    nested_target_kind: str = "paragraph"
    timezone: str = ""  # IANA zone name; empty means local time


@dataclass
class ChangeLogConfig:
    """Change log sink configuration."""

    backend: str = "memory"
    sqlite_path: str = "field_change_audit.db"


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"  # json | console


@dataclass
class FieldAuditConfig:
    """Top-level fieldaudit configuration."""

    audit: AuditConfig = field(default_factory=AuditConfig)
    change_log: ChangeLogConfig = field(default_factory=ChangeLogConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
