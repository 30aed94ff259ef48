"""Bind environment variables to tagged dataclass fields.

Re-exports public symbols so callers can write::

    from py_envbind import Binder, env_field
"""

from py_envbind.binder import Binder, NamingConfig, bind
from py_envbind.coercion import FieldKind
from py_envbind.env import Environment, capture_environment, parse_entries
from py_envbind.errors import (
    EnvBindError,
    InvalidTagError,
    InvalidValueError,
    MandatoryValueMissingError,
    NilTargetError,
    NotARecordError,
    UnsupportedKindError,
)
from py_envbind.logging import LogEntry, Logger, LogLevel
from py_envbind.tags import FieldTag, Requirement, env_field, format_tag, parse_tag

__all__ = [
    "Binder",
    "EnvBindError",
    "Environment",
    "FieldKind",
    "FieldTag",
    "InvalidTagError",
    "InvalidValueError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "MandatoryValueMissingError",
    "NamingConfig",
    "NilTargetError",
    "NotARecordError",
    "Requirement",
    "UnsupportedKindError",
    "bind",
    "capture_environment",
    "env_field",
    "format_tag",
    "parse_entries",
    "parse_tag",
]
